"""Chunk population from a distance-decayed spawn probability field."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass

from tick_lumina.config import FieldConfig
from tick_lumina.types import ChunkCoord, Vec2


@dataclass(frozen=True)
class NodeInit:
    """Placement of one node produced by :func:`generate_chunk`.

    ``local`` is relative to the chunk centre; ``position`` is the world
    position the node entity is spawned at.
    """

    cell: tuple[int, int]
    local: Vec2
    position: Vec2


def spawn_probability(distance: float, decay_rate: float) -> float:
    """Chance that a cell ``distance`` cells from the origin holds a node.

    Falls from 0.81 at the origin towards a floor of 0.01.
    """
    return math.exp(-decay_rate * distance) * 0.8 + 0.01


def chunk_origin(coord: ChunkCoord, chunk_size: float) -> Vec2:
    """World position of the chunk's lower-left corner."""
    return (coord[0] * chunk_size, coord[1] * chunk_size)


def chunk_center(coord: ChunkCoord, chunk_size: float) -> Vec2:
    half = chunk_size / 2.0
    return (coord[0] * chunk_size + half, coord[1] * chunk_size + half)


def generate_chunk(
    coord: ChunkCoord, rng: random.Random, config: FieldConfig | None = None,
) -> list[NodeInit]:
    """Return node placements for chunk ``coord``.

    Cells are visited x-major. Each cell draws one ``rng.random()``
    sample and spawns when it is below :func:`spawn_probability`; a
    spawned node then draws its x and y jitter with ``rng.uniform``.
    Calling this twice for the same chunk generates it twice; callers
    that need at-most-once use :class:`tick_lumina.chunks.ChunkMap`.
    """
    if config is None:
        config = FieldConfig()
    cells = config.cells_per_chunk
    cell_size = config.cell_size
    half = config.chunk_size / 2.0
    origin = chunk_origin(coord, config.chunk_size)

    placements: list[NodeInit] = []
    for xi in range(cells):
        for yi in range(cells):
            gx = coord[0] * cells + xi
            gy = coord[1] * cells + yi
            p = spawn_probability(math.hypot(gx, gy), config.decay_rate)
            if rng.random() >= p:
                continue
            jx = rng.uniform(-config.jitter, config.jitter) * cell_size
            jy = rng.uniform(-config.jitter, config.jitter) * cell_size
            local = (
                (0.5 + xi) * cell_size + jx - half,
                (0.5 + yi) * cell_size + jy - half,
            )
            position = (origin[0] + half + local[0], origin[1] + half + local[1])
            placements.append(NodeInit(cell=(gx, gy), local=local, position=position))
    return placements
