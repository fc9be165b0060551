"""Chunk bookkeeping and the streaming system."""
from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING, Callable, Iterator

from tick_lumina.components import Lumina
from tick_lumina.config import FieldConfig
from tick_lumina.ship import find_ship
from tick_lumina.types import ChunkCoord, NodeId, Vec2
from tick_lumina.worldgen import generate_chunk

if TYPE_CHECKING:
    from tick_lumina.types import TickContext
    from tick_lumina.world import World

logger = logging.getLogger(__name__)

_OFFSETS = [(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)]


class ChunkMap:
    """Generated chunks and the node ids each one spawned.

    A coordinate is generated at most once until :meth:`clear`.
    """

    def __init__(self, config: FieldConfig | None = None) -> None:
        self._config = config if config is not None else FieldConfig()
        self._created: dict[ChunkCoord, list[NodeId]] = {}

    @property
    def config(self) -> FieldConfig:
        return self._config

    def chunk_of(self, position: Vec2) -> ChunkCoord:
        size = self._config.chunk_size
        return (math.floor(position[0] / size), math.floor(position[1] / size))

    def neighborhood(self, coord: ChunkCoord) -> list[ChunkCoord]:
        return [(coord[0] + dx, coord[1] + dy) for dx, dy in _OFFSETS]

    def created(self, coord: ChunkCoord) -> bool:
        return coord in self._created

    def coords(self) -> frozenset[ChunkCoord]:
        return frozenset(self._created)

    def nodes_in(self, coord: ChunkCoord) -> list[NodeId]:
        return list(self._created.get(coord, ()))

    def ensure(self, world: World, coord: ChunkCoord, rng: random.Random) -> bool:
        """Generate ``coord`` into ``world`` unless it already exists.

        Returns True when the chunk was generated by this call.
        """
        if coord in self._created:
            return False
        ids: list[NodeId] = []
        for init in generate_chunk(coord, rng, self._config):
            ids.append(world.spawn(Lumina(position=init.position, chunk=coord)))
        self._created[coord] = ids
        logger.debug("Generated chunk %s with %d nodes", coord, len(ids))
        return True

    def place(self, world: World, position: Vec2) -> NodeId:
        """Spawn a node by hand. Its chunk counts as created from then on."""
        coord = self.chunk_of(position)
        nid = world.spawn(Lumina(position=position, chunk=coord))
        self._created.setdefault(coord, []).append(nid)
        return nid

    def nodes_around(self, position: Vec2) -> Iterator[NodeId]:
        """Node ids in the 3x3 chunk block around ``position``."""
        for coord in self.neighborhood(self.chunk_of(position)):
            yield from self._created.get(coord, ())

    def clear(self) -> None:
        self._created.clear()

    def __len__(self) -> int:
        return len(self._created)


def make_chunk_system(chunks: ChunkMap) -> Callable[[World, TickContext], None]:
    """Generate every missing chunk in the 3x3 block around the ship."""

    def chunk_system(world: World, ctx: TickContext) -> None:
        found = find_ship(world)
        if found is None:
            return
        _, ship = found
        for coord in chunks.neighborhood(chunks.chunk_of(ship.position)):
            chunks.ensure(world, coord, ctx.random)

    return chunk_system
