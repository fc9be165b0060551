"""Shared type aliases, tick context and errors for tick-lumina."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

EntityId = int
NodeId = EntityId
ChunkCoord = tuple[int, int]
Vec2 = tuple[float, float]


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    elapsed: float
    request_stop: Callable[[], None]
    random: _random.Random


class DeadEntityError(KeyError):
    """Raised when operating on an entity that is not alive."""

    def __init__(self, entity_id: int, message: str) -> None:
        self.entity_id = entity_id
        super().__init__(message)


class RunStateError(RuntimeError):
    """Raised when the run lifecycle is driven out of order."""


if TYPE_CHECKING:
    from tick_lumina.world import World

System = Callable[["World", TickContext], None]
