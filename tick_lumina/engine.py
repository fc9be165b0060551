"""Engine - core loop, ordered systems and run hooks."""

import logging
import os
import random
from typing import Callable

from tick_lumina.clock import Clock
from tick_lumina.types import System, TickContext
from tick_lumina.world import World

logger = logging.getLogger(__name__)


class Engine:
    """Runs registered systems once per tick, in registration order.

    Systems share one seeded ``random.Random`` through the tick context.
    A system may call ``ctx.request_stop()``; the remaining systems of
    that tick are skipped and :attr:`stop_requested` stays set until the
    next :meth:`step` or :meth:`run`.
    """

    def __init__(self, tps: int = 60, seed: int | None = None) -> None:
        self._clock = Clock(tps)
        self._world = World()
        self._systems: list[System] = []
        self._start_hooks: list[Callable[[World, TickContext], None]] = []
        self._stop_hooks: list[Callable[[World, TickContext], None]] = []
        self._stop_requested: bool = False

        if seed is None:
            seed = int.from_bytes(os.urandom(8), "big")
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def world(self) -> World:
        return self._world

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def random(self) -> random.Random:
        return self._rng

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def add_system(self, system: System) -> None:
        self._systems.append(system)

    def on_start(self, hook: Callable[[World, TickContext], None]) -> None:
        self._start_hooks.append(hook)

    def on_stop(self, hook: Callable[[World, TickContext], None]) -> None:
        self._stop_hooks.append(hook)

    def _request_stop(self) -> None:
        self._stop_requested = True

    def _tick(self, dt: float | None = None) -> None:
        self._clock.advance(dt)
        ctx = self._clock.context(self._request_stop, self._rng)
        for system in self._systems:
            system(self._world, ctx)
            if self._stop_requested:
                logger.debug("Stop requested during tick %d", ctx.tick_number)
                break

    def start(self) -> None:
        self._stop_requested = False
        ctx = self._clock.context(self._request_stop, self._rng)
        for hook in self._start_hooks:
            hook(self._world, ctx)

    def stop(self) -> None:
        ctx = self._clock.context(self._request_stop, self._rng)
        for hook in self._stop_hooks:
            hook(self._world, ctx)

    def step(self, dt: float | None = None) -> None:
        self._stop_requested = False
        self._tick(dt)

    def run(self, n: int) -> None:
        self.start()
        for _ in range(n):
            self._tick()
            if self._stop_requested:
                break
        self.stop()
