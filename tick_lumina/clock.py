"""Clock and TickContext for the simulation loop."""

import random
from typing import Callable

from tick_lumina.types import TickContext


class Clock:
    """Counts ticks and elapsed time.

    Ticks are fixed-step by default (``1 / tps``); a caller that owns a
    frame timer may pass an explicit ``dt`` to :meth:`advance` instead.
    """

    def __init__(self, tps: int) -> None:
        if tps <= 0:
            raise ValueError("tps must be positive")
        self._tps = tps
        self._dt = 1.0 / tps
        self._last_dt = self._dt
        self._tick_number = 0
        self._elapsed = 0.0

    @property
    def tps(self) -> int:
        return self._tps

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def last_dt(self) -> float:
        return self._last_dt

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def elapsed(self) -> float:
        return self._elapsed

    def advance(self, dt: float | None = None) -> int:
        if dt is None:
            dt = self._dt
        elif dt < 0:
            raise ValueError("dt must not be negative")
        self._last_dt = dt
        self._elapsed += dt
        self._tick_number += 1
        return self._tick_number

    def context(self, stop_fn: Callable[[], None], rng: random.Random) -> TickContext:
        return TickContext(
            tick_number=self._tick_number,
            dt=self._last_dt,
            elapsed=self._elapsed,
            request_stop=stop_fn,
            random=rng,
        )

    def reset(self) -> None:
        self._tick_number = 0
        self._elapsed = 0.0
        self._last_dt = self._dt
