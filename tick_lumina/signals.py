"""Per-tick event queue between simulation phases.

Signals published during one phase are held until :meth:`SignalBus.flush`
is called by a later phase of the same tick, so handlers always run in
publish order and never re-enter the publishing system.
"""
from __future__ import annotations

from typing import Any, Callable

ATTACHMENT_CHANGED = "attachment_changed"

_Handler = Callable[[str, dict[str, Any]], None]


class SignalBus:

    def __init__(self) -> None:
        self._subscribers: dict[str, list[_Handler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, signal_name: str, handler: _Handler) -> None:
        self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(self, signal_name: str, handler: _Handler) -> None:
        handlers = self._subscribers.get(signal_name)
        if handlers is None:
            return
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, signal_name: str, **data: Any) -> None:
        self._queue.append((signal_name, data))

    def pending(self) -> list[tuple[str, dict[str, Any]]]:
        return list(self._queue)

    def flush(self) -> int:
        """Dispatch queued signals in publish order. Returns the count."""
        snapshot = self._queue
        self._queue = []
        for signal_name, data in snapshot:
            for handler in self._subscribers.get(signal_name, []):
                handler(signal_name, data)
        return len(snapshot)

    def clear(self) -> None:
        self._queue.clear()
