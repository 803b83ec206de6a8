"""Observable state shared between the controllers and the UI."""

from __future__ import annotations

import dataclasses
import threading
from typing import Any, Callable, List

from models import StateSnapshot

Listener = Callable[[StateSnapshot], None]


class AppState:
    """Holds the current snapshot and notifies listeners on change.

    Readers only ever see frozen ``StateSnapshot`` values. Writes go through
    ``update`` and are made by RecordingController (recording fields) and
    CommandChannel (connection field). Listeners must not block on other
    threads that write to the state.
    """

    def __init__(self, initial: StateSnapshot | None = None) -> None:
        self._lock = threading.RLock()
        self._snapshot = initial or StateSnapshot()
        self._listeners: List[Listener] = []

    def snapshot(self) -> StateSnapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes: Any) -> StateSnapshot:
        # Listeners run under the lock so snapshots arrive in update order.
        with self._lock:
            new = dataclasses.replace(self._snapshot, **changes)
            if new == self._snapshot:
                return new
            self._snapshot = new
            for listener in list(self._listeners):
                listener(new)
        return new
