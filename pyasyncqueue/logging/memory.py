"""In-process event history useful for tests and demos."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Iterable, List

from ..contracts import EventKind, QueueEvent
from ..queue import AsyncQueue


class MemoryEventSink:
    """Bounded record of the lifecycle events published by one or more queues."""

    def __init__(self, *, max_items: int = 1000) -> None:
        if max_items <= 0:
            raise ValueError("max_items must be greater than 0")
        self._events: Deque[QueueEvent] = deque(maxlen=max_items)
        self._thread_lock = threading.Lock()

    def attach(self, queue: AsyncQueue, kinds: Iterable[EventKind] | None = None) -> AsyncQueue:
        """Subscribe to ``kinds`` (all kinds by default) on ``queue``."""

        for kind in kinds or EventKind:
            queue.on(kind, self.write)
        return queue

    def write(self, event: QueueEvent) -> None:
        with self._thread_lock:
            self._events.append(event)

    def get(self, kind: EventKind | str | None = None) -> List[QueueEvent]:
        with self._thread_lock:
            if kind is None:
                return list(self._events)
            wanted = EventKind(kind)
            return [event for event in self._events if event.kind is wanted]

    def kinds(self) -> List[EventKind]:
        """Return the kind of every recorded event, oldest first."""

        with self._thread_lock:
            return [event.kind for event in self._events]

    def clear(self) -> None:
        with self._thread_lock:
            self._events.clear()
