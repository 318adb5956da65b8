"""Minimal in-process event bus."""

from __future__ import annotations

import asyncio
from collections import defaultdict
import inspect
import logging
from typing import Any, DefaultDict, List

from ..contracts import EventBus, EventKind, Observer, QueueEvent

logger = logging.getLogger(__name__)


class LocalEventBus(EventBus):
    """Synchronous bus storing subscribers in-memory.

    Handlers run one after another in the order they subscribed. A handler that
    raises is logged and skipped so the remaining handlers, and the queue that
    publishes, carry on. Handlers returning an awaitable have it scheduled on
    the running loop; failures there are logged the same way.
    """

    def __init__(self) -> None:
        self._subs: DefaultDict[EventKind, List[Observer]] = defaultdict(list)
        self._tasks: set[asyncio.Future[Any]] = set()

    def subscribe(self, kind: EventKind, handler: Observer) -> None:  # type: ignore[override]
        if not callable(handler):
            raise TypeError("event handler must be callable")
        self._subs[EventKind(kind)].append(handler)

    def publish(self, event: QueueEvent) -> None:  # type: ignore[override]
        # handlers subscribed while publishing only see later events
        for handler in tuple(self._subs.get(event.kind, ())):
            try:
                result = handler(event)
            except Exception:
                logger.exception("Event handler failed: kind=%s", event.kind.value)
                continue
            if inspect.isawaitable(result):
                self._schedule(result, event.kind)

    def _schedule(self, awaitable: Any, kind: EventKind) -> None:
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)

        def _done(fut: asyncio.Future[Any]) -> None:
            self._tasks.discard(fut)
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is not None:
                logger.error("Async event handler failed: kind=%s", kind.value, exc_info=exc)

        task.add_done_callback(_done)

    def handler_count(self, kind: EventKind) -> int:
        return len(self._subs.get(EventKind(kind), ()))
