"""Core contracts used by Pyasyncqueue components.

This module exposes explicit abstract base classes rather than ``typing.Protocol``
interfaces. Subclassing these contracts forces implementations to provide the
full API at definition time instead of relying solely on structural typing that
would otherwise be enforced only by optional type checking tools.

Lifecycle notifications are plain frozen dataclasses, one per
:class:`EventKind`, so observers can rely on attribute names instead of
positional arguments.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar

Job = Callable[[], Any]
"""Zero-argument unit of work returning a value or an awaitable."""


class EventKind(str, Enum):
    QUEUED = "queued"
    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SETTLED = "settled"
    PENDING = "pending"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class JobQueued:
    """A job was appended to the queue."""

    kind: ClassVar[EventKind] = EventKind.QUEUED
    job: Job
    cursor: int
    length: int


@dataclass(frozen=True, slots=True)
class JobStarted:
    """A job was handed to the runner; ``cursor`` is already advanced."""

    kind: ClassVar[EventKind] = EventKind.STARTED
    cursor: int
    length: int


@dataclass(frozen=True, slots=True)
class JobSucceeded:
    kind: ClassVar[EventKind] = EventKind.SUCCEEDED
    result: Any
    cursor: int
    length: int


@dataclass(frozen=True, slots=True)
class JobFailed:
    kind: ClassVar[EventKind] = EventKind.FAILED
    reason: BaseException
    cursor: int
    length: int


@dataclass(frozen=True, slots=True)
class JobSettled:
    """Fired after :class:`JobSucceeded` or :class:`JobFailed` for the same job."""

    kind: ClassVar[EventKind] = EventKind.SETTLED
    outcome: Any
    failed: bool
    cursor: int
    length: int


@dataclass(frozen=True, slots=True)
class QueueDrained:
    """Every job has been started but ``pending`` of them are still running."""

    kind: ClassVar[EventKind] = EventKind.PENDING
    pending: int


@dataclass(frozen=True, slots=True)
class QueueDone:
    """Every job has been started and settled."""

    kind: ClassVar[EventKind] = EventKind.DONE
    length: int


QueueEvent = JobQueued | JobStarted | JobSucceeded | JobFailed | JobSettled | QueueDrained | QueueDone
Observer = Callable[[Any], Any]


class Runner(ABC):
    """Deferred-execution primitive used by the queue to start jobs."""

    @abstractmethod
    def submit(self, job: Job) -> asyncio.Future[Any]:
        """Schedule ``job`` and return a future settled exactly once with its outcome.

        The returned future must belong to the running event loop so that done
        callbacks are delivered on the loop thread.
        """


class EventBus(ABC):
    """Publish/subscribe mechanism used for queue lifecycle events."""

    @abstractmethod
    def subscribe(self, kind: EventKind, handler: Observer) -> None:
        """Register ``handler`` for events of ``kind``."""

    @abstractmethod
    def publish(self, event: QueueEvent) -> None:
        """Deliver ``event`` to subscribers of ``event.kind`` in registration order."""
