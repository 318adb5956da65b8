"""Concurrency-limited job queue driven by the running event loop.

The queue keeps an append-only list of jobs and a cursor into it. Every time a
job is pushed, and every time a dispatched job settles, the dispatch loop starts
as many jobs as the ``limit`` allows. All bookkeeping happens on the event loop
thread: runners report completion through future done-callbacks, which asyncio
always schedules on the loop, so no locking is needed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from functools import partial
from typing import Any, Iterable

from . import metrics
from .contracts import (
    EventBus,
    EventKind,
    Job,
    JobFailed,
    JobQueued,
    JobSettled,
    JobStarted,
    JobSucceeded,
    Observer,
    QueueDone,
    QueueDrained,
    QueueEvent,
    Runner,
)
from .events.local import LocalEventBus
from .runners.task import TaskRunner

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Entry:
    job: Job
    handle: asyncio.Future[Any] | None = None


class AsyncQueue:
    """Run jobs with at most ``limit`` of them in flight at once.

    Parameters:
        limit: Maximum number of dispatched, unsettled jobs; ``0`` means unlimited.
            Can be changed later through :attr:`limit` and applies from the next
            dispatch onwards.
        jobs: Jobs to start right away. They get no result handle; use events to
            observe their outcome.
        runner: Deferred-execution primitive; defaults to :class:`TaskRunner`.
        event_bus: Notifier for lifecycle events; defaults to a private
            :class:`LocalEventBus`.
        name: Label used in metrics and ``repr``.

    Observers registered with :meth:`on` are invoked synchronously in
    registration order. Exceptions they raise are logged by the bus and do not
    interrupt dispatch.
    """

    def __init__(
        self,
        *,
        limit: int = 0,
        jobs: Iterable[Job] | None = None,
        runner: Runner | None = None,
        event_bus: EventBus | None = None,
        name: str = "default",
    ) -> None:
        self.name = name
        self._limit = limit
        self._runner = runner or TaskRunner()
        self.event_bus = event_bus or LocalEventBus()
        initial = list(jobs or ())
        self._validate_configuration(initial)
        self._jobs: list[_Entry | None] = [_Entry(job) for job in initial]
        self._cursor = 0
        self._pending = 0
        self._resolved = 0
        self._rejected = 0
        self._dispatching = False
        self._idle = asyncio.Event()
        if self._jobs:
            logger.debug("queue %s created with %d initial jobs", self.name, len(self._jobs))
        else:
            self._idle.set()
        self._next()

    def __repr__(self) -> str:
        return (
            f"AsyncQueue(name={self.name!r}, limit={self._limit}, cursor={self._cursor}, "
            f"length={len(self._jobs)}, pending={self._pending})"
        )

    def __len__(self) -> int:
        return len(self._jobs)

    @property
    def limit(self) -> int:
        return self._limit

    @limit.setter
    def limit(self, value: int) -> None:
        _check_limit(value)
        logger.debug("queue %s limit changed: %s -> %s", self.name, self._limit, value)
        self._limit = value

    @property
    def cursor(self) -> int:
        """Index of the next job to dispatch."""

        return self._cursor

    @property
    def pending(self) -> int:
        """Number of dispatched jobs that have not settled yet."""

        return self._pending

    @property
    def resolved(self) -> int:
        return self._resolved

    @property
    def rejected(self) -> int:
        return self._rejected

    @property
    def idle(self) -> bool:
        """``True`` once every job has been dispatched and settled."""

        return self._idle.is_set()

    def push(self, job: Job) -> asyncio.Future[Any]:
        """Append ``job`` and return a future resolved with its outcome.

        The future carries the job's return value, or raises the exception the
        job raised. Cancelling the future does not stop the job.

        Raises:
            TypeError: If ``job`` is not callable.
            RuntimeError: If called without a running event loop.
        """

        _check_job(job)
        handle: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._jobs.append(_Entry(job, handle))
        self._idle.clear()
        logger.debug(
            "job queued: queue=%s index=%d pending=%d", self.name, len(self._jobs) - 1, self._pending
        )
        self._publish(JobQueued(job, self._cursor, len(self._jobs)))
        self._next()
        return handle

    def push_many(self, *jobs: Job) -> asyncio.Future[list[Any]]:
        """Push every job and return a future of their results in input order.

        The aggregate fails with the first failure it observes; the other jobs
        keep running.
        """

        for job in jobs:
            _check_job(job)
        return asyncio.gather(*(self.push(job) for job in jobs))

    def on(self, kind: EventKind | str, callback: Observer) -> "AsyncQueue":
        """Register ``callback`` for ``kind`` events and return the queue for chaining.

        Raises:
            ValueError: If ``kind`` is not a known :class:`EventKind`.
            TypeError: If ``callback`` is not callable.
        """

        try:
            kind = EventKind(kind)
        except ValueError as exc:
            raise ValueError(f"unknown event kind: {kind!r}") from exc
        self.event_bus.subscribe(kind, callback)
        return self

    async def join(self) -> None:
        """Wait until every queued job has been dispatched and settled."""

        await self._idle.wait()

    def _next(self) -> bool:
        # Nested calls (push from a "started" observer) leave the work to the
        # outer loop, which re-checks its condition after every dispatch.
        if self._dispatching:
            return False
        self._dispatching = True
        started = 0
        try:
            while self._can_dispatch():
                self._dispatch()
                started += 1
        finally:
            self._dispatching = False
        return started > 0

    def _can_dispatch(self) -> bool:
        if self._limit > 0 and self._pending >= self._limit:
            return False
        return self._cursor < len(self._jobs)

    def _dispatch(self) -> None:
        index = self._cursor
        entry = self._jobs[index]
        if entry is None:
            raise RuntimeError(f"job at index {index} was already dispatched")
        self._jobs[index] = None
        self._pending += 1
        self._cursor += 1
        self._idle.clear()
        started_at = time.perf_counter()
        try:
            future = self._runner.submit(entry.job)
        except Exception:
            # undo so the job is retried by the next dispatch
            self._jobs[index] = entry
            self._pending -= 1
            self._cursor = index
            raise
        metrics.jobs_started.labels(self.name).inc()
        metrics.jobs_pending.labels(self.name).inc()
        logger.debug("job started: queue=%s index=%d pending=%d", self.name, index, self._pending)
        future.add_done_callback(partial(self._on_settled, entry.handle, started_at))
        self._publish(JobStarted(self._cursor, len(self._jobs)))

    def _on_settled(
        self,
        handle: asyncio.Future[Any] | None,
        started_at: float,
        future: asyncio.Future[Any],
    ) -> None:
        metrics.job_duration.labels(self.name).observe(time.perf_counter() - started_at)
        reason: BaseException | None
        if future.cancelled():
            reason = asyncio.CancelledError()
        else:
            reason = future.exception()
        _settle_handle(handle, future, reason)

        if reason is None:
            result = future.result()
            self._publish(JobSucceeded(result, self._cursor, len(self._jobs)))
            self._resolved += 1
            metrics.jobs_succeeded.labels(self.name).inc()
            self._publish(JobSettled(result, False, self._cursor, len(self._jobs)))
        else:
            logger.debug("job failed: queue=%s reason=%r", self.name, reason)
            self._publish(JobFailed(reason, self._cursor, len(self._jobs)))
            self._rejected += 1
            metrics.jobs_failed.labels(self.name).inc()
            self._publish(JobSettled(reason, True, self._cursor, len(self._jobs)))

        self._pending -= 1
        metrics.jobs_pending.labels(self.name).dec()
        if self._cursor >= len(self._jobs) and self._pending == 0:
            logger.info(
                "queue %s done: jobs=%d resolved=%d rejected=%d",
                self.name,
                len(self._jobs),
                self._resolved,
                self._rejected,
            )
            self._publish(QueueDone(len(self._jobs)))
            # a "done" observer may have pushed more work
            if self._cursor >= len(self._jobs) and self._pending == 0:
                self._idle.set()
        elif self._cursor >= len(self._jobs):
            logger.debug("queue %s drained with %d pending", self.name, self._pending)
            self._publish(QueueDrained(self._pending))
        else:
            self._next()

    def _publish(self, event: QueueEvent) -> None:
        self.event_bus.publish(event)

    def _validate_configuration(self, jobs: list[Job]) -> None:
        _check_limit(self._limit)
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("name must be a non-empty string")
        for job in jobs:
            _check_job(job)


def _check_limit(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("limit must be an integer")
    if value < 0:
        raise ValueError("limit must be greater than or equal to 0")


def _check_job(job: Any) -> None:
    if not callable(job):
        raise TypeError(f"job must be callable, got {type(job).__name__}")


def _settle_handle(
    handle: asyncio.Future[Any] | None,
    future: asyncio.Future[Any],
    reason: BaseException | None,
) -> None:
    if handle is None or handle.done():
        return
    if future.cancelled():
        handle.cancel()
    elif reason is not None:
        handle.set_exception(reason)
    else:
        handle.set_result(future.result())
