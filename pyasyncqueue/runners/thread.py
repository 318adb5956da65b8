"""Runner offloading blocking callables to a thread pool."""

from __future__ import annotations

import asyncio
import inspect
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from ..contracts import Job, Runner

logger = logging.getLogger(__name__)


class ThreadRunner(Runner):
    """Execute jobs with :meth:`asyncio.loop.run_in_executor`.

    Jobs must be plain blocking callables. Their completion is delivered back on
    the event loop thread, so queue bookkeeping never runs on a worker thread.

    Parameters:
        executor: Pool to run jobs in; a private pool is created when omitted.
        max_workers: Size of the private pool. Ignored when ``executor`` is given.
    """

    def __init__(
        self,
        *,
        executor: ThreadPoolExecutor | None = None,
        max_workers: int | None = None,
    ) -> None:
        if max_workers is not None and max_workers <= 0:
            raise ValueError("max_workers must be greater than 0 when provided")
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="pyasyncqueue"
        )

    def submit(self, job: Job) -> asyncio.Future[Any]:  # type: ignore[override]
        if inspect.iscoroutinefunction(job):
            raise TypeError("ThreadRunner jobs must be blocking callables, not coroutine functions")
        loop = asyncio.get_running_loop()
        return loop.run_in_executor(self._executor, job)

    def close(self, *, wait: bool = True) -> None:
        """Shut down the private pool; a caller-supplied executor is left alone."""

        if not self._owns_executor:
            return
        logger.debug("shutting down thread runner pool: wait=%s", wait)
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ThreadRunner":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
