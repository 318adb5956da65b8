"""Default runner executing jobs as asyncio tasks."""

from __future__ import annotations

import asyncio
import inspect
from asyncio import Task
from typing import Any

from ..contracts import Job, Runner


async def invoke(job: Job) -> Any:
    """Call ``job`` and await its result when it returns an awaitable."""

    result = job()
    if inspect.isawaitable(result):
        result = await result
    return result


class TaskRunner(Runner):
    """Start each job in its own task on the running loop.

    The task body only begins on a later loop iteration, so a job never runs
    inside the ``push`` call that dispatched it.
    """

    def __init__(self) -> None:
        self._tasks: set[Task[Any]] = set()

    def submit(self, job: Job) -> asyncio.Future[Any]:  # type: ignore[override]
        loop = asyncio.get_running_loop()
        task = loop.create_task(invoke(job))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def active(self) -> int:
        return len(self._tasks)
