"""Runner that calls jobs synchronously at dispatch time."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any

from ..contracts import Job, Runner


class EagerRunner(Runner):
    """Invoke the job immediately inside :meth:`submit`.

    Plain callables settle before ``submit`` returns, which makes event ordering
    fully deterministic in tests. Awaitables returned by the job are wrapped in
    a task and settle like they would with :class:`TaskRunner`.
    """

    def submit(self, job: Job) -> asyncio.Future[Any]:  # type: ignore[override]
        loop = asyncio.get_running_loop()
        try:
            result = job()
        except Exception as exc:
            future = loop.create_future()
            future.set_exception(exc)
            return future
        if inspect.isawaitable(result):
            return asyncio.ensure_future(result)
        future = loop.create_future()
        future.set_result(result)
        return future
