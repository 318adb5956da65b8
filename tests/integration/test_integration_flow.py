"""Integration scenarios throttling HTTP jobs against a mock API."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from pyasyncqueue import AsyncQueue, EventKind
from pyasyncqueue.jobs import http_job
from pyasyncqueue.logging import MemoryEventSink


class _RateLimitedApi:
    """Mock transport handler that tracks how many requests overlap."""

    def __init__(self, *, max_parallel: int) -> None:
        self.max_parallel = max_parallel
        self.active = 0
        self.peak = 0
        self.paths: list[str] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.active += 1
        self.peak = max(self.peak, self.active)
        self.paths.append(request.url.path)
        try:
            if self.active > self.max_parallel:
                return httpx.Response(429, json={"error": "too many requests"})
            await asyncio.sleep(0.01)
            if request.url.path.endswith("/broken"):
                return httpx.Response(500, json={"error": "boom"})
            return httpx.Response(200, json={"path": request.url.path})
        finally:
            self.active -= 1


def test_queue_keeps_requests_under_api_limit() -> None:
    async def _run() -> None:
        api = _RateLimitedApi(max_parallel=3)
        sink = MemoryEventSink()
        async with httpx.AsyncClient(transport=httpx.MockTransport(api)) as client:
            queue = sink.attach(AsyncQueue(limit=3, name="integration"))
            jobs = [
                http_job(f"https://api.test/items/{i}", client=client, raise_for_status=True)
                for i in range(12)
            ]
            results = await asyncio.wait_for(queue.push_many(*jobs), timeout=5)

        assert [row["status"] for row in results] == [200] * 12
        assert [row["body"]["path"] for row in results] == [f"/items/{i}" for i in range(12)]
        assert api.peak == 3
        assert sorted(api.paths) == sorted(f"/items/{i}" for i in range(12))
        assert len(sink.get(EventKind.STARTED)) == 12
        assert len(sink.get(EventKind.SUCCEEDED)) == 12
        assert [event.length for event in sink.get(EventKind.DONE)] == [12]

    asyncio.run(_run())


def test_failed_request_does_not_stall_the_queue() -> None:
    async def _run() -> None:
        api = _RateLimitedApi(max_parallel=2)
        async with httpx.AsyncClient(transport=httpx.MockTransport(api)) as client:
            queue = AsyncQueue(limit=2)
            failures: list[BaseException] = []
            queue.on("failed", lambda event: failures.append(event.reason))
            paths = ["/a", "/broken", "/b", "/c"]
            handles = [
                queue.push(http_job(f"https://api.test{path}", client=client, raise_for_status=True))
                for path in paths
            ]
            with pytest.raises(httpx.HTTPStatusError):
                await asyncio.gather(*handles)
            await asyncio.wait_for(queue.join(), timeout=5)

        assert [h.result()["status"] for i, h in enumerate(handles) if i != 1] == [200, 200, 200]
        assert len(failures) == 1
        assert failures[0].response.status_code == 500
        assert queue.resolved == 3
        assert queue.rejected == 1
        assert api.peak <= 2

    asyncio.run(_run())
