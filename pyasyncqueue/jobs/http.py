"""HTTP job factory built on httpx.AsyncClient."""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, Mapping

import httpx

logger = logging.getLogger(__name__)


def http_job(
    url: str,
    *,
    method: str = "GET",
    client: httpx.AsyncClient | None = None,
    timeout: float = 30,
    params: Mapping[str, Any] | None = None,
    data: Any = None,
    json: Any = None,
    headers: Mapping[str, str] | None = None,
    raise_for_status: bool = False,
) -> Callable[[], Awaitable[dict]]:
    """Build a job that performs one HTTP request and returns a response summary.

    Passing a shared ``client`` reuses its connection pool across every job of a
    queue; otherwise each job opens and closes its own client with ``timeout``.
    With ``raise_for_status`` a 4xx/5xx response makes the job fail with
    :class:`httpx.HTTPStatusError`.

    The job result is a dict with ``status``, ``headers``, ``body`` (decoded JSON
    when the response says so, text otherwise) and ``duration_ms``.
    """

    method = method.upper()

    async def _send(session: httpx.AsyncClient) -> dict:
        started = time.perf_counter()
        resp = await session.request(
            method,
            url,
            params=params,
            data=data,
            json=json,
            headers=headers,
        )
        duration = int((time.perf_counter() - started) * 1000)
        logger.debug("%s %s -> %s in %dms", method, url, resp.status_code, duration)
        if raise_for_status:
            resp.raise_for_status()
        body: object
        if "application/json" in resp.headers.get("content-type", ""):
            body = resp.json()
        else:
            body = resp.text
        return {
            "status": resp.status_code,
            "headers": dict(resp.headers),
            "body": body,
            "duration_ms": duration,
        }

    async def _request() -> dict:
        if client is not None:
            return await _send(client)
        async with httpx.AsyncClient(timeout=timeout) as session:
            return await _send(session)

    return _request
