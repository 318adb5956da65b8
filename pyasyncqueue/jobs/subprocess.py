"""Subprocess job factory collecting stdout/stderr of an external command."""

from __future__ import annotations

import asyncio
import logging
import subprocess
import time
from contextlib import suppress
from typing import Awaitable, Callable, Mapping, Sequence

logger = logging.getLogger(__name__)


def subprocess_job(
    cmd: str | Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    check: bool = False,
    terminate_timeout: float = 3,
) -> Callable[[], Awaitable[dict]]:
    """Build a job running ``cmd`` and returning its exit status and output.

    A string ``cmd`` runs through the shell, a sequence is executed directly.
    With ``check`` a non-zero exit makes the job fail with
    :class:`subprocess.CalledProcessError`. If the job's task is cancelled the
    process is terminated, then killed after ``terminate_timeout`` seconds.

    The job result is a dict with ``returncode``, ``stdout``, ``stderr`` (decoded
    text) and ``duration_ms``.
    """

    shell = isinstance(cmd, str)
    env_dict = dict(env) if env is not None else None

    async def _run() -> dict:
        start = time.perf_counter()
        if shell:
            proc = await asyncio.create_subprocess_shell(
                cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=env_dict,
            )
        else:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=env_dict,
            )
        try:
            stdout, stderr = await proc.communicate()
        finally:
            if proc.returncode is None:
                await _terminate(proc, terminate_timeout)
        rc = proc.returncode
        if rc != 0:
            logger.info("process exited with code %s: %s", rc, cmd)
            if check:
                raise subprocess.CalledProcessError(rc, cmd, output=stdout, stderr=stderr)
        return {
            "returncode": rc,
            "stdout": stdout.decode(errors="ignore"),
            "stderr": stderr.decode(errors="ignore"),
            "duration_ms": int((time.perf_counter() - start) * 1000),
        }

    return _run


async def _terminate(proc: asyncio.subprocess.Process, timeout: float) -> None:
    logger.info("terminating process pid=%s", proc.pid)
    with suppress(ProcessLookupError):
        proc.terminate()
    try:
        await asyncio.wait_for(asyncio.shield(proc.wait()), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("process %s unresponsive to SIGTERM; sending SIGKILL", proc.pid)
        with suppress(ProcessLookupError):
            proc.kill()
        with suppress(asyncio.CancelledError):
            await proc.wait()
