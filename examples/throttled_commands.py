"""Run a batch of shell commands, two at a time, and print the event history."""

from __future__ import annotations

import asyncio
import logging
import sys

from pyasyncqueue import AsyncQueue, EventKind
from pyasyncqueue.jobs import subprocess_job
from pyasyncqueue.logging import MemoryEventSink


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    sink = MemoryEventSink()
    queue = sink.attach(AsyncQueue(limit=2, name="commands"))
    queue.on(EventKind.STARTED, lambda event: print(f"started {event.cursor}/{event.length}"))

    commands = [[sys.executable, "-c", f"import time; time.sleep(0.2); print({i})"] for i in range(6)]
    results = await queue.push_many(*(subprocess_job(cmd) for cmd in commands))
    print([row["stdout"].strip() for row in results])
    print([kind.value for kind in sink.kinds()])


if __name__ == "__main__":
    asyncio.run(main())
