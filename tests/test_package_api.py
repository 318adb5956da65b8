"""Simple tests verifying public exports are wired correctly."""

import pyasyncqueue
from pyasyncqueue import AsyncQueue, EagerRunner, EventKind, Runner, TaskRunner, ThreadRunner
from pyasyncqueue.events import LocalEventBus
from pyasyncqueue.jobs import http_job, subprocess_job
from pyasyncqueue.logging import MemoryEventSink


def test_public_api_exports() -> None:
    assert AsyncQueue.__module__ == "pyasyncqueue.queue"
    assert Runner.__module__ == "pyasyncqueue.contracts"
    assert EventKind.__module__ == "pyasyncqueue.contracts"
    assert TaskRunner.__module__ == "pyasyncqueue.runners.task"
    assert EagerRunner.__module__ == "pyasyncqueue.runners.eager"
    assert ThreadRunner.__module__ == "pyasyncqueue.runners.thread"
    assert LocalEventBus.__module__ == "pyasyncqueue.events.local"
    assert MemoryEventSink.__module__ == "pyasyncqueue.logging.memory"
    assert http_job.__module__ == "pyasyncqueue.jobs.http"
    assert subprocess_job.__module__ == "pyasyncqueue.jobs.subprocess"
    assert pyasyncqueue.__version__ == "0.1.0"
    assert set(pyasyncqueue.__all__) >= {"AsyncQueue", "EventKind", "TaskRunner"}
