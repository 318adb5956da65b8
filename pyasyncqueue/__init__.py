"""Pyasyncqueue: concurrency-limited in-process job queue for asyncio."""

from .contracts import (
    EventBus,
    EventKind,
    Job,
    JobFailed,
    JobQueued,
    JobSettled,
    JobStarted,
    JobSucceeded,
    QueueDone,
    QueueDrained,
    Runner,
)
from .queue import AsyncQueue
from .runners import EagerRunner, TaskRunner, ThreadRunner

__version__ = "0.1.0"

__all__ = [
    "AsyncQueue",
    "EventBus",
    "EventKind",
    "Job",
    "JobFailed",
    "JobQueued",
    "JobSettled",
    "JobStarted",
    "JobSucceeded",
    "QueueDone",
    "QueueDrained",
    "Runner",
    "EagerRunner",
    "TaskRunner",
    "ThreadRunner",
    "__version__",
]
