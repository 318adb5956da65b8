"""Prometheus instrumentation for queue activity.

Metric families are registered once at import time in the default
``prometheus_client`` registry and labelled with the queue ``name``, so several
queues in one process report side by side.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

jobs_started = Counter(
    "pyasyncqueue_jobs_started_total",
    "Count of jobs handed to a runner.",
    ["queue"],
)

jobs_succeeded = Counter(
    "pyasyncqueue_jobs_succeeded_total",
    "Count of jobs that completed successfully.",
    ["queue"],
)

jobs_failed = Counter(
    "pyasyncqueue_jobs_failed_total",
    "Count of jobs that raised or were cancelled.",
    ["queue"],
)

jobs_pending = Gauge(
    "pyasyncqueue_jobs_pending",
    "Jobs dispatched but not yet settled.",
    ["queue"],
)

job_duration = Histogram(
    "pyasyncqueue_job_duration_seconds",
    "Time between dispatch and settlement of a job.",
    ["queue"],
)
