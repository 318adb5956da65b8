"""Built-in runner implementations."""

from .eager import EagerRunner
from .task import TaskRunner
from .thread import ThreadRunner

__all__ = ["EagerRunner", "TaskRunner", "ThreadRunner"]
