"""Event recording helpers."""

from .memory import MemoryEventSink

__all__ = ["MemoryEventSink"]
