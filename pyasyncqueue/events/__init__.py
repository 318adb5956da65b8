"""Event bus implementations."""

from .local import LocalEventBus

__all__ = ["LocalEventBus"]
