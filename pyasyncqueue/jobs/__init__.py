"""Ready-made job factories."""

from .http import http_job
from .subprocess import subprocess_job

__all__ = ["http_job", "subprocess_job"]
