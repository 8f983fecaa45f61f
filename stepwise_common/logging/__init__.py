"""Logging with Temporal execution context."""

from .config import ExecutionContextFormatter, setup_logging
from .filters import ExecutionContextFilter

__all__ = [
    "ExecutionContextFilter",
    "ExecutionContextFormatter",
    "setup_logging",
]
