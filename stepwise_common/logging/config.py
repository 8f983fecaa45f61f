"""Logging configuration with execution context support."""

import json
import logging
import logging.config
from typing import Any

from .filters import ExecutionContextFilter

_STANDARD_RECORD_FIELDS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "exc_info",
    "exc_text",
    "stack_info",
    "message",
    "asctime",
}


class ExecutionContextFormatter(logging.Formatter):
    """Custom formatter that emits one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with execution context."""
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in ("workflow_id", "run_id", "activity_type"):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        # Temporal's workflow and activity loggers attach their info under these keys
        for key in ("temporal_workflow", "temporal_activity"):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        for key, value in record.__dict__.items():
            if key in _STANDARD_RECORD_FIELDS or key in log_entry or key.startswith("_"):
                continue
            log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", enable_structured_logging: bool = True) -> None:
    """Set up logging configuration with execution context support.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_structured_logging: Whether to use structured JSON logging
    """
    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
            "structured": {
                "()": ExecutionContextFormatter,
            },
        },
        "filters": {
            "execution_context": {
                "()": ExecutionContextFilter,
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "structured" if enable_structured_logging else "standard",
                "filters": ["execution_context"],
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            "stepwise_common": {"level": level, "handlers": ["console"], "propagate": False},
            "stepwise_execution": {"level": level, "handlers": ["console"], "propagate": False},
            "temporalio": {"level": "WARNING" if level == "DEBUG" else level},
        },
        "root": {"level": level, "handlers": ["console"]},
    }

    logging.config.dictConfig(config)
