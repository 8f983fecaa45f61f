"""Activity option defaults and layering."""

from typing import Any

from stepwise_common.exceptions import NON_RETRYABLE_ERRORS

from ..models import ActivityOptions, RetryOptions
from .constants import (
    ACTIVITY_START_TO_CLOSE_TIMEOUT,
    RETRY_BACKOFF_COEFFICIENT,
    RETRY_INITIAL_INTERVAL,
    RETRY_MAXIMUM_ATTEMPTS,
    RETRY_MAXIMUM_INTERVAL,
)

DEFAULT_ACTIVITY_OPTIONS = ActivityOptions(
    start_to_close_timeout=ACTIVITY_START_TO_CLOSE_TIMEOUT,
    retry=RetryOptions(
        initial_interval=RETRY_INITIAL_INTERVAL,
        backoff_coefficient=RETRY_BACKOFF_COEFFICIENT,
        maximum_attempts=RETRY_MAXIMUM_ATTEMPTS,
        maximum_interval=RETRY_MAXIMUM_INTERVAL,
        non_retryable_error_types=list(NON_RETRYABLE_ERRORS),
    ),
)


def merge_activity_options(*layers: ActivityOptions | None) -> ActivityOptions:
    """Layer option sets; later layers win, ``retry`` is merged field by field."""
    merged: dict[str, Any] = {}
    retry: dict[str, Any] = {}
    for layer in layers:
        if layer is None:
            continue
        for field, value in layer:
            if field == "retry":
                if value is not None:
                    retry.update({k: v for k, v in value if v is not None})
            elif value is not None:
                merged[field] = value
    return ActivityOptions(**merged, retry=RetryOptions(**retry) if retry else None)
