"""Logging filters for execution context."""

import logging

from temporalio import activity


class ExecutionContextFilter(logging.Filter):
    """Logging filter that stamps Temporal execution identifiers on log records.

    Records emitted while a Temporal activity is running get the workflow id,
    run id and activity type of that activity. Records emitted anywhere else
    pass through untouched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add execution context to log record.

        Args:
            record: Log record to filter

        Returns:
            True to allow the record to be logged
        """
        if activity.in_activity():
            info = activity.info()
            record.workflow_id = info.workflow_id
            record.run_id = info.workflow_run_id
            record.activity_type = info.activity_type
        return True
