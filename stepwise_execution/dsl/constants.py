"""Constants and defaults for DSL workflow execution."""

from datetime import timedelta
from typing import Final

# Workflow type name of the DSL interpreter workflow
DSL_WORKFLOW_TYPE: Final[str] = "DSLWorkflow"

# Name under which a definition's terminal output is looked up by default
DEFAULT_RESULT_VAR: Final[str] = "result"

# Activity defaults
ACTIVITY_START_TO_CLOSE_TIMEOUT: Final[timedelta] = timedelta(minutes=5)
RETRY_INITIAL_INTERVAL: Final[timedelta] = timedelta(seconds=10)
RETRY_BACKOFF_COEFFICIENT: Final[float] = 2.0
RETRY_MAXIMUM_ATTEMPTS: Final[int] = 10
RETRY_MAXIMUM_INTERVAL: Final[timedelta] = timedelta(seconds=3000)
