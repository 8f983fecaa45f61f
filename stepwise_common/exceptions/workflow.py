"""Workflow-related exception classes.

All of these describe problems that retrying cannot fix (a malformed payload,
an unknown provider, a missing document), so they are raised as non-retryable
Temporal application errors. Raised inside a workflow they fail the run instead
of the workflow task; raised inside an activity they bypass the retry policy.
"""

from typing import Any

from temporalio.exceptions import ApplicationError


class WorkflowError(ApplicationError):
    """Base exception for DSL workflow errors."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message, type=self.__class__.__name__, non_retryable=True)
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class WorkflowParamNotFound(WorkflowError):  # noqa: N818
    """Raised when a required workflow or activity parameter is missing."""

    def __init__(self, param: str, workflow: Any = None):
        """Initialize the error.

        Args:
            param: Name of the missing parameter (e.g. ``objectIds[0]``)
            workflow: Definition (or name) of the workflow being executed, if known
        """
        if isinstance(workflow, str):
            workflow_name = workflow
        elif isinstance(workflow, dict):
            workflow_name = workflow.get("name")
        else:
            workflow_name = getattr(workflow, "name", None)
        message = f"Required workflow parameter '{param}' not found"
        if workflow_name:
            message += f" in workflow '{workflow_name}'"
        super().__init__(message, param=param, workflow_name=workflow_name)
        self.param = param


class UnknownProvider(WorkflowError):  # noqa: N818
    """Raised when a fetch spec names a provider nobody registered."""

    def __init__(self, provider: str, registered: list[str] | None = None):
        super().__init__(
            f"Unknown fetch provider '{provider}'",
            provider=provider,
            registered=registered or [],
        )
        self.provider = provider


class InvalidWorkflowDefinition(WorkflowError):  # noqa: N818
    """Raised when a workflow definition or one of its steps is malformed."""

    pass


class NoDocumentFound(WorkflowError):  # noqa: N818
    """Raised when a fetch declared with ``on_not_found: throw`` returns nothing."""

    pass


NON_RETRYABLE_ERRORS: list[str] = [
    WorkflowError.__name__,
    WorkflowParamNotFound.__name__,
    UnknownProvider.__name__,
    InvalidWorkflowDefinition.__name__,
    NoDocumentFound.__name__,
]
