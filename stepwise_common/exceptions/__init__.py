"""Exception classes for Stepwise.

Configuration errors (missing payload fields, unknown providers, malformed
definitions) and data-not-found errors are permanent failures; everything else
raised by activities is left to the substrate's retry policy.
"""

from .workflow import (
    NON_RETRYABLE_ERRORS,
    InvalidWorkflowDefinition,
    NoDocumentFound,
    UnknownProvider,
    WorkflowError,
    WorkflowParamNotFound,
)

__all__ = [
    "NON_RETRYABLE_ERRORS",
    "InvalidWorkflowDefinition",
    "NoDocumentFound",
    "UnknownProvider",
    "WorkflowError",
    "WorkflowParamNotFound",
]
