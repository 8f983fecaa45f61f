"""Workflow definitions for Stepwise execution.

Temporal workflows interpreting declarative DSL definitions.
"""

from .dispatcher import TemporalDispatcher
from .dsl_workflow import DSLWorkflow

__all__ = [
    "DSLWorkflow",
    "TemporalDispatcher",
]
