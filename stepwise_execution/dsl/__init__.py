"""Declarative workflow interpreter.

Everything in this package is substrate-neutral: the interpreter talks to the
outside world only through a :class:`Dispatcher`.
"""

from .composer import ChildWorkflowComposer
from .dispatcher import Dispatcher
from .interpreter import InterpreterState, StepInterpreter, StepSnapshot
from .options import DEFAULT_ACTIVITY_OPTIONS, merge_activity_options
from .vars import ABSENT, Vars, create_scope

__all__ = [
    "ABSENT",
    "ChildWorkflowComposer",
    "DEFAULT_ACTIVITY_OPTIONS",
    "Dispatcher",
    "InterpreterState",
    "StepInterpreter",
    "StepSnapshot",
    "Vars",
    "create_scope",
    "merge_activity_options",
]
