"""Narrow interface between the interpreter and the durable execution substrate."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

from ..models import ActivityOptions, ChildWorkflowOptions, DSLActivityExecutionPayload


class Dispatcher(ABC):
    """Dispatches activities and child workflows on behalf of the interpreter.

    Implementations own every interaction with the substrate; the interpreter
    only awaits these calls, which keeps its own control flow deterministic.
    """

    @property
    @abstractmethod
    def logger(self) -> logging.Logger | logging.LoggerAdapter:
        """Logger safe to use from orchestration code."""
        pass

    @abstractmethod
    async def dispatch_activity(
        self,
        name: str,
        payload: DSLActivityExecutionPayload,
        options: ActivityOptions,
    ) -> Any:
        """Run an activity to completion and return its result.

        Failures surface only after the substrate's retry policy is exhausted.
        """
        pass

    @abstractmethod
    async def dispatch_child_workflow(
        self,
        name: str,
        payload: dict[str, Any],
        options: ChildWorkflowOptions | None = None,
    ) -> Any:
        """Start a registered child workflow and wait for its result."""
        pass

    @abstractmethod
    async def start_child_workflow(
        self,
        name: str,
        payload: dict[str, Any],
        options: ChildWorkflowOptions | None = None,
    ) -> str:
        """Start a child workflow without waiting for it; returns its workflow id."""
        pass

    def is_cancellation(self, error: BaseException) -> bool:
        """Whether ``error`` means the execution was cancelled rather than failed."""
        return isinstance(error, asyncio.CancelledError)
