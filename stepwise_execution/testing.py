"""In-memory substrate for exercising the interpreter without a Temporal server."""

import inspect
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .dsl.dispatcher import Dispatcher
from .models import ActivityOptions, ChildWorkflowOptions, DSLActivityExecutionPayload

logger = logging.getLogger(__name__)


@dataclass
class DispatchCall:
    """One dispatch recorded by :class:`InMemoryDispatcher`."""

    kind: str
    name: str
    payload: Any
    options: Any = None


class InMemoryDispatcher(Dispatcher):
    """Runs registered callables in place of activities and child workflows.

    Every dispatch is recorded in ``calls`` for test assertions. Handlers may
    be plain or async callables taking the payload. Async children are only
    recorded, never run.
    """

    def __init__(
        self,
        activities: dict[str, Callable[[Any], Any]] | None = None,
        workflows: dict[str, Callable[[Any], Any]] | None = None,
    ):
        self.activities = dict(activities or {})
        self.workflows = dict(workflows or {})
        self.calls: list[DispatchCall] = []
        self._child_ids = itertools.count(1)

    @property
    def logger(self) -> logging.Logger:
        return logger

    def register_activity(self, name: str, handler: Callable[[Any], Any]) -> None:
        self.activities[name] = handler

    def register_workflow(self, name: str, handler: Callable[[Any], Any]) -> None:
        self.workflows[name] = handler

    def calls_of(self, kind: str) -> list[DispatchCall]:
        return [call for call in self.calls if call.kind == kind]

    async def dispatch_activity(
        self,
        name: str,
        payload: DSLActivityExecutionPayload,
        options: ActivityOptions,
    ) -> Any:
        self.calls.append(DispatchCall("activity", name, payload, options))
        return await self._invoke(self.activities, "Activity", name, payload)

    async def dispatch_child_workflow(
        self,
        name: str,
        payload: dict[str, Any],
        options: ChildWorkflowOptions | None = None,
    ) -> Any:
        self.calls.append(DispatchCall("workflow", name, payload, options))
        return await self._invoke(self.workflows, "Workflow", name, payload)

    async def start_child_workflow(
        self,
        name: str,
        payload: dict[str, Any],
        options: ChildWorkflowOptions | None = None,
    ) -> str:
        self.calls.append(DispatchCall("start", name, payload, options))
        return f"{name}-{next(self._child_ids)}"

    async def _invoke(
        self,
        handlers: dict[str, Callable[[Any], Any]],
        label: str,
        name: str,
        payload: Any,
    ) -> Any:
        handler = handlers.get(name)
        if handler is None:
            raise LookupError(f"{label} {name} is not registered")
        result = handler(payload)
        if inspect.isawaitable(result):
            result = await result
        return result
