"""Step interpreter for declarative workflow definitions.

The interpreter walks a :class:`~stepwise_execution.models.WorkflowSpec` one
step at a time. It never performs I/O itself: activities and registered child
workflows go through a :class:`~.dispatcher.Dispatcher`, and the only state it
touches is the in-memory :class:`~.vars.Vars` of the running scope. Given the
same definition, inputs and dispatcher results, two runs issue the same
dispatches in the same order, which is what durable replay requires.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from stepwise_common.exceptions import InvalidWorkflowDefinition

from ..models import (
    ActivityOptions,
    ActivityStep,
    DSLActivityExecutionPayload,
    Step,
    WorkflowExecutionPayload,
    WorkflowSpec,
    WorkflowStep,
)
from .composer import ChildWorkflowComposer
from .constants import DEFAULT_RESULT_VAR
from .dispatcher import Dispatcher
from .options import DEFAULT_ACTIVITY_OPTIONS, merge_activity_options
from .vars import Vars

_BASE_PAYLOAD_FIELDS = set(WorkflowExecutionPayload.model_fields)


class InterpreterState(str, Enum):
    """Lifecycle of one interpreter run."""

    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class StepSnapshot:
    """Scope of a workflow right after one of its steps."""

    workflow: str
    step_index: int
    step_name: str
    executed: bool
    vars: dict[str, Any]


StepObserver = Callable[[StepSnapshot], None]


def get_steps(spec: WorkflowSpec) -> list[Step]:
    if spec.steps:
        return list(spec.steps)
    if spec.activities:
        return list(spec.activities)
    raise InvalidWorkflowDefinition(
        f"No steps or activities found in workflow '{spec.name}'", workflow_name=spec.name
    )


class StepInterpreter:
    """Runs workflow definitions through a dispatcher.

    Inline child definitions are run recursively by the same interpreter, so
    ``state`` and ``step_index`` always describe the outermost definition.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        base_payload: WorkflowExecutionPayload,
        *,
        default_options: ActivityOptions | None = None,
        observer: StepObserver | None = None,
    ):
        self.dispatcher = dispatcher
        self.base_payload = base_payload
        self.default_options = default_options or DEFAULT_ACTIVITY_OPTIONS
        self.observer = observer
        self.composer = ChildWorkflowComposer(self)

        self.state = InterpreterState.READY
        self.workflow_name: str | None = None
        self.step_index: int | None = None
        self.step_name: str | None = None
        self.snapshots: list[StepSnapshot] = []
        # invocation inputs of every definition currently running, outermost first
        self._inputs: list[dict[str, Any]] = []

    @property
    def logger(self):
        return self.dispatcher.logger

    @property
    def inputs(self) -> dict[str, Any]:
        """Invocation inputs of the innermost running definition."""
        return self._inputs[-1] if self._inputs else {}

    def status(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "workflow_name": self.workflow_name,
            "step_index": self.step_index,
            "step_name": self.step_name,
        }

    async def run(self, spec: WorkflowSpec, vars: Vars) -> Any:
        """Execute every step of ``spec`` against ``vars`` and return its result.

        Raises:
            InvalidWorkflowDefinition: The definition has no steps or is malformed
            Exception: Whatever the failing step raised, unchanged
        """
        steps = get_steps(spec)
        root = not self._inputs
        if root:
            self.state = InterpreterState.RUNNING
            self.workflow_name = spec.name

        self._inputs.append(vars.resolve())
        last_output: str | None = None
        try:
            for index, step in enumerate(steps):
                if root:
                    self.step_index = index
                    self.step_name = step.name

                if isinstance(step, WorkflowStep):
                    executed = await self._run_workflow_step(spec, step, vars)
                else:
                    executed = await self._run_activity_step(spec, step, vars)

                if executed and step.output:
                    last_output = step.output
                self._record(spec, index, step, executed, vars)

            result = self._terminal_result(spec, vars, last_output)
        except asyncio.CancelledError as e:
            await self._handle_error(spec, e, cancelled=True, root=root)
            raise
        except Exception as e:
            await self._handle_error(
                spec, e, cancelled=self.dispatcher.is_cancellation(e), root=root
            )
            raise
        finally:
            self._inputs.pop()

        if root:
            self.state = InterpreterState.COMPLETED
        self.logger.info(f"Workflow {spec.name} completed")
        return result

    async def _run_activity_step(self, spec: WorkflowSpec, step: ActivityStep, vars: Vars) -> bool:
        if spec.debug_mode:
            self.logger.info(
                f"Workflow vars before executing activity {step.name}",
                extra={"vars": vars.resolve()},
            )

        if not vars.match(step.condition):
            self.logger.info(f"Skipping activity {step.name}: condition not met")
            return False

        payload = self._activity_payload(spec, step, vars.pick(step.import_))
        options = merge_activity_options(self.default_options, spec.options, step.options)

        self.logger.info(f"Executing activity {step.name}")
        result = await self.dispatcher.dispatch_activity(step.name, payload, options)

        if step.output:
            vars.set_value(step.output, result)
        if spec.debug_mode:
            self.logger.info(
                f"Workflow vars after executing activity {step.name}",
                extra={"vars": vars.resolve()},
            )
        return True

    async def _run_workflow_step(self, spec: WorkflowSpec, step: WorkflowStep, vars: Vars) -> bool:
        if not vars.match(step.condition):
            self.logger.info(f"Skipping child workflow {step.name}: condition not met")
            return False

        self.logger.info(f"Executing child workflow {step.name}")
        result = await self.composer.compose(step, vars)

        if step.output:
            vars.set_value(step.output, result)
        if spec.debug_mode:
            self.logger.info(
                f"Workflow vars after executing child workflow {step.name}",
                extra={"vars": vars.resolve()},
            )
        return True

    def _activity_payload(
        self,
        spec: WorkflowSpec,
        step: ActivityStep,
        params: dict[str, Any],
    ) -> DSLActivityExecutionPayload:
        return DSLActivityExecutionPayload(
            **self.base_payload.model_dump(include=_BASE_PAYLOAD_FIELDS),
            workflow_name=spec.name,
            debug_mode=spec.debug_mode,
            activity=step,
            params=params,
        )

    def _terminal_result(self, spec: WorkflowSpec, vars: Vars, last_output: str | None) -> Any:
        if isinstance(spec.result, list):
            return {name: vars.get_value(name) for name in spec.result}
        if spec.result:
            return vars.get_value(spec.result)
        if DEFAULT_RESULT_VAR in vars:
            return vars.get_value(DEFAULT_RESULT_VAR)
        return vars.get_value(last_output) if last_output else None

    def _record(self, spec: WorkflowSpec, index: int, step: Step, executed: bool, vars: Vars) -> None:
        snapshot = StepSnapshot(
            workflow=spec.name,
            step_index=index,
            step_name=step.name,
            executed=executed,
            vars=vars.resolve(),
        )
        self.snapshots.append(snapshot)
        if self.observer:
            self.observer(snapshot)

    async def _handle_error(
        self,
        spec: WorkflowSpec,
        error: BaseException,
        *,
        cancelled: bool,
        root: bool,
    ) -> None:
        if root:
            self.state = InterpreterState.CANCELLED if cancelled else InterpreterState.FAILED

        if cancelled:
            self.logger.warning(f"Workflow {spec.name} cancelled")
        else:
            self.logger.error(f"Workflow {spec.name} failed: {error}")

        if not spec.error_handler:
            return

        handler = ActivityStep(name=spec.error_handler)
        payload = self._activity_payload(
            spec,
            handler,
            {
                "error_message": str(error),
                "error_type": type(error).__name__,
                "cancelled": cancelled,
                "step_name": self.step_name,
            },
        )
        options = merge_activity_options(self.default_options, spec.options)
        try:
            await self.dispatcher.dispatch_activity(handler.name, payload, options)
        except Exception as handler_error:
            # the original failure is what the caller must see
            self.logger.error(
                f"Error handler {handler.name} of workflow {spec.name} failed: {handler_error}"
            )
