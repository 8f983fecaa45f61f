"""Child workflow steps: scope seeding, dispatch and result folding."""

import copy
import dataclasses
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from ..models import WorkflowExecutionPayload, WorkflowStep
from .constants import DSL_WORKFLOW_TYPE
from .vars import Vars, create_scope

if TYPE_CHECKING:
    from .interpreter import StepInterpreter

_BASE_PAYLOAD_FIELDS = set(WorkflowExecutionPayload.model_fields)


def to_plain(value: Any) -> Any:
    """Normalize a child result to JSON-compatible data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


class ChildWorkflowComposer:
    """Runs a ``WorkflowStep`` in a scope isolated from its parent.

    The child only ever sees what the step imports (plus its own ``vars``);
    without an ``import`` list it sees the parent's invocation inputs, never
    the outputs of earlier steps. Nothing flows back except the child result.
    """

    def __init__(self, interpreter: "StepInterpreter"):
        self.interpreter = interpreter

    @property
    def dispatcher(self):
        return self.interpreter.dispatcher

    def seed(self, step: WorkflowStep, parent_vars: Vars) -> dict[str, Any]:
        if step.import_ is None:
            seed = copy.deepcopy(self.interpreter.inputs)
        else:
            seed = parent_vars.pick(step.import_)
        if step.vars:
            seed.update(parent_vars.resolve_params(step.vars))
        return seed

    async def compose(self, step: WorkflowStep, parent_vars: Vars) -> Any:
        """Run the child described by ``step`` and return its folded result.

        Async children are only started; the result is the child workflow id.
        """
        seed = self.seed(step, parent_vars)

        if step.spec is not None and not step.async_:
            return to_plain(await self.interpreter.run(step.spec, create_scope(step.spec.vars, seed)))

        payload = self._child_payload(step, seed)
        workflow_type = DSL_WORKFLOW_TYPE if step.spec is not None else step.name

        if step.async_:
            child_id = await self.dispatcher.start_child_workflow(workflow_type, payload, step.options)
            self.interpreter.logger.info(f"Started child workflow {step.name} ({child_id})")
            return child_id

        result = await self.dispatcher.dispatch_child_workflow(workflow_type, payload, step.options)
        return to_plain(result)

    def _child_payload(self, step: WorkflowStep, seed: dict[str, Any]) -> dict[str, Any]:
        payload = self.interpreter.base_payload.model_dump(
            mode="json", by_alias=True, include=_BASE_PAYLOAD_FIELDS
        )
        payload["vars"] = seed
        if step.spec is not None:
            payload["workflow"] = step.spec.model_dump(mode="json", by_alias=True, exclude_none=True)
        return payload
