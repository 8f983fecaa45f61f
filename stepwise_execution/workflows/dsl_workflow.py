from typing import Any

from temporalio import workflow

with workflow.unsafe.imports_passed_through():
    from pydantic import ValidationError
    from stepwise_common.exceptions import InvalidWorkflowDefinition, WorkflowParamNotFound

    from ..dsl.constants import DSL_WORKFLOW_TYPE
    from ..dsl.interpreter import InterpreterState, StepInterpreter
    from ..dsl.vars import create_scope
    from ..models import DSLWorkflowExecutionPayload
    from .dispatcher import TemporalDispatcher


def build_inputs(payload: DSLWorkflowExecutionPayload) -> dict[str, Any]:
    """Invocation inputs of a run: user vars plus the target object bindings."""
    inputs: dict[str, Any] = {"objectIds": list(payload.object_ids)}
    if payload.object_ids:
        inputs["objectId"] = payload.object_ids[0]
    inputs.update(payload.vars)
    return inputs


@workflow.defn(name=DSL_WORKFLOW_TYPE)
class DSLWorkflow:
    """Interprets a declarative workflow definition carried in its payload."""

    def __init__(self):
        self._interpreter: StepInterpreter | None = None

    @workflow.run
    async def run(self, payload: dict[str, Any]) -> Any:
        """Validate the payload and run its definition to completion.

        The payload arrives untyped so that a malformed definition fails the
        run with a non-retryable error instead of failing every workflow task.
        """
        try:
            request = DSLWorkflowExecutionPayload.model_validate(payload)
        except ValidationError as e:
            raise InvalidWorkflowDefinition(
                f"Invalid DSL workflow payload: {e}", errors=e.errors(include_url=False)
            ) from None

        definition = request.workflow
        if definition is None:
            raise WorkflowParamNotFound("workflow")

        workflow.logger.info(f"Starting DSL workflow {definition.name}")

        self._interpreter = StepInterpreter(TemporalDispatcher(request.initiated_by), request)
        vars = create_scope(definition.vars, build_inputs(request))
        return await self._interpreter.run(definition, vars)

    @workflow.query
    def get_status(self) -> dict[str, Any]:
        """Current state, step index and workflow name."""
        if self._interpreter is None:
            return {
                "state": InterpreterState.READY.value,
                "workflow_name": None,
                "step_index": None,
                "step_name": None,
            }
        return self._interpreter.status()
