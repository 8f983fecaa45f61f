"""Data models for DSL workflow execution.

Workflow definitions, steps and the payloads exchanged between the workflow
and its activities. Definitions are frozen: a running interpreter never
mutates them.
"""

from datetime import timedelta
from typing import Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# === Activity options ===


class RetryOptions(BaseModel):
    """Retry policy overrides for a step or a whole workflow."""

    model_config = ConfigDict(frozen=True)

    initial_interval: timedelta | None = None
    maximum_interval: timedelta | None = None
    maximum_attempts: int | None = None
    backoff_coefficient: float | None = None
    non_retryable_error_types: list[str] | None = None


class ActivityOptions(BaseModel):
    """Timeouts and retries used when dispatching an activity.

    Durations accept a number of seconds or an ISO-8601 duration (``PT5M``).
    """

    model_config = ConfigDict(frozen=True)

    start_to_close_timeout: timedelta | None = None
    schedule_to_close_timeout: timedelta | None = None
    schedule_to_start_timeout: timedelta | None = None
    retry: RetryOptions | None = None


class ChildWorkflowOptions(BaseModel):
    """Options used when dispatching a registered child workflow."""

    model_config = ConfigDict(frozen=True)

    task_queue: str | None = None
    execution_timeout: timedelta | None = None
    run_timeout: timedelta | None = None


# === Workflow definition ===


class FetchSpec(BaseModel):
    """Declarative data hydration for an activity step.

    ``query`` may embed ``${...}`` references; it is resolved right before the
    provider is called, never ahead of time.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    provider: str = Field(validation_alias=AliasChoices("provider", "type"))
    query: Any = None
    limit: int | None = None
    select: str | None = None
    on_not_found: Literal["throw", "null"] = "null"


class ActivityStep(BaseModel):
    """Run a named activity with imported variables and literal params."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["activity"] = "activity"
    name: str
    import_: list[str] = Field(default_factory=list, alias="import")
    output: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)
    fetch: dict[str, FetchSpec] = Field(default_factory=dict)
    condition: dict[str, Any] | None = None
    options: ActivityOptions | None = None


class WorkflowStep(BaseModel):
    """Run a child workflow, either registered by ``name`` or inline via ``spec``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["workflow"] = "workflow"
    name: str
    output: str | None = None
    import_: list[str] | None = Field(default=None, alias="import")
    vars: dict[str, Any] = Field(default_factory=dict)
    spec: "WorkflowSpec | None" = None
    condition: dict[str, Any] | None = None
    async_: bool = Field(default=False, alias="async")
    options: ChildWorkflowOptions | None = None


Step = Union[ActivityStep, WorkflowStep]


def parse_step(value: Any) -> Any:
    """Turn a raw step mapping into the step model named by its ``type``."""
    if isinstance(value, (ActivityStep, WorkflowStep)) or not isinstance(value, dict):
        return value
    step_type = value.get("type") or "activity"
    if step_type == "activity":
        return ActivityStep.model_validate(value)
    if step_type == "workflow":
        return WorkflowStep.model_validate(value)
    raise ValueError(f"Unknown step type '{step_type}' for step '{value.get('name')}'")


class WorkflowSpec(BaseModel):
    """A declarative workflow: initial variables plus an ordered step list."""

    model_config = ConfigDict(frozen=True)

    name: str
    vars: dict[str, Any] = Field(default_factory=dict)
    steps: list[Step] | None = None
    # legacy definitions listed activities only
    activities: list[ActivityStep] | None = None
    result: str | list[str] | None = None
    options: ActivityOptions | None = None
    debug_mode: bool = False
    error_handler: str | None = None

    @field_validator("steps", mode="before")
    @classmethod
    def _parse_steps(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [parse_step(step) for step in value]
        return value


WorkflowStep.model_rebuild()


# === Execution payloads ===


class ExecutionConfig(BaseModel):
    """Platform endpoints forwarded to activities."""

    studio_url: str | None = None
    store_url: str | None = None


class WorkflowExecutionPayload(BaseModel):
    """Fields shared by every workflow and activity invocation."""

    model_config = ConfigDict(populate_by_name=True)

    account_id: str | None = None
    project_id: str | None = None
    initiated_by: str | None = None
    wf_rule_name: str | None = None

    # user input, applied over the definition's default vars
    vars: dict[str, Any] = Field(default_factory=dict)

    # target objects processed by the workflow
    object_ids: list[str] = Field(default_factory=list, alias="objectIds")

    auth_token: str | None = None
    config: ExecutionConfig | None = None


class DSLWorkflowExecutionPayload(WorkflowExecutionPayload):
    """Input of the DSL workflow."""

    workflow: WorkflowSpec | None = None


class DSLActivityExecutionPayload(WorkflowExecutionPayload):
    """Input of every activity dispatched by the DSL workflow."""

    workflow_name: str
    debug_mode: bool = False
    activity: ActivityStep
    # imported variables, already resolved
    params: dict[str, Any] = Field(default_factory=dict)


class FindPayload(BaseModel):
    """Query handed to a fetch provider."""

    query: Any = None
    limit: int | None = None
    select: str | None = None
