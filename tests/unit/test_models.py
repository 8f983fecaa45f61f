"""Unit tests for workflow definition models and activity options."""

from datetime import timedelta

import pytest
from pydantic import ValidationError
from stepwise_common.exceptions import NON_RETRYABLE_ERRORS
from stepwise_execution.dsl.options import DEFAULT_ACTIVITY_OPTIONS, merge_activity_options
from stepwise_execution.models import (
    ActivityOptions,
    ActivityStep,
    ChildWorkflowOptions,
    DSLWorkflowExecutionPayload,
    RetryOptions,
    WorkflowSpec,
    WorkflowStep,
)
from stepwise_execution.workflows.dispatcher import (
    activity_kwargs,
    child_workflow_kwargs,
    to_retry_policy,
)
from temporalio.common import RetryPolicy


class TestWorkflowSpec:
    """Test cases for parsing workflow definitions."""

    def test_steps_parsed_by_type(self):
        spec = WorkflowSpec.model_validate(
            {
                "name": "mixed",
                "steps": [
                    {"name": "a", "import": ["x"], "output": "y"},
                    {"type": "activity", "name": "b"},
                    {
                        "type": "workflow",
                        "name": "c",
                        "async": True,
                        "spec": {"name": "inner", "steps": [{"name": "d"}]},
                    },
                ],
            }
        )

        a, b, c = spec.steps
        assert isinstance(a, ActivityStep) and a.import_ == ["x"]
        assert isinstance(b, ActivityStep) and b.import_ == []
        assert isinstance(c, WorkflowStep) and c.async_ is True
        assert c.import_ is None
        assert isinstance(c.spec.steps[0], ActivityStep)

    def test_unknown_step_type(self):
        with pytest.raises(ValidationError, match="Unknown step type 'timer'"):
            WorkflowSpec.model_validate({"name": "bad", "steps": [{"type": "timer", "name": "t"}]})

    def test_definition_is_frozen(self):
        spec = WorkflowSpec(name="frozen")

        with pytest.raises(ValidationError):
            spec.name = "changed"

    def test_round_trips_through_aliases(self):
        raw = {
            "name": "aliases",
            "steps": [
                {"type": "workflow", "name": "c", "async": True, "import": ["a"]},
                {"type": "activity", "name": "x", "import": ["a"], "fetch": {"d": {"type": "document"}}},
            ],
        }

        dumped = WorkflowSpec.model_validate(raw).model_dump(mode="json", by_alias=True)

        assert WorkflowSpec.model_validate(dumped) == WorkflowSpec.model_validate(raw)

    def test_payload_object_ids_alias(self):
        payload = DSLWorkflowExecutionPayload.model_validate(
            {"objectIds": ["a"], "workflow": {"name": "w", "steps": [{"name": "s"}]}}
        )

        assert payload.object_ids == ["a"]
        assert payload.workflow.name == "w"


class TestActivityOptions:
    """Test cases for option layering and Temporal conversion."""

    def test_defaults(self):
        options = merge_activity_options(DEFAULT_ACTIVITY_OPTIONS)

        assert options.start_to_close_timeout == timedelta(minutes=5)
        assert options.retry.initial_interval == timedelta(seconds=10)
        assert options.retry.backoff_coefficient == 2.0
        assert options.retry.maximum_attempts == 10
        assert options.retry.maximum_interval == timedelta(seconds=3000)
        assert options.retry.non_retryable_error_types == NON_RETRYABLE_ERRORS

    def test_later_layers_win_field_by_field(self):
        options = merge_activity_options(
            DEFAULT_ACTIVITY_OPTIONS,
            ActivityOptions(retry=RetryOptions(maximum_attempts=2)),
            None,
            ActivityOptions(schedule_to_close_timeout=timedelta(hours=1)),
        )

        assert options.start_to_close_timeout == timedelta(minutes=5)
        assert options.schedule_to_close_timeout == timedelta(hours=1)
        assert options.retry.maximum_attempts == 2
        assert options.retry.initial_interval == timedelta(seconds=10)

    def test_no_retry_layer(self):
        options = merge_activity_options(ActivityOptions(start_to_close_timeout=timedelta(seconds=1)))

        assert options.retry is None

    def test_activity_kwargs(self):
        kwargs = activity_kwargs(merge_activity_options(DEFAULT_ACTIVITY_OPTIONS))

        assert kwargs["start_to_close_timeout"] == timedelta(minutes=5)
        assert "schedule_to_close_timeout" not in kwargs
        assert "retry" not in kwargs
        assert isinstance(kwargs["retry_policy"], RetryPolicy)
        assert kwargs["retry_policy"].maximum_attempts == 10
        assert list(kwargs["retry_policy"].non_retryable_error_types) == NON_RETRYABLE_ERRORS

    def test_to_retry_policy_none(self):
        assert to_retry_policy(None) is None

    def test_child_workflow_kwargs(self):
        kwargs = child_workflow_kwargs(
            ChildWorkflowOptions(task_queue="other", execution_timeout=timedelta(hours=2)),
            initiated_by="user_1",
        )

        assert kwargs == {
            "task_queue": "other",
            "execution_timeout": timedelta(hours=2),
            "memo": {"InitiatedBy": "user_1"},
        }
        assert child_workflow_kwargs(None) == {}
