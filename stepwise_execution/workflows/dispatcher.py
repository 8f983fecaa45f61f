"""Temporal implementation of the interpreter's dispatcher."""

from typing import Any

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import is_cancelled_exception
from temporalio.workflow import ParentClosePolicy

with workflow.unsafe.imports_passed_through():
    from ..dsl.dispatcher import Dispatcher
    from ..models import (
        ActivityOptions,
        ChildWorkflowOptions,
        DSLActivityExecutionPayload,
        RetryOptions,
    )


def to_retry_policy(retry: RetryOptions | None) -> RetryPolicy | None:
    if retry is None:
        return None
    kwargs: dict[str, Any] = {k: v for k, v in retry if v is not None}
    return RetryPolicy(**kwargs)


def activity_kwargs(options: ActivityOptions) -> dict[str, Any]:
    """Keyword arguments for ``workflow.execute_activity``."""
    kwargs: dict[str, Any] = {
        k: v for k, v in options if k != "retry" and v is not None
    }
    retry_policy = to_retry_policy(options.retry)
    if retry_policy is not None:
        kwargs["retry_policy"] = retry_policy
    return kwargs


def child_workflow_kwargs(
    options: ChildWorkflowOptions | None,
    initiated_by: str | None = None,
) -> dict[str, Any]:
    """Keyword arguments for starting a child workflow."""
    kwargs: dict[str, Any] = {}
    if options is not None:
        kwargs.update({k: v for k, v in options if v is not None})
    if initiated_by:
        kwargs["memo"] = {"InitiatedBy": initiated_by}
    return kwargs


class TemporalDispatcher(Dispatcher):
    """Dispatches steps through the Temporal workflow APIs.

    Must only be used from inside a workflow run.
    """

    def __init__(self, initiated_by: str | None = None):
        self.initiated_by = initiated_by

    @property
    def logger(self):
        return workflow.logger

    async def dispatch_activity(
        self,
        name: str,
        payload: DSLActivityExecutionPayload,
        options: ActivityOptions,
    ) -> Any:
        return await workflow.execute_activity(name, args=[payload], **activity_kwargs(options))

    async def dispatch_child_workflow(
        self,
        name: str,
        payload: dict[str, Any],
        options: ChildWorkflowOptions | None = None,
    ) -> Any:
        return await workflow.execute_child_workflow(
            name,
            args=[payload],
            **child_workflow_kwargs(options, self.initiated_by),
        )

    async def start_child_workflow(
        self,
        name: str,
        payload: dict[str, Any],
        options: ChildWorkflowOptions | None = None,
    ) -> str:
        # async children outlive the parent run
        handle = await workflow.start_child_workflow(
            name,
            args=[payload],
            parent_close_policy=ParentClosePolicy.ABANDON,
            **child_workflow_kwargs(options, self.initiated_by),
        )
        return handle.id

    def is_cancellation(self, error: BaseException) -> bool:
        return is_cancelled_exception(error)
