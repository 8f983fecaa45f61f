"""Pytest configuration and fixtures for Stepwise tests."""

import pytest
from stepwise_common.testing import TestPlatformClient
from stepwise_execution.dsl.fetch import create_default_registry
from stepwise_execution.models import ActivityStep, DSLActivityExecutionPayload, WorkflowExecutionPayload
from stepwise_execution.testing import InMemoryDispatcher


@pytest.fixture
def base_payload():
    """Fixture providing the fields shared by every invocation."""
    return WorkflowExecutionPayload(
        account_id="acc_1",
        project_id="prj_1",
        initiated_by="user_1",
        objectIds=["doc_1", "doc_2"],
    )


@pytest.fixture
def platform_client():
    """Fixture providing an in-memory platform client with a few documents."""
    return TestPlatformClient(
        objects=[
            {"id": "doc_1", "type": "Invoice", "properties": {"title": "First"}},
            {"id": "doc_2", "type": "Invoice", "properties": {"title": "Second"}},
            {"id": "doc_3", "type": "Contract", "properties": {"title": "Third"}},
        ],
        types=[{"id": "Invoice", "name": "Invoice"}],
        runs=[{"id": "run_1", "status": "completed"}],
    )


@pytest.fixture
def fetch_registry():
    """Fixture providing a fresh registry with the built-in providers."""
    return create_default_registry()


@pytest.fixture
def dispatcher():
    """Fixture providing an empty in-memory dispatcher."""
    return InMemoryDispatcher()


@pytest.fixture
def make_activity_payload(base_payload):
    """Fixture building activity payloads the way the interpreter does."""

    def _make(step: dict | ActivityStep, params: dict | None = None, **overrides):
        if isinstance(step, dict):
            step = ActivityStep.model_validate(step)
        fields = {
            **base_payload.model_dump(),
            "workflow_name": "test_workflow",
            "activity": step,
            "params": params or {},
            **overrides,
        }
        return DSLActivityExecutionPayload(**fields)

    return _make
