"""Unit tests for activity setup and the activity context."""

import dataclasses
from unittest.mock import patch

import jwt
import pytest
from stepwise_common.exceptions import NoDocumentFound, UnknownProvider, WorkflowParamNotFound
from stepwise_common.testing import TestPlatformClient
from stepwise_execution.activities import ActivityContext, setup_activity
from temporalio.testing import ActivityEnvironment

pytestmark = pytest.mark.asyncio


class TestSetupActivity:
    """Test cases for ``setup_activity``."""

    async def test_step_params_win_over_imports(self, make_activity_payload, platform_client):
        payload = make_activity_payload(
            {"name": "greet", "import": ["name", "lang"], "params": {"lang": "fr"}},
            params={"name": "Foo", "lang": "en"},
        )

        context = await setup_activity(payload, client_factory=lambda p: platform_client)

        assert context.params == {"name": "Foo", "lang": "fr"}

    async def test_params_reference_imports(self, make_activity_payload, platform_client):
        payload = make_activity_payload(
            {"name": "greet", "params": {"message": "Hello, ${name}!"}},
            params={"name": "Foo"},
        )

        context = await setup_activity(payload, client_factory=lambda p: platform_client)

        assert context.params["message"] == "Hello, Foo!"

    async def test_fetch_limit_one_unwraps(
        self, make_activity_payload, platform_client, fetch_registry
    ):
        payload = make_activity_payload(
            {
                "name": "summarize",
                "fetch": {"doc": {"type": "document", "query": {"id": "${objectId}"}, "limit": 1}},
                "params": {"title": "${doc.properties.title}"},
            },
            params={"objectId": "doc_2"},
        )

        context = await setup_activity(
            payload, registry=fetch_registry, client_factory=lambda p: platform_client
        )

        assert context.params["doc"]["id"] == "doc_2"
        assert context.params["title"] == "Second"
        assert platform_client.objects.queries == [{"query": {"id": "doc_2"}, "limit": 1}]

    async def test_fetch_list_and_chained_queries(
        self, make_activity_payload, platform_client, fetch_registry
    ):
        payload = make_activity_payload(
            {
                "name": "classify",
                "fetch": {
                    "invoices": {"provider": "document", "query": {"type": "Invoice"}},
                    "doc_type": {
                        "provider": "document-type",
                        "query": {"id": "${invoices.0.type}"},
                        "limit": 1,
                    },
                },
            }
        )

        context = await setup_activity(
            payload, registry=fetch_registry, client_factory=lambda p: platform_client
        )

        assert [doc["id"] for doc in context.params["invoices"]] == ["doc_1", "doc_2"]
        assert context.params["doc_type"] == {"id": "Invoice", "name": "Invoice"}
        assert sorted(context.providers) == ["document", "document-type"]
        assert all(p.client is platform_client for p in context.providers.values())

    async def test_empty_fetch_throw(self, make_activity_payload, platform_client, fetch_registry):
        payload = make_activity_payload(
            {
                "name": "summarize",
                "fetch": {
                    "doc": {
                        "type": "document",
                        "query": {"id": "unknown"},
                        "limit": 1,
                        "on_not_found": "throw",
                    }
                },
            }
        )

        with pytest.raises(NoDocumentFound) as exc_info:
            await setup_activity(
                payload, registry=fetch_registry, client_factory=lambda p: platform_client
            )

        assert exc_info.value.non_retryable

    @pytest.mark.parametrize("limit", [1, None])
    async def test_empty_fetch_binds_null(
        self, make_activity_payload, platform_client, fetch_registry, limit
    ):
        payload = make_activity_payload(
            {
                "name": "summarize",
                "fetch": {"doc": {"type": "document", "query": {"id": "unknown"}, "limit": limit}},
            }
        )

        context = await setup_activity(
            payload, registry=fetch_registry, client_factory=lambda p: platform_client
        )

        assert "doc" in context.params
        assert context.params["doc"] is None

    async def test_unknown_provider(self, make_activity_payload, platform_client, fetch_registry):
        payload = make_activity_payload(
            {"name": "summarize", "fetch": {"doc": {"type": "nope", "query": {"id": "x"}}}}
        )

        with pytest.raises(UnknownProvider) as exc_info:
            await setup_activity(
                payload, registry=fetch_registry, client_factory=lambda p: platform_client
            )

        assert exc_info.value.provider == "nope"

    async def test_no_fetch_never_builds_client(self, make_activity_payload):
        def factory(payload):
            raise AssertionError("client should not be created")

        context = await setup_activity(
            make_activity_payload({"name": "noop"}), client_factory=factory
        )

        assert context.params == {}


class TestActivityContext:
    """Test cases for ``ActivityContext``."""

    async def test_object_ids(self, make_activity_payload):
        context = ActivityContext(make_activity_payload({"name": "noop"}))

        assert context.object_ids == ["doc_1", "doc_2"]
        assert context.object_id == "doc_1"

    async def test_missing_object_id(self, make_activity_payload):
        context = ActivityContext(make_activity_payload({"name": "noop"}, object_ids=[]))

        with pytest.raises(WorkflowParamNotFound) as exc_info:
            _ = context.object_id

        assert exc_info.value.param == "objectIds[0]"
        assert "test_workflow" in str(exc_info.value)

    async def test_ids_from_activity_info(self, make_activity_payload):
        env = ActivityEnvironment()
        env.info = dataclasses.replace(
            env.info, workflow_id="wf-123", workflow_run_id="run-456"
        )

        async def read_ids():
            context = ActivityContext(make_activity_payload({"name": "noop"}))
            return context.workflow_id, context.run_id

        assert await env.run(read_ids) == ("wf-123", "run-456")

    async def test_missing_run_id(self, make_activity_payload):
        env = ActivityEnvironment()
        env.info = dataclasses.replace(env.info, workflow_run_id="")

        async def read_run_id():
            return ActivityContext(make_activity_payload({"name": "noop"})).run_id

        with pytest.raises(WorkflowParamNotFound, match="runId"):
            await env.run(read_run_id)

    async def test_client_is_lazy_and_cached(self, make_activity_payload):
        created = []

        def factory(payload):
            created.append(payload)
            return TestPlatformClient()

        context = ActivityContext(make_activity_payload({"name": "noop"}), client_factory=factory)
        assert created == []

        assert context.client is context.client
        assert len(created) == 1

    async def test_fetch_project_is_memoized(self, make_activity_payload):
        client = TestPlatformClient()
        client.projects.projects["prj_1"] = {"id": "prj_1", "name": "Demo"}
        token = jwt.encode(
            {"project": {"id": "prj_1"}}, "stepwise-test-signing-key-0123456789", algorithm="HS256"
        )
        context = ActivityContext(
            make_activity_payload({"name": "noop"}, auth_token=token),
            client_factory=lambda p: client,
        )

        first = await context.fetch_project()
        second = await context.fetch_project()

        assert first == {"id": "prj_1", "name": "Demo"}
        assert second is first
        assert client.projects.retrieved == ["prj_1"]

    async def test_fetch_project_without_token(self, make_activity_payload):
        client = TestPlatformClient()
        context = ActivityContext(make_activity_payload({"name": "noop"}), client_factory=lambda p: client)

        assert await context.fetch_project() is None
        assert client.projects.retrieved == []

    async def test_debug_mode_logs_setup(self, make_activity_payload):
        payload = make_activity_payload(
            {"name": "greet", "params": {"a": 1}}, debug_mode=True
        )

        with patch("stepwise_execution.activities.context.logger") as mock_logger:
            context = await setup_activity(payload)

        assert context.params == {"a": 1}
        messages = [call.args[0] for call in mock_logger.info.call_args_list]
        assert "Setting up activity greet" in messages
        assert "Resolved params for activity greet" in messages
