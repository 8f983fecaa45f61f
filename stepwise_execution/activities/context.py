"""Per-invocation context handed to DSL activity implementations.

Every DSL activity starts with::

    @activity.defn(name="summarize")
    async def summarize(payload: DSLActivityExecutionPayload) -> str:
        ctx = await setup_activity(payload)
        ...

``setup_activity`` merges the imported variables with the step's ``params``,
runs the step's ``fetch`` specs and resolves every reference, so the activity
body only ever sees plain values.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from stepwise_common.auth import get_project_from_token
from stepwise_common.client import PlatformClient, get_platform_client
from stepwise_common.exceptions import WorkflowParamNotFound
from temporalio import activity

from ..dsl.fetch import DataProvider, FetchProviderRegistry, get_fetch_registry, hydrate
from ..dsl.vars import Vars
from ..models import DSLActivityExecutionPayload, WorkflowExecutionPayload

logger = logging.getLogger(__name__)

ClientFactory = Callable[[DSLActivityExecutionPayload], Any]


def create_platform_client(payload: WorkflowExecutionPayload) -> PlatformClient:
    """Default client factory: a platform client for the payload's endpoints and token."""
    return get_platform_client(payload.auth_token, payload.config)


class ActivityContext:
    """Resolved params and identifiers of one activity invocation."""

    def __init__(
        self,
        payload: DSLActivityExecutionPayload,
        params: dict[str, Any] | None = None,
        client_factory: ClientFactory | None = None,
    ):
        self.payload = payload
        self.params: dict[str, Any] = params or {}
        self._client_factory = client_factory or create_platform_client
        self._client: Any = None
        # fetch providers bound to this context's client, keyed by name
        self.providers: dict[str, DataProvider] = {}
        self._project: asyncio.Future | None = None

    @property
    def client(self) -> Any:
        """Platform client, created on first access."""
        if self._client is None:
            self._client = self._client_factory(self.payload)
        return self._client

    @property
    def object_ids(self) -> list[str]:
        return self.payload.object_ids

    @property
    def object_id(self) -> str:
        if not self.payload.object_ids:
            logger.error("No objectId found in payload")
            raise WorkflowParamNotFound("objectIds[0]", self.payload.workflow_name)
        return self.payload.object_ids[0]

    @property
    def activity_info(self) -> activity.Info:
        return activity.info()

    @property
    def run_id(self) -> str:
        run_id = activity.info().workflow_run_id
        if not run_id:
            logger.error("No runId found in activity info")
            raise WorkflowParamNotFound("runId", self.payload.workflow_name)
        return run_id

    @property
    def workflow_id(self) -> str:
        workflow_id = activity.info().workflow_id
        if not workflow_id:
            logger.error("No workflowId found in activity info")
            raise WorkflowParamNotFound("workflowId", self.payload.workflow_name)
        return workflow_id

    async def fetch_project(self) -> dict[str, Any] | None:
        """The project owning this execution, loaded at most once per invocation."""
        if self._project is None:
            self._project = asyncio.ensure_future(_fetch_project(self.client, self.payload))
        return await self._project


async def setup_activity(
    payload: DSLActivityExecutionPayload,
    *,
    registry: FetchProviderRegistry | None = None,
    client_factory: ClientFactory | None = None,
) -> ActivityContext:
    """Resolve the params of a DSL activity and build its context.

    Args:
        payload: Payload dispatched by the DSL workflow
        registry: Fetch providers to use; defaults to the process-wide registry
        client_factory: Builds the platform client from the payload

    Raises:
        NoDocumentFound: A fetch declared ``on_not_found: throw`` returned nothing
        UnknownProvider: A fetch names an unregistered provider
    """
    step = payload.activity

    # imported params are final values; the step's own params may hold references
    vars = Vars(values=step.params, resolved=payload.params)

    if payload.debug_mode:
        logger.info(
            f"Setting up activity {step.name}",
            extra={
                "config": payload.config.model_dump() if payload.config else None,
                "step": step.model_dump(by_alias=True),
                "imported": payload.params,
            },
        )

    context = ActivityContext(payload, client_factory=client_factory)

    if step.fetch:
        await hydrate(
            vars,
            step.fetch,
            context.client,
            registry or get_fetch_registry(),
            context.providers,
        )

    context.params = vars.resolve()
    if payload.debug_mode:
        logger.info(f"Resolved params for activity {step.name}", extra={"resolved": context.params})
    logger.info(f"Activity {step.name} setup complete")

    return context


async def _fetch_project(client: Any, payload: WorkflowExecutionPayload) -> dict[str, Any] | None:
    project = get_project_from_token(payload.auth_token)
    return await client.projects.retrieve(project["id"]) if project else None
