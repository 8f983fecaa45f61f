"""Temporal worker bootstrap for DSL workflows.

Applications own their activities; they hand them over together with any
extra workflows and the worker registers them next to :class:`DSLWorkflow`::

    from stepwise_execution.worker import run_worker

    asyncio.run(run_worker([say_hello, combine]))
"""

import asyncio
import logging
import signal
from collections.abc import Callable, Sequence
from typing import Any

import dotenv
from stepwise_common.config import get_settings
from stepwise_common.logging import setup_logging
from temporalio.client import Client
from temporalio.contrib.pydantic import pydantic_data_converter
from temporalio.worker import Worker

from .workflows import DSLWorkflow

logger = logging.getLogger(__name__)


async def connect_client() -> Client:
    """Connect to the Temporal server configured in the workflow settings."""
    settings = get_settings()
    client = await Client.connect(
        settings.workflow.TEMPORAL_SERVER_URL,
        namespace=settings.workflow.TEMPORAL_NAMESPACE,
        data_converter=pydantic_data_converter,
    )
    logger.info("Connected to Temporal server")
    return client


def create_worker(
    client: Client,
    *,
    activities: Sequence[Callable[..., Any]],
    workflows: Sequence[type] = (),
    task_queue: str | None = None,
) -> Worker:
    """Create a worker running the DSL workflow plus the given activities and workflows."""
    settings = get_settings()
    return Worker(
        client,
        task_queue=task_queue or settings.workflow.TEMPORAL_TASK_QUEUE,
        workflows=[DSLWorkflow, *workflows],
        activities=list(activities),
        max_concurrent_workflow_tasks=settings.workflow.TEMPORAL_MAX_CONCURRENT_WORKFLOWS,
        max_concurrent_activities=settings.workflow.TEMPORAL_MAX_CONCURRENT_ACTIVITIES,
    )


async def run_worker(
    activities: Sequence[Callable[..., Any]],
    workflows: Sequence[type] = (),
    task_queue: str | None = None,
) -> None:
    """Run a worker until SIGINT or SIGTERM."""
    dotenv.load_dotenv()

    settings = get_settings()
    setup_logging(
        level=settings.app.LOG_LEVEL,
        enable_structured_logging=settings.app.STRUCTURED_LOGGING,
    )

    client = await connect_client()
    worker = create_worker(
        client, activities=activities, workflows=workflows, task_queue=task_queue
    )

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, shutdown_event.set)

    logger.info(
        f"Worker starting on task queue {task_queue or settings.workflow.TEMPORAL_TASK_QUEUE}"
    )
    async with worker:
        await shutdown_event.wait()
        logger.info("Shutdown signal received, stopping worker...")

    logger.info("Worker shutdown complete")
