"""Workflow worker configuration."""

from pydantic_settings import SettingsConfigDict

from .base import BaseAppSettings


class WorkflowSettings(BaseAppSettings):
    """Workflow execution configuration."""

    # Temporal-specific settings
    TEMPORAL_SERVER_URL: str = "localhost:7233"
    TEMPORAL_NAMESPACE: str = "default"
    TEMPORAL_TASK_QUEUE: str = "stepwise-dsl"

    # Worker settings
    TEMPORAL_MAX_CONCURRENT_ACTIVITIES: int = 10
    TEMPORAL_MAX_CONCURRENT_WORKFLOWS: int = 5

    model_config = SettingsConfigDict(env_prefix="WORKFLOW__")
