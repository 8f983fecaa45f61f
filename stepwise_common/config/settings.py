"""Main application settings container."""

from functools import lru_cache

from pydantic import Field

from .app import AppSettings
from .base import BaseAppSettings
from .platform import PlatformSettings
from .workflow import WorkflowSettings


class Settings(BaseAppSettings):
    """Main application settings container."""

    app: AppSettings = Field(default_factory=AppSettings)
    workflow: WorkflowSettings = Field(default_factory=WorkflowSettings)
    platform: PlatformSettings = Field(default_factory=PlatformSettings)


@lru_cache
def get_settings() -> Settings:
    """Get the main application settings."""
    return Settings(
        app=AppSettings(),
        workflow=WorkflowSettings(),
        platform=PlatformSettings(),
    )
