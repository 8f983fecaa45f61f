"""Platform API configuration used by activities."""

from functools import lru_cache

from pydantic_settings import SettingsConfigDict

from .base import BaseAppSettings


class PlatformSettings(BaseAppSettings):
    """Fallback endpoints for the platform client.

    Workflow payloads normally carry their own ``config.studio_url`` and
    ``config.store_url``; these values are only used when they don't.
    """

    STUDIO_URL: str = "http://localhost:8081"
    STORE_URL: str = "http://localhost:8082"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    model_config = SettingsConfigDict(env_prefix="PLATFORM__")


@lru_cache
def get_platform_settings() -> PlatformSettings:
    """Get platform settings."""
    return PlatformSettings()
