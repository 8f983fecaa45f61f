"""Platform API client."""

from .platform_client import PlatformClient, get_platform_client

__all__ = ["PlatformClient", "get_platform_client"]
