"""Helpers for writing DSL activities."""

from .context import ActivityContext, create_platform_client, setup_activity

__all__ = ["ActivityContext", "create_platform_client", "setup_activity"]
