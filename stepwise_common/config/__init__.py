"""Configuration management for Stepwise.

This module provides centralized configuration management with clean separation
of concerns across different settings domains.
"""

from .app import AppSettings, get_app_settings
from .base import BaseAppSettings
from .platform import PlatformSettings, get_platform_settings
from .settings import Settings, get_settings
from .workflow import WorkflowSettings

__all__ = [
    # App
    "AppSettings",
    # Base
    "BaseAppSettings",
    # Platform
    "PlatformSettings",
    # Main settings
    "Settings",
    # Workflow
    "WorkflowSettings",
    "get_app_settings",
    "get_platform_settings",
    "get_settings",
]
