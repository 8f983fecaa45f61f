"""Testing utilities for Stepwise.

This module provides shared test implementations and mock objects
to avoid duplication across test files.
"""

from .mocks import TestPlatformClient

__all__ = ["TestPlatformClient"]
