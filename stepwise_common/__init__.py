"""Stepwise Common Library."""

from . import (
    auth,
    client,
    config,
    exceptions,
    logging,
    testing,
)

__version__ = "0.1.0"

__all__ = [
    "auth",
    "client",
    "config",
    "exceptions",
    "logging",
    "testing",
]
