"""Auth token helpers."""

from .project_token import get_project_from_token

__all__ = ["get_project_from_token"]
