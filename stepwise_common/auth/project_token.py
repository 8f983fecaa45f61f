"""Helpers for reading claims from workflow auth tokens."""

import logging
from typing import Any

import jwt

logger = logging.getLogger(__name__)


def get_project_from_token(token: str | None) -> dict[str, Any] | None:
    """Extract the project reference carried by an auth token.

    The token is only decoded, not verified: it was verified by the platform
    before the workflow was started and is forwarded to the workers as-is.

    Returns:
        A dict with at least an ``id`` key, or None when the token carries no project
    """
    if not token:
        return None

    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        logger.warning(f"Unable to decode workflow auth token: {e}")
        return None

    project = claims.get("project")
    if isinstance(project, dict) and project.get("id"):
        return project
    if isinstance(project, str) and project:
        return {"id": project}

    project_id = claims.get("project_id")
    if project_id:
        return {"id": project_id}
    return None
