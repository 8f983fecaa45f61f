"""HTTP client for the platform store and studio APIs.

Each request opens its own ``httpx.AsyncClient`` so a ``PlatformClient`` holds
no connection state and needs no explicit close; it lives exactly as long as
the activity that created it.
"""

import logging
from typing import Any

import httpx

from ..config.platform import get_platform_settings

logger = logging.getLogger(__name__)


class PlatformClient:
    """Thin async client over the store (objects, types) and studio (projects, runs) APIs."""

    def __init__(
        self,
        store_url: str,
        studio_url: str,
        auth_token: str | None = None,
        timeout: float = 30.0,
    ):
        self.store_url = store_url.rstrip("/")
        self.studio_url = studio_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout

        self.projects = ProjectsApi(self)
        self.objects = ObjectsApi(self)
        self.types = TypesApi(self)
        self.runs = RunsApi(self)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    async def request(
        self,
        method: str,
        base_url: str,
        path: str,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            httpx.HTTPStatusError: If the server answers with an error status
        """
        url = f"{base_url}{path}"
        async with httpx.AsyncClient(timeout=self.timeout, headers=self._headers()) as client:
            response = await client.request(method, url, json=json)
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()


class _Api:
    def __init__(self, client: PlatformClient):
        self.client = client


class ProjectsApi(_Api):
    """Studio projects."""

    async def retrieve(self, project_id: str) -> dict[str, Any]:
        return await self.client.request(
            "GET", self.client.studio_url, f"/api/v1/projects/{project_id}"
        )


class ObjectsApi(_Api):
    """Store content objects (documents)."""

    async def find(self, payload: dict[str, Any]) -> list[dict[str, Any]]:
        return await self.client.request(
            "POST", self.client.store_url, "/api/v1/objects/find", json=payload
        ) or []


class TypesApi(_Api):
    """Store content types."""

    async def find(self, payload: dict[str, Any]) -> list[dict[str, Any]]:
        return await self.client.request(
            "POST", self.client.store_url, "/api/v1/types/find", json=payload
        ) or []


class RunsApi(_Api):
    """Studio interaction runs."""

    async def find(self, payload: dict[str, Any]) -> list[dict[str, Any]]:
        return await self.client.request(
            "POST", self.client.studio_url, "/api/v1/runs/find", json=payload
        ) or []


def get_platform_client(auth_token: str | None, config: Any = None) -> PlatformClient:
    """Create a platform client from a workflow payload's ``config``.

    Args:
        auth_token: Token forwarded by the workflow payload
        config: Object or dict with ``studio_url`` and ``store_url``; missing
            values fall back to ``PlatformSettings``
    """
    settings = get_platform_settings()

    if isinstance(config, dict):
        studio_url = config.get("studio_url")
        store_url = config.get("store_url")
    else:
        studio_url = getattr(config, "studio_url", None)
        store_url = getattr(config, "store_url", None)

    client = PlatformClient(
        store_url=store_url or settings.STORE_URL,
        studio_url=studio_url or settings.STUDIO_URL,
        auth_token=auth_token,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    logger.debug(f"Created platform client for store {client.store_url}, studio {client.studio_url}")
    return client
