"""Built-in fetch providers backed by the platform API."""

from typing import Any

from stepwise_common.client import PlatformClient

from ...models import FindPayload
from .registry import DataProvider


class DocumentProvider(DataProvider):
    """Content objects from the store."""

    ID = "document"

    def __init__(self, client: PlatformClient):
        super().__init__(self.ID, requires_query=True)
        self.client = client

    async def do_fetch(self, payload: FindPayload) -> list[dict[str, Any]]:
        return await self.client.objects.find(payload.model_dump(exclude_none=True))

    @classmethod
    def factory(cls, client: PlatformClient) -> "DocumentProvider":
        return cls(client)


class DocumentTypeProvider(DataProvider):
    """Content types from the store."""

    ID = "document-type"

    def __init__(self, client: PlatformClient):
        super().__init__(self.ID, requires_query=True)
        self.client = client

    async def do_fetch(self, payload: FindPayload) -> list[dict[str, Any]]:
        return await self.client.types.find(payload.model_dump(exclude_none=True))

    @classmethod
    def factory(cls, client: PlatformClient) -> "DocumentTypeProvider":
        return cls(client)


class InteractionRunProvider(DataProvider):
    """Interaction runs from the studio."""

    ID = "interaction-run"

    def __init__(self, client: PlatformClient):
        super().__init__(self.ID, requires_query=True)
        self.client = client

    async def do_fetch(self, payload: FindPayload) -> list[dict[str, Any]]:
        return await self.client.runs.find(payload.model_dump(exclude_none=True))

    @classmethod
    def factory(cls, client: PlatformClient) -> "InteractionRunProvider":
        return cls(client)
