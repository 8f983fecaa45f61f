"""Name-keyed registry of data providers used by activity ``fetch`` specs."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from stepwise_common.exceptions import InvalidWorkflowDefinition, UnknownProvider

from ...models import FetchSpec, FindPayload

logger = logging.getLogger(__name__)


class DataProvider(ABC):
    """Turns a declarative query into a list of records."""

    def __init__(self, name: str, requires_query: bool = True):
        """Initialize the provider.

        Args:
            name: Name the provider is registered under
            requires_query: Reject fetch specs without a query
        """
        self.name = name
        self.requires_query = requires_query

    async def fetch(self, spec: FetchSpec) -> list[Any]:
        """Run the (already resolved) query of ``spec``, honoring ``spec.limit``."""
        if self.requires_query and not spec.query:
            raise InvalidWorkflowDefinition(
                f"Fetch provider '{self.name}' requires a query", provider=self.name
            )
        payload = FindPayload(query=spec.query, limit=spec.limit, select=spec.select)
        result = list(await self.do_fetch(payload) or [])
        if spec.limit is not None and spec.limit >= 0:
            result = result[: spec.limit]
        return result

    @abstractmethod
    async def do_fetch(self, payload: FindPayload) -> list[Any]:
        """Query the backing data source."""
        pass


ProviderFactory = Callable[[Any], DataProvider]


class FetchProviderRegistry:
    """Registry of provider factories, populated once at worker start-up.

    The registry holds factories only. Provider instances are bound to one
    client and live in the ``providers`` mapping of whoever owns that client
    (see ``ActivityContext.providers``).
    """

    def __init__(self):
        self._factories: dict[str, ProviderFactory] = {}

    def register(self, name: str, factory: ProviderFactory) -> None:
        """Register ``factory`` under ``name``; a later registration replaces it."""
        if name in self._factories:
            logger.info(f"Replacing fetch provider factory '{name}'")
        self._factories[name] = factory

    def names(self) -> list[str]:
        return sorted(self._factories)

    def get(
        self,
        client: Any,
        spec: FetchSpec,
        providers: dict[str, DataProvider] | None = None,
    ) -> DataProvider:
        """Return the provider named by ``spec.provider`` bound to ``client``.

        Args:
            client: Platform client the provider queries through
            spec: Fetch spec naming the provider
            providers: Instances already built for ``client``, keyed by provider
                name; a newly built provider is added to it

        Raises:
            UnknownProvider: If no factory is registered under that name
        """
        factory = self._factories.get(spec.provider)
        if factory is None:
            raise UnknownProvider(spec.provider, registered=self.names())

        if providers is None:
            return factory(client)
        provider = providers.get(spec.provider)
        if provider is None:
            provider = providers[spec.provider] = factory(client)
        return provider
