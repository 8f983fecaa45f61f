"""Pre-activity data hydration."""

import logging
from typing import Any

from stepwise_common.exceptions import NoDocumentFound

from ...models import FetchSpec
from ..vars import Vars
from .registry import DataProvider, FetchProviderRegistry

logger = logging.getLogger(__name__)


async def hydrate(
    vars: Vars,
    fetch_specs: dict[str, FetchSpec],
    client: Any,
    registry: FetchProviderRegistry,
    providers: dict[str, DataProvider] | None = None,
) -> None:
    """Run every fetch spec in declaration order, binding results into ``vars``.

    Queries are resolved against the scope as it is when their turn comes, so a
    later fetch may reference the result of an earlier one.

    Providers are built once per name for ``client``, reusing (and filling)
    ``providers`` when given.

    Raises:
        NoDocumentFound: A fetch declared ``on_not_found: throw`` returned nothing
        UnknownProvider: A fetch names an unregistered provider
    """
    if providers is None:
        providers = {}
    for key, spec in fetch_specs.items():
        if spec.query is not None:
            spec = spec.model_copy(update={"query": vars.resolve_params(spec.query)})

        provider = registry.get(client, spec, providers)
        logger.info(f"Fetching data for {key} with provider {provider.name}")
        result = await provider.fetch(spec)

        if result:
            vars.set_value(key, result[0] if spec.limit == 1 else result)
        elif spec.on_not_found == "throw":
            raise NoDocumentFound(
                f"No documents found for: {spec.model_dump_json()}",
                fetch=key,
                provider=spec.provider,
            )
        else:
            vars.set_value(key, None)
