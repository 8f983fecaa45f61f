"""Fetch providers: declarative data hydration for activity steps."""

from functools import lru_cache

from .hydration import hydrate
from .providers import DocumentProvider, DocumentTypeProvider, InteractionRunProvider
from .registry import DataProvider, FetchProviderRegistry, ProviderFactory


def create_default_registry() -> FetchProviderRegistry:
    """Build a registry holding the built-in platform providers."""
    registry = FetchProviderRegistry()
    registry.register(DocumentProvider.ID, DocumentProvider.factory)
    registry.register(DocumentTypeProvider.ID, DocumentTypeProvider.factory)
    registry.register(InteractionRunProvider.ID, InteractionRunProvider.factory)
    return registry


@lru_cache
def get_fetch_registry() -> FetchProviderRegistry:
    """Process-wide registry, built on first use."""
    return create_default_registry()


__all__ = [
    "DataProvider",
    "DocumentProvider",
    "DocumentTypeProvider",
    "FetchProviderRegistry",
    "InteractionRunProvider",
    "ProviderFactory",
    "create_default_registry",
    "get_fetch_registry",
    "hydrate",
]
