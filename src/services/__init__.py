"""Core services: cache-aside store, image enrichment, catalog orchestration."""

from src.services.cache_aside import CacheAsideStore
from src.services.catalog_service import CatalogService
from src.services.image_enricher import ImageEnricher
from src.services.provider_registry import ProviderRegistry, RegisteredProvider

__all__ = [
    "CacheAsideStore",
    "CatalogService",
    "ImageEnricher",
    "ProviderRegistry",
    "RegisteredProvider",
]
