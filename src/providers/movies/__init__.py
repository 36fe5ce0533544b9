"""Movie catalog providers."""

from src.providers.movies.remote_catalog_provider import RemoteCatalogProvider

__all__ = ["RemoteCatalogProvider"]
