"""cinegate FastAPI application entry point.

Wires together the cache backend, catalog providers, image fetcher and
services, and mounts the routes.  Every long-lived component is built once
in the lifespan and stored on ``app.state``; handlers receive them through
``Depends`` rather than module globals.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router as catalog_router
from src.api.routes import system_router
from src.config.loader import load_config, load_provider_profiles
from src.config.settings import Settings
from src.interfaces.cache_provider import ICacheProvider
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.redis_cache import RedisCacheProvider
from src.providers.image.httpx_image_fetcher import HttpxImageFetcher
from src.providers.movies.remote_catalog_provider import RemoteCatalogProvider
from src.services.cache_aside import CacheAsideStore
from src.services.catalog_service import CatalogService
from src.services.image_enricher import ImageEnricher
from src.services.provider_registry import ProviderRegistry, RegisteredProvider
from src.utils.logging import configure_logging, get_logger

_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(log_level=settings.log_level, app_env=settings.app_env)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component factories
# ---------------------------------------------------------------------------


def _build_cache_backend(app_settings: Settings) -> ICacheProvider | None:
    """Pick the cache backend: Redis if configured, else memory, else none."""
    kind = app_settings.cache_backend_kind()
    if kind == "redis":
        return RedisCacheProvider.from_url(
            app_settings.redis_url,
            key_prefix=app_settings.redis_key_prefix,
            timeout=app_settings.redis_timeout,
        )
    if kind == "memory":
        return MemoryCacheProvider(max_size=app_settings.memory_cache_max_size)
    return None


def _build_registry(
    app_settings: Settings, config: dict[str, Any], http_client: httpx.AsyncClient
) -> ProviderRegistry:
    profiles = load_provider_profiles(config, app_settings.catalog_api_base_url)
    return ProviderRegistry(
        RegisteredProvider(profile=profile, adapter=RemoteCatalogProvider(profile, http_client))
        for profile in profiles
    )


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    config = load_config(app_settings.providers_config_path, settings=app_settings)

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=app_settings.http_timeout)

    # -- Cache --
    cache_backend = _build_cache_backend(app_settings)
    store = CacheAsideStore(coalesce_misses=app_settings.cache_coalesce_misses)

    # -- Images --
    fetcher = HttpxImageFetcher(http_client=http_client, timeout=app_settings.image_fetch_timeout)
    enricher = ImageEnricher(
        fetcher=fetcher,
        timeout=app_settings.image_fetch_timeout,
        max_concurrency=app_settings.image_fetch_max_concurrency,
    )

    # -- Providers --
    registry = _build_registry(app_settings, config, http_client)

    catalog_service = CatalogService(store=store, backend=cache_backend, enricher=enricher)

    return {
        "http_client": http_client,
        "cache_backend": cache_backend,
        "provider_registry": registry,
        "catalog_service": catalog_service,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    backend = components["cache_backend"]
    _logger.info(
        "app_startup",
        version=_VERSION,
        environment=settings.app_env,
        cache_backend=backend.get_provider_name() if backend is not None else "none",
        providers=components["provider_registry"].names(),
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    if isinstance(backend, RedisCacheProvider):
        await backend.close()
    _logger.info("app_shutdown", message="HTTP client and cache connections closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="cinegate API",
        version=_VERSION,
        description=(
            "Uniform gateway over movie and TV catalog providers with a shared "
            "read-through cache and inlined poster images."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- Routes --
    application.include_router(system_router)
    application.include_router(catalog_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
