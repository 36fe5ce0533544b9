"""FastAPI routes for the cinegate catalog gateway.

Every catalog route resolves the provider from the registry, hands the
request to :class:`~src.services.catalog_service.CatalogService`, and maps
the returned outcome to an HTTP status.  Services and the registry are read
from ``app.state`` (populated at startup in ``main.py``) through ``Depends``.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                                   Method  Cache TTL  Images
# ─────────────────────────────────────────────────────────────────────
# /movies/{provider}/                        GET     -          -
# /movies/{provider}/recent-shows            GET     3 h        yes
# /movies/{provider}/recent-movies           GET     3 h        yes
# /movies/{provider}/trending?type=          GET     3 h        yes
# /movies/{provider}/info?id=                GET     3 h        image+cover
# /movies/{provider}/watch?episodeId=...     GET     30 min     -
# /movies/{provider}/servers?episodeId=...   GET     30 min     -
# /movies/{provider}/country/{country}       GET     3 h        -
# /movies/{provider}/genre/{genre}           GET     3 h        -
# /movies/{provider}/{query}?page=           GET     6 h        yes
# /health                                    GET
# /providers                                 GET
#
# The catch-all search route is declared last so fixed paths win.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.api.schemas import HealthResponse, ProviderInfo, ProviderIntroResponse, ProvidersResponse
from src.models.catalog import StreamingServer
from src.models.outcome import Outcome, Success
from src.services.catalog_service import CatalogService
from src.services.provider_registry import ProviderRegistry, RegisteredProvider
from src.utils.errors import MediaNotFoundError, UnsupportedOperationError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_VERSION = "0.1.0"
_GENERIC_ERROR = "Something went wrong. Please try again later. or contact the developers."
# Watch failures carry the short form.
_WATCH_ERROR = "Something went wrong. Please try again later."
_NOT_FOUND = "Media Not found."
_STREAMING_SERVERS = frozenset(s.value for s in StreamingServer)

router = APIRouter(prefix="/movies")
system_router = APIRouter()


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _get_registry(request: Request) -> ProviderRegistry:
    return request.app.state.provider_registry


def _get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog_service


RegistryDep = Annotated[ProviderRegistry, Depends(_get_registry)]
CatalogDep = Annotated[CatalogService, Depends(_get_catalog)]


def _get_provider(provider: str, registry: RegistryDep) -> RegisteredProvider:
    entry = registry.get(provider)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Provider not found: {provider}")
    return entry


ProviderDep = Annotated[RegisteredProvider, Depends(_get_provider)]


# ---------------------------------------------------------------------------
# Outcome mapping
# ---------------------------------------------------------------------------


def _respond(
    outcome: Outcome[Any],
    provider: RegisteredProvider,
    *,
    route: str,
    not_found_on_failure: bool = False,
    generic_error: str = _GENERIC_ERROR,
) -> Any:
    """Return the value of a successful outcome or raise the matching HTTP error."""
    if isinstance(outcome, Success):
        return outcome.value

    error = outcome.error
    _logger.warning(
        "catalog_route_failed",
        provider=provider.name,
        route=route,
        error_type=type(error).__name__,
        error=str(error),
    )
    if isinstance(error, UnsupportedOperationError):
        raise HTTPException(status_code=404, detail=error.message)
    if isinstance(error, MediaNotFoundError) or not_found_on_failure:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    raise HTTPException(status_code=500, detail=generic_error)


# ---------------------------------------------------------------------------
# System routes
# ---------------------------------------------------------------------------


@system_router.get("/health", response_model=HealthResponse)
async def health(request: Request, registry: RegistryDep) -> HealthResponse:
    """Report the cache backend in use and whether it answers."""
    backend = getattr(request.app.state, "cache_backend", None)
    reachable = True
    if backend is not None and hasattr(backend, "ping"):
        reachable = await backend.ping()
    return HealthResponse(
        status="healthy" if reachable else "degraded",
        version=_VERSION,
        cache_backend=backend.get_provider_name() if backend is not None else "none",
        cache_reachable=reachable,
        providers=len(registry),
    )


@system_router.get("/providers", response_model=ProvidersResponse)
async def list_providers(registry: RegistryDep) -> ProvidersResponse:
    return ProvidersResponse(
        providers=[
            ProviderInfo(
                name=entry.name,
                display_name=entry.profile.label,
                website=entry.profile.website,
                capabilities=sorted(c.value for c in entry.profile.capabilities),
                cache_enabled=entry.profile.cache_enabled,
            )
            for entry in registry
        ]
    )


# ---------------------------------------------------------------------------
# Catalog routes
# ---------------------------------------------------------------------------


@router.get("/{provider}/", response_model=ProviderIntroResponse)
@router.get("/{provider}", response_model=ProviderIntroResponse, include_in_schema=False)
async def provider_intro(entry: ProviderDep) -> ProviderIntroResponse:
    profile = entry.profile
    intro = f"Welcome to the {profile.name} provider"
    if profile.website:
        intro += f": check out the provider's website @ {profile.website}"
    return ProviderIntroResponse(
        intro=intro,
        routes=profile.route_paths(),
        documentation=profile.documentation,
    )


@router.get("/{provider}/recent-shows")
async def recent_shows(entry: ProviderDep, catalog: CatalogDep) -> Any:
    outcome = await catalog.recent_shows(entry)
    return _respond(outcome, entry, route="recent-shows")


@router.get("/{provider}/recent-movies")
async def recent_movies(entry: ProviderDep, catalog: CatalogDep) -> Any:
    outcome = await catalog.recent_movies(entry)
    return _respond(outcome, entry, route="recent-movies")


@router.get("/{provider}/trending")
async def trending(
    entry: ProviderDep,
    catalog: CatalogDep,
    kind: Annotated[str | None, Query(alias="type")] = None,
) -> Any:
    outcome = await catalog.trending(entry, kind or None)
    return _respond(outcome, entry, route="trending")


@router.get("/{provider}/info")
async def media_info(
    entry: ProviderDep,
    catalog: CatalogDep,
    media_id: Annotated[str | None, Query(alias="id")] = None,
) -> Any:
    if not media_id:
        raise HTTPException(status_code=400, detail="id is required")
    outcome = await catalog.media_info(entry, media_id)
    return _respond(
        outcome, entry, route="info", not_found_on_failure=entry.profile.report_not_found
    )


@router.get("/{provider}/watch")
async def watch(
    entry: ProviderDep,
    catalog: CatalogDep,
    episode_id: Annotated[str | None, Query(alias="episodeId")] = None,
    media_id: Annotated[str | None, Query(alias="mediaId")] = None,
    server: Annotated[str | None, Query()] = None,
) -> Any:
    if not episode_id:
        raise HTTPException(status_code=400, detail="episodeId is required")
    if entry.profile.watch_requires_media_id and not media_id:
        raise HTTPException(status_code=400, detail="mediaId is required")
    if server and server not in _STREAMING_SERVERS:
        raise HTTPException(status_code=400, detail="Invalid server query")

    outcome = await catalog.episode_sources(entry, episode_id, media_id, server or None)
    return _respond(
        outcome,
        entry,
        route="watch",
        not_found_on_failure=entry.profile.report_not_found,
        generic_error=_WATCH_ERROR,
    )


@router.get("/{provider}/servers")
async def servers(
    entry: ProviderDep,
    catalog: CatalogDep,
    episode_id: Annotated[str | None, Query(alias="episodeId")] = None,
    media_id: Annotated[str | None, Query(alias="mediaId")] = None,
) -> Any:
    if not episode_id:
        raise HTTPException(status_code=400, detail="episodeId is required")
    outcome = await catalog.episode_servers(entry, episode_id, media_id)
    return _respond(outcome, entry, route="servers")


@router.get("/{provider}/country/{country}")
async def by_country(
    entry: ProviderDep,
    catalog: CatalogDep,
    country: str,
    page: Annotated[int, Query(ge=1)] = 1,
) -> Any:
    outcome = await catalog.by_country(entry, country, page)
    return _respond(outcome, entry, route="country")


@router.get("/{provider}/genre/{genre}")
async def by_genre(
    entry: ProviderDep,
    catalog: CatalogDep,
    genre: str,
    page: Annotated[int, Query(ge=1)] = 1,
) -> Any:
    outcome = await catalog.by_genre(entry, genre, page)
    return _respond(outcome, entry, route="genre")


@router.get("/{provider}/{query}")
async def search(
    entry: ProviderDep,
    catalog: CatalogDep,
    query: str,
    page: Annotated[int, Query(ge=1)] = 1,
) -> Any:
    outcome = await catalog.search(entry, query, page)
    return _respond(outcome, entry, route="search")
