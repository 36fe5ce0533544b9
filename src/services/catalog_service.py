"""Catalog service: route-level orchestration of cache, provider and images.

Every public method follows the same sequence:

    build cache key  ->  CacheAsideStore.fetch(backend, key, provider call, TTL)
                     ->  (optional) ImageEnricher
                     ->  Success(value) | Failure(error)

The service chooses the TTL class per operation and bypasses the cache for
providers whose profile disables it.  It never raises for upstream
failures; routes branch on the returned outcome.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import structlog

from src.interfaces.cache_provider import ICacheProvider
from src.models.catalog import Capability, ProviderProfile
from src.models.outcome import Failure, Outcome, Success
from src.services.cache_aside import CacheAsideStore
from src.services.image_enricher import ImageEnricher, UrlRewrite
from src.services.provider_registry import RegisteredProvider
from src.utils.cache_keys import build_cache_key
from src.utils.errors import UnsupportedOperationError
from src.utils.logging import get_logger

# TTL classes (seconds)
SEARCH_TTL = 60 * 60 * 6
LISTING_TTL = 60 * 60 * 3
INFO_TTL = 60 * 60 * 3
EPISODE_TTL = 60 * 30

_logger: structlog.BoundLogger = get_logger(__name__)


class CatalogService:
    """Serve catalog routes through the cache-aside store and image enricher.

    Parameters
    ----------
    store:
        Cache-aside store wrapping every provider call.
    backend:
        Shared cache backend, or ``None`` to run without a cache.
    enricher:
        Inlines poster and cover images.
    """

    def __init__(
        self,
        store: CacheAsideStore,
        backend: ICacheProvider | None,
        enricher: ImageEnricher,
    ) -> None:
        self._store = store
        self._backend = backend
        self._enricher = enricher

    def _backend_for(self, profile: ProviderProfile) -> ICacheProvider | None:
        return self._backend if profile.cache_enabled else None

    @staticmethod
    def _rewrite_for(profile: ProviderProfile) -> UrlRewrite | None:
        return profile.rewrite_image_url if profile.image_rewrite is not None else None

    @staticmethod
    def _unsupported(provider: RegisteredProvider, capability: Capability) -> Failure | None:
        if provider.adapter.supports(capability):
            return None
        return Failure(
            UnsupportedOperationError(
                f"{provider.profile.label} does not support {capability.value}",
                provider_name=provider.name,
            )
        )

    async def _cached(
        self,
        provider: RegisteredProvider,
        operation: str,
        params: tuple[Any, ...],
        producer: Callable[[], Awaitable[Any]],
        ttl: int,
    ) -> Outcome[Any]:
        key = build_cache_key(provider.name, operation, *params)
        return await self._store.fetch(self._backend_for(provider.profile), key, producer, ttl)

    # ------------------------------------------------------------------
    # Routes with image enrichment
    # ------------------------------------------------------------------

    async def search(self, provider: RegisteredProvider, query: str, page: int = 1) -> Outcome[Any]:
        unsupported = self._unsupported(provider, Capability.SEARCH)
        if unsupported is not None:
            return unsupported

        outcome = await self._cached(
            provider, "search", (query, page), lambda: provider.adapter.search(query, page), SEARCH_TTL
        )
        if not isinstance(outcome, Success):
            return outcome

        page_data = outcome.value
        limit = provider.profile.search_result_limit
        if limit is not None:
            page_data = {**page_data, "results": (page_data.get("results") or [])[:limit]}

        enriched = await self._enricher.enrich_search_page(
            page_data, rewrite=self._rewrite_for(provider.profile)
        )
        return Success(enriched)

    async def recent_movies(self, provider: RegisteredProvider) -> Outcome[Any]:
        return await self._enriched_listing(
            provider, Capability.RECENT_MOVIES, "recent-movies", provider.adapter.fetch_recent_movies
        )

    async def recent_shows(self, provider: RegisteredProvider) -> Outcome[Any]:
        return await self._enriched_listing(
            provider, Capability.RECENT_SHOWS, "recent-shows", provider.adapter.fetch_recent_shows
        )

    async def trending(self, provider: RegisteredProvider, kind: str | None = None) -> Outcome[Any]:
        """Trending titles.

        ``kind="tv"`` returns shows, any other value returns movies, and no
        kind returns the first ``trending_limit`` movies followed by the
        first ``trending_limit`` shows.
        """
        unsupported = self._unsupported(provider, Capability.TRENDING)
        if unsupported is not None:
            return unsupported

        if kind is not None:
            outcome = await self._trending_half(provider, shows=(kind == "tv"))
            if not isinstance(outcome, Success):
                return outcome
            return Success(await self._enrich_list(provider, outcome.value))

        movies, shows = await asyncio.gather(
            self._trending_half(provider, shows=False),
            self._trending_half(provider, shows=True),
        )
        for outcome in (movies, shows):
            if not isinstance(outcome, Success):
                return outcome

        limit = provider.profile.trending_limit
        combined = list(movies.value)[:limit] + list(shows.value)[:limit]
        return Success(await self._enrich_list(provider, combined))

    async def media_info(self, provider: RegisteredProvider, media_id: str) -> Outcome[Any]:
        unsupported = self._unsupported(provider, Capability.INFO)
        if unsupported is not None:
            return unsupported

        outcome = await self._cached(
            provider,
            "info",
            (media_id,),
            lambda: provider.adapter.fetch_media_info(media_id),
            INFO_TTL,
        )
        if not isinstance(outcome, Success):
            return outcome
        enriched = await self._enricher.enrich_media_info(
            outcome.value, rewrite=self._rewrite_for(provider.profile)
        )
        return Success(enriched)

    # ------------------------------------------------------------------
    # Routes returned as-is
    # ------------------------------------------------------------------

    async def episode_sources(
        self,
        provider: RegisteredProvider,
        episode_id: str,
        media_id: str | None = None,
        server: str | None = None,
    ) -> Outcome[Any]:
        unsupported = self._unsupported(provider, Capability.WATCH)
        if unsupported is not None:
            return unsupported
        return await self._cached(
            provider,
            "watch",
            (episode_id, media_id, server),
            lambda: provider.adapter.fetch_episode_sources(episode_id, media_id, server),
            EPISODE_TTL,
        )

    async def episode_servers(
        self, provider: RegisteredProvider, episode_id: str, media_id: str | None = None
    ) -> Outcome[Any]:
        unsupported = self._unsupported(provider, Capability.SERVERS)
        if unsupported is not None:
            return unsupported
        return await self._cached(
            provider,
            "servers",
            (episode_id, media_id),
            lambda: provider.adapter.fetch_episode_servers(episode_id, media_id),
            EPISODE_TTL,
        )

    async def by_country(self, provider: RegisteredProvider, country: str, page: int = 1) -> Outcome[Any]:
        unsupported = self._unsupported(provider, Capability.COUNTRY)
        if unsupported is not None:
            return unsupported
        return await self._cached(
            provider,
            "country",
            (country, page),
            lambda: provider.adapter.fetch_by_country(country, page),
            LISTING_TTL,
        )

    async def by_genre(self, provider: RegisteredProvider, genre: str, page: int = 1) -> Outcome[Any]:
        unsupported = self._unsupported(provider, Capability.GENRE)
        if unsupported is not None:
            return unsupported
        return await self._cached(
            provider,
            "genre",
            (genre, page),
            lambda: provider.adapter.fetch_by_genre(genre, page),
            LISTING_TTL,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _enriched_listing(
        self,
        provider: RegisteredProvider,
        capability: Capability,
        operation: str,
        producer: Callable[[], Awaitable[Any]],
    ) -> Outcome[Any]:
        unsupported = self._unsupported(provider, capability)
        if unsupported is not None:
            return unsupported
        outcome = await self._cached(provider, operation, (), producer, LISTING_TTL)
        if not isinstance(outcome, Success):
            return outcome
        return Success(await self._enrich_list(provider, outcome.value))

    async def _trending_half(self, provider: RegisteredProvider, shows: bool) -> Outcome[Any]:
        if shows:
            return await self._cached(
                provider, "trending", ("tv",), provider.adapter.fetch_trending_shows, LISTING_TTL
            )
        return await self._cached(
            provider, "trending", ("movie",), provider.adapter.fetch_trending_movies, LISTING_TTL
        )

    async def _enrich_list(self, provider: RegisteredProvider, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        enriched = await self._enricher.enrich(records, rewrite=self._rewrite_for(provider.profile))
        _logger.debug("listing_enriched", provider=provider.name, count=len(enriched))
        return enriched
