"""Catalog provider backed by a remote JSON catalog API.

One instance per configured provider profile.  The adapter only speaks a
fixed JSON route scheme rooted at the profile's ``base_url``:

    GET {base}/{query}?page=N
    GET {base}/info?id=...
    GET {base}/watch?episodeId=...&mediaId=...&server=...
    GET {base}/servers?episodeId=...&mediaId=...
    GET {base}/recent-movies | /recent-shows
    GET {base}/trending?type=movie|tv
    GET {base}/country/{country}?page=N | /genre/{genre}?page=N

Whatever scraping happens behind that API is not our concern; the records
come back as opaque dicts.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from src.interfaces.movie_provider import IMovieProvider, Record
from src.models.catalog import Capability, ProviderProfile
from src.utils.errors import (
    MediaNotFoundError,
    ProviderUnavailableError,
    UnsupportedOperationError,
)
from src.utils.logging import get_logger

_USER_AGENT = "cinegate/0.1.0"


class RemoteCatalogProvider(IMovieProvider):
    """Provider adapter calling a JSON catalog API over the shared client.

    HTTP 404 maps to :class:`MediaNotFoundError`; any other non-2xx status,
    transport error or undecodable body maps to
    :class:`ProviderUnavailableError`.  Routes missing from the profile's
    capabilities raise :class:`UnsupportedOperationError` without a request.
    """

    def __init__(self, profile: ProviderProfile, http_client: httpx.AsyncClient) -> None:
        if not profile.base_url:
            raise ValueError(f"Provider profile {profile.name!r} has no base_url")
        self._profile = profile
        self._base = profile.base_url.rstrip("/")
        self._http = http_client
        self._logger = get_logger(__name__)

    @property
    def profile(self) -> ProviderProfile:
        return self._profile

    def get_provider_name(self) -> str:
        return self._profile.name

    def supports(self, capability: Capability) -> bool:
        return self._profile.supports(capability)

    def _require(self, capability: Capability) -> None:
        if not self.supports(capability):
            raise UnsupportedOperationError(
                f"{self._profile.label} does not support {capability.value}",
                provider_name=self._profile.name,
            )

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self._base}{path}"
        query = {k: v for k, v in (params or {}).items() if v is not None}
        headers = {"User-Agent": _USER_AGENT, "Accept": "application/json"}
        try:
            response = await self._http.get(url, params=query, headers=headers, follow_redirects=True)
        except httpx.HTTPError as exc:
            self._logger.warning(
                "catalog_request_failed", provider=self._profile.name, url=url, error=str(exc)
            )
            raise ProviderUnavailableError(
                f"Catalog request failed: {exc}", provider_name=self._profile.name
            ) from exc

        if response.status_code == 404:
            raise MediaNotFoundError(provider_name=self._profile.name)
        if response.is_error:
            self._logger.warning(
                "catalog_http_error",
                provider=self._profile.name,
                url=url,
                status=response.status_code,
            )
            raise ProviderUnavailableError(
                f"Catalog API returned {response.status_code}",
                provider_name=self._profile.name,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ProviderUnavailableError(
                "Catalog API returned invalid JSON", provider_name=self._profile.name
            ) from exc

    async def _get_list(self, path: str, params: dict[str, Any] | None = None) -> list[Record]:
        data = await self._get_json(path, params)
        # Some catalog routes wrap lists in a search-page object.
        if isinstance(data, dict) and isinstance(data.get("results"), list):
            return data["results"]
        if not isinstance(data, list):
            raise ProviderUnavailableError(
                f"Expected a list from {path}", provider_name=self._profile.name
            )
        return data

    async def _get_record(self, path: str, params: dict[str, Any] | None = None) -> Record:
        data = await self._get_json(path, params)
        if not isinstance(data, dict):
            raise ProviderUnavailableError(
                f"Expected an object from {path}", provider_name=self._profile.name
            )
        return data

    # -- IMovieProvider implementation ----------------------------------------

    async def search(self, query: str, page: int = 1) -> Record:
        self._require(Capability.SEARCH)
        result = await self._get_record(f"/{quote(query, safe='')}", {"page": page})
        result.setdefault("results", [])
        self._logger.info(
            "catalog_search_complete",
            provider=self._profile.name,
            query=query,
            page=page,
            results=len(result["results"]),
        )
        return result

    async def fetch_media_info(self, media_id: str) -> Record:
        self._require(Capability.INFO)
        return await self._get_record("/info", {"id": media_id})

    async def fetch_episode_sources(
        self, episode_id: str, media_id: str | None = None, server: str | None = None
    ) -> Record:
        self._require(Capability.WATCH)
        return await self._get_record(
            "/watch", {"episodeId": episode_id, "mediaId": media_id, "server": server}
        )

    async def fetch_episode_servers(
        self, episode_id: str, media_id: str | None = None
    ) -> list[Record]:
        self._require(Capability.SERVERS)
        return await self._get_list("/servers", {"episodeId": episode_id, "mediaId": media_id})

    async def fetch_recent_movies(self) -> list[Record]:
        self._require(Capability.RECENT_MOVIES)
        return await self._get_list("/recent-movies")

    async def fetch_recent_shows(self) -> list[Record]:
        self._require(Capability.RECENT_SHOWS)
        return await self._get_list("/recent-shows")

    async def fetch_trending_movies(self) -> list[Record]:
        self._require(Capability.TRENDING)
        return await self._get_list("/trending", {"type": "movie"})

    async def fetch_trending_shows(self) -> list[Record]:
        self._require(Capability.TRENDING)
        return await self._get_list("/trending", {"type": "tv"})

    async def fetch_by_country(self, country: str, page: int = 1) -> Record:
        self._require(Capability.COUNTRY)
        return await self._get_record(f"/country/{quote(country, safe='')}", {"page": page})

    async def fetch_by_genre(self, genre: str, page: int = 1) -> Record:
        self._require(Capability.GENRE)
        return await self._get_record(f"/genre/{quote(genre, safe='')}", {"page": page})
