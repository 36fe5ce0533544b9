"""Abstract base class for movie catalog providers.

A provider adapter turns structured input (a query, a media id, an episode
id) into structured domain records: plain JSON-compatible dicts whose shape
belongs to the provider.  The only field the rest of the system looks at is
the optional ``image`` (and ``cover`` for media info) URL.

Every method raises an :class:`~src.utils.errors.UpstreamError` subclass on
failure; :class:`~src.utils.errors.UnsupportedOperationError` when the
provider does not offer the route at all.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from src.models.catalog import Capability

Record = dict[str, Any]


class IMovieProvider(ABC):
    """Contract for movie / TV catalog providers."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the provider's namespace, e.g. ``"flixhq"``."""

    @abstractmethod
    def supports(self, capability: Capability) -> bool:
        """Return ``True`` if the provider offers *capability*."""

    @abstractmethod
    async def search(self, query: str, page: int = 1) -> Record:
        """Search the catalog.

        Returns
        -------
        dict
            A search page: ``results`` (list of records) plus pagination
            metadata such as ``currentPage`` and ``hasNextPage``.
        """

    @abstractmethod
    async def fetch_media_info(self, media_id: str) -> Record:
        """Return the full record (episodes, cover, description) for a title."""

    @abstractmethod
    async def fetch_episode_sources(
        self, episode_id: str, media_id: str | None = None, server: str | None = None
    ) -> Record:
        """Return streaming sources and subtitles for one episode."""

    @abstractmethod
    async def fetch_episode_servers(
        self, episode_id: str, media_id: str | None = None
    ) -> list[Record]:
        """Return the streaming servers available for one episode."""

    @abstractmethod
    async def fetch_recent_movies(self) -> list[Record]:
        """Return recently added movies."""

    @abstractmethod
    async def fetch_recent_shows(self) -> list[Record]:
        """Return recently added TV shows."""

    @abstractmethod
    async def fetch_trending_movies(self) -> list[Record]:
        """Return trending movies."""

    @abstractmethod
    async def fetch_trending_shows(self) -> list[Record]:
        """Return trending TV shows."""

    @abstractmethod
    async def fetch_by_country(self, country: str, page: int = 1) -> Record:
        """Return a page of titles from *country*."""

    @abstractmethod
    async def fetch_by_genre(self, genre: str, page: int = 1) -> Record:
        """Return a page of titles in *genre*."""
