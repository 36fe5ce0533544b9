"""Catalog provider models.

Defines the provider capability and streaming-server enums plus the
:class:`ProviderProfile` model loaded from ``config/config.yaml``.  Domain
records returned by providers (movies, shows, episode sources) are kept as
plain dicts and are not modelled here; only the per-provider behaviour
switches are.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Capability(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Routes a catalog provider may offer."""

    SEARCH = "search"
    INFO = "info"
    WATCH = "watch"
    SERVERS = "servers"
    RECENT_MOVIES = "recent-movies"
    RECENT_SHOWS = "recent-shows"
    TRENDING = "trending"
    COUNTRY = "country"
    GENRE = "genre"


class StreamingServer(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Streaming servers accepted by the ``server`` query parameter."""

    ASIANLOAD = "asianload"
    GOGOCDN = "gogocdn"
    STREAMSB = "streamsb"
    MIXDROP = "mixdrop"
    MP4UPLOAD = "mp4upload"
    UPCLOUD = "upcloud"
    VIDCLOUD = "vidcloud"
    STREAMTAPE = "streamtape"
    VIZCLOUD = "vizcloud"
    MYCLOUD = "mycloud"
    FILEMOON = "filemoon"
    VIDSTREAMING = "vidstreaming"
    STREAMWISH = "streamwish"
    VOE = "voe"


class ImageRewrite(BaseModel):
    """Substring replacement applied to image URLs before fetching.

    Used to swap a thumbnail size segment for a larger one, e.g.
    ``250x400`` -> ``1000x1600``.
    """

    model_config = ConfigDict(frozen=True)

    find: str
    replace: str

    def apply(self, url: str) -> str:
        return url.replace(self.find, self.replace, 1)


class ProviderProfile(BaseModel):
    """Per-provider behaviour loaded from configuration.

    ``base_url`` is optional; when empty the loader derives it from the
    shared catalog API base URL and the provider name.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    display_name: str = ""
    website: str = ""
    documentation: str = ""
    base_url: str = ""
    capabilities: frozenset[Capability] = frozenset(
        {Capability.SEARCH, Capability.INFO, Capability.WATCH}
    )
    # False = never touch the cache backend for this provider.
    cache_enabled: bool = True
    image_rewrite: ImageRewrite | None = None
    search_result_limit: int | None = Field(default=None, ge=1)
    trending_limit: int = Field(default=7, ge=1)
    watch_requires_media_id: bool = True
    # Map every info/watch failure to 404 "Media Not found." instead of 500.
    report_not_found: bool = False

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def route_paths(self) -> list[str]:
        """Public route list shown on the provider intro page."""
        paths = ["/:query"] if self.supports(Capability.SEARCH) else []
        ordered = [
            (Capability.INFO, "/info"),
            (Capability.WATCH, "/watch"),
            (Capability.RECENT_SHOWS, "/recent-shows"),
            (Capability.RECENT_MOVIES, "/recent-movies"),
            (Capability.TRENDING, "/trending"),
            (Capability.SERVERS, "/servers"),
            (Capability.COUNTRY, "/country/:country"),
            (Capability.GENRE, "/genre/:genre"),
        ]
        paths.extend(path for cap, path in ordered if self.supports(cap))
        return paths

    def rewrite_image_url(self, url: str) -> str:
        if self.image_rewrite is None:
            return url
        return self.image_rewrite.apply(url)
