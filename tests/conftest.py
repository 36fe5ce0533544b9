"""Shared pytest fixtures and fakes for the cinegate test suite."""

from __future__ import annotations

import asyncio

import pytest

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.image_fetcher import IImageFetcher
from src.interfaces.movie_provider import IMovieProvider, Record
from src.models.catalog import Capability, ImageRewrite, ProviderProfile
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.services.cache_aside import CacheAsideStore
from src.services.catalog_service import CatalogService
from src.services.image_enricher import ImageEnricher
from src.services.provider_registry import ProviderRegistry, RegisteredProvider
from src.utils.errors import BackendError, ImageFetchError, UpstreamError

ALL_CAPABILITIES = frozenset(Capability)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingBackend(ICacheProvider):
    """Dict-backed backend that records calls and can be told to fail."""

    def __init__(self, fail_get: bool = False, fail_set: bool = False) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}
        self.get_calls: list[str] = []
        self.set_calls: list[tuple[str, int]] = []
        self.fail_get = fail_get
        self.fail_set = fail_set

    async def get(self, key: str) -> bytes | None:
        self.get_calls.append(key)
        if self.fail_get:
            raise BackendError("backend down")
        return self.data.get(key)

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        self.set_calls.append((key, ttl))
        if self.fail_set:
            raise BackendError("backend read-only")
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FakeImageFetcher(IImageFetcher):
    """Serves canned bytes per URL; anything else fails.

    ``delays`` maps URL → seconds to sleep before answering, used to make
    completion order differ from input order.
    """

    def __init__(
        self,
        images: dict[str, bytes] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.images = images or {}
        self.delays = delays or {}
        self.calls: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        if url not in self.images:
            raise ImageFetchError(f"no image at {url}")
        return self.images[url]


class FakeMovieProvider(IMovieProvider):
    """In-memory catalog provider with per-method call counters."""

    def __init__(
        self,
        name: str = "demo",
        capabilities: frozenset[Capability] = ALL_CAPABILITIES,
        fail_with: UpstreamError | None = None,
    ) -> None:
        self.name = name
        self.capabilities = capabilities
        self.fail_with = fail_with
        self.calls: dict[str, int] = {}
        self.search_results: list[Record] = [
            {"id": f"movie/{i}", "title": f"Title {i}", "image": f"http://img/250x400/{i}.jpg"}
            for i in range(12)
        ]
        self.trending_movies: list[Record] = [
            {"id": f"tm{i}", "title": f"Movie {i}", "image": f"http://img/tm{i}.jpg"} for i in range(9)
        ]
        self.trending_shows: list[Record] = [
            {"id": f"ts{i}", "title": f"Show {i}", "image": f"http://img/ts{i}.jpg"} for i in range(9)
        ]

    def _hit(self, method: str) -> None:
        self.calls[method] = self.calls.get(method, 0) + 1
        if self.fail_with is not None:
            raise self.fail_with

    def get_provider_name(self) -> str:
        return self.name

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    async def search(self, query: str, page: int = 1) -> Record:
        self._hit("search")
        return {
            "currentPage": page,
            "hasNextPage": True,
            "totalPages": 3,
            "results": [dict(r) for r in self.search_results],
        }

    async def fetch_media_info(self, media_id: str) -> Record:
        self._hit("info")
        return {
            "id": media_id,
            "title": "Batman",
            "image": "http://img/250x400/poster.jpg",
            "cover": "http://img/cover.jpg",
            "episodes": [{"id": "ep1", "title": "Movie"}],
        }

    async def fetch_episode_sources(
        self, episode_id: str, media_id: str | None = None, server: str | None = None
    ) -> Record:
        self._hit("watch")
        return {"sources": [{"url": f"http://stream/{episode_id}.m3u8", "isM3U8": True}], "server": server}

    async def fetch_episode_servers(self, episode_id: str, media_id: str | None = None) -> list[Record]:
        self._hit("servers")
        return [{"name": "upcloud", "url": f"http://srv/{episode_id}"}]

    async def fetch_recent_movies(self) -> list[Record]:
        self._hit("recent-movies")
        return [{"id": "r1", "title": "Recent", "image": "http://img/r1.jpg"}]

    async def fetch_recent_shows(self) -> list[Record]:
        self._hit("recent-shows")
        return [{"id": "s1", "title": "Show", "image": "http://img/s1.jpg"}, {"id": "s2", "title": "No poster"}]

    async def fetch_trending_movies(self) -> list[Record]:
        self._hit("trending-movies")
        return [dict(r) for r in self.trending_movies]

    async def fetch_trending_shows(self) -> list[Record]:
        self._hit("trending-shows")
        return [dict(r) for r in self.trending_shows]

    async def fetch_by_country(self, country: str, page: int = 1) -> Record:
        self._hit("country")
        return {"currentPage": page, "results": [{"id": "c1", "country": country}]}

    async def fetch_by_genre(self, genre: str, page: int = 1) -> Record:
        self._hit("genre")
        return {"currentPage": page, "results": [{"id": "g1", "genre": genre}]}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_backend(clock: FakeClock) -> MemoryCacheProvider:
    return MemoryCacheProvider(max_size=128, timer=clock)


@pytest.fixture
def store() -> CacheAsideStore:
    return CacheAsideStore()


@pytest.fixture
def image_fetcher() -> FakeImageFetcher:
    images = {f"http://img/1000x1600/{i}.jpg": f"poster-{i}".encode() for i in range(12)}
    images.update({f"http://img/tm{i}.jpg": b"tm" for i in range(9)})
    images.update({f"http://img/ts{i}.jpg": b"ts" for i in range(9)})
    images.update(
        {
            "http://img/1000x1600/poster.jpg": b"poster",
            "http://img/cover.jpg": b"cover",
            "http://img/r1.jpg": b"r1",
            "http://img/s1.jpg": b"s1",
        }
    )
    return FakeImageFetcher(images)


@pytest.fixture
def enricher(image_fetcher: FakeImageFetcher) -> ImageEnricher:
    return ImageEnricher(image_fetcher, timeout=1.0)


@pytest.fixture
def demo_profile() -> ProviderProfile:
    return ProviderProfile(
        name="demo",
        display_name="Demo",
        website="https://demo.example/",
        documentation="https://docs.example/#tag/demo",
        base_url="http://catalog.test/movies/demo",
        capabilities=ALL_CAPABILITIES,
        image_rewrite=ImageRewrite(find="250x400", replace="1000x1600"),
        search_result_limit=10,
        trending_limit=7,
    )


@pytest.fixture
def fake_provider() -> FakeMovieProvider:
    return FakeMovieProvider()


@pytest.fixture
def demo_entry(demo_profile: ProviderProfile, fake_provider: FakeMovieProvider) -> RegisteredProvider:
    return RegisteredProvider(profile=demo_profile, adapter=fake_provider)


@pytest.fixture
def registry(demo_entry: RegisteredProvider) -> ProviderRegistry:
    return ProviderRegistry([demo_entry])


@pytest.fixture
def catalog_service(
    store: CacheAsideStore, memory_backend: MemoryCacheProvider, enricher: ImageEnricher
) -> CatalogService:
    return CatalogService(store=store, backend=memory_backend, enricher=enricher)


@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def make_backend():
    """Factory for backends that fail on read and/or write."""

    def _make(fail_get: bool = False, fail_set: bool = False) -> RecordingBackend:
        return RecordingBackend(fail_get=fail_get, fail_set=fail_set)

    return _make


@pytest.fixture
def make_fetcher():
    """Factory for image fetchers with canned bytes and per-URL delays."""

    def _make(
        images: dict[str, bytes] | None = None, delays: dict[str, float] | None = None
    ) -> FakeImageFetcher:
        return FakeImageFetcher(images, delays)

    return _make


@pytest.fixture
def make_entry(demo_profile: ProviderProfile):
    """Factory pairing a fake provider with a (possibly tweaked) demo profile."""

    def _make(fail_with: UpstreamError | None = None, **profile_updates) -> RegisteredProvider:
        profile = demo_profile.model_copy(update=profile_updates)
        adapter = FakeMovieProvider(
            name=profile.name, capabilities=profile.capabilities, fail_with=fail_with
        )
        return RegisteredProvider(profile=profile, adapter=adapter)

    return _make
