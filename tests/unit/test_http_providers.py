"""Unit tests for the httpx-backed image fetcher and catalog provider.

Requests are answered by ``httpx.MockTransport`` so nothing leaves the
process.
"""

from __future__ import annotations

import httpx
import pytest

from src.models.catalog import Capability, ProviderProfile
from src.providers.image.httpx_image_fetcher import HttpxImageFetcher
from src.providers.movies.remote_catalog_provider import RemoteCatalogProvider
from src.utils.errors import (
    ImageFetchError,
    MediaNotFoundError,
    ProviderUnavailableError,
    UnsupportedOperationError,
)

_BASE = "http://catalog.test/movies/demo"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _profile(**updates) -> ProviderProfile:
    data = {
        "name": "demo",
        "base_url": _BASE,
        "capabilities": [c.value for c in Capability],
    }
    data.update(updates)
    return ProviderProfile.model_validate(data)


# ======================================================================
# HttpxImageFetcher
# ======================================================================


class TestHttpxImageFetcher:
    @pytest.mark.asyncio
    async def test_returns_body_bytes(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["accept"] == "image/*"
            return httpx.Response(200, content=b"\xff\xd8jpeg")

        async with _client(handler) as client:
            assert await HttpxImageFetcher(client).fetch("http://img.test/p.jpg") == b"\xff\xd8jpeg"

    @pytest.mark.asyncio
    async def test_follows_redirects(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old.jpg":
                return httpx.Response(302, headers={"location": "http://img.test/new.jpg"})
            return httpx.Response(200, content=b"new")

        async with _client(handler) as client:
            assert await HttpxImageFetcher(client).fetch("http://img.test/old.jpg") == b"new"

    @pytest.mark.asyncio
    async def test_non_success_status_raises(self) -> None:
        async with _client(lambda request: httpx.Response(403)) as client:
            with pytest.raises(ImageFetchError, match="403"):
                await HttpxImageFetcher(client).fetch("http://img.test/p.jpg")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(ImageFetchError):
                await HttpxImageFetcher(client).fetch("http://img.test/p.jpg")


# ======================================================================
# RemoteCatalogProvider
# ======================================================================


class TestRemoteCatalogProvider:
    def test_requires_base_url(self) -> None:
        with pytest.raises(ValueError):
            RemoteCatalogProvider(ProviderProfile(name="demo"), httpx.AsyncClient())

    @pytest.mark.asyncio
    async def test_search_builds_url_and_returns_page(self) -> None:
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json={"currentPage": 2, "results": [{"id": "m1"}]})

        async with _client(handler) as client:
            provider = RemoteCatalogProvider(_profile(), client)
            page = await provider.search("the batman", page=2)

        assert page["results"] == [{"id": "m1"}]
        assert str(seen[0]).startswith(f"{_BASE}/the%20batman?")
        assert seen[0].params["page"] == "2"

    @pytest.mark.asyncio
    async def test_search_defaults_missing_results(self) -> None:
        async with _client(lambda request: httpx.Response(200, json={"currentPage": 1})) as client:
            page = await RemoteCatalogProvider(_profile(), client).search("x")
        assert page["results"] == []

    @pytest.mark.asyncio
    async def test_watch_omits_absent_params(self) -> None:
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json={"sources": []})

        async with _client(handler) as client:
            await RemoteCatalogProvider(_profile(), client).fetch_episode_sources("e1")

        assert seen[0].path == "/movies/demo/watch"
        assert dict(seen[0].params) == {"episodeId": "e1"}

    @pytest.mark.asyncio
    async def test_trending_type_parameter(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.params["type"])
            return httpx.Response(200, json=[{"id": "t1"}])

        async with _client(handler) as client:
            provider = RemoteCatalogProvider(_profile(), client)
            await provider.fetch_trending_movies()
            await provider.fetch_trending_shows()

        assert seen == ["movie", "tv"]

    @pytest.mark.asyncio
    async def test_list_routes_unwrap_results(self) -> None:
        body = {"currentPage": 1, "results": [{"id": "r1"}]}
        async with _client(lambda request: httpx.Response(200, json=body)) as client:
            assert await RemoteCatalogProvider(_profile(), client).fetch_recent_movies() == [{"id": "r1"}]

    @pytest.mark.asyncio
    async def test_404_is_media_not_found(self) -> None:
        async with _client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(MediaNotFoundError):
                await RemoteCatalogProvider(_profile(), client).fetch_media_info("missing")

    @pytest.mark.asyncio
    async def test_5xx_is_provider_unavailable(self) -> None:
        async with _client(lambda request: httpx.Response(502)) as client:
            with pytest.raises(ProviderUnavailableError, match="502"):
                await RemoteCatalogProvider(_profile(), client).fetch_media_info("m1")

    @pytest.mark.asyncio
    async def test_invalid_json_is_provider_unavailable(self) -> None:
        async with _client(lambda request: httpx.Response(200, content=b"<html>")) as client:
            with pytest.raises(ProviderUnavailableError):
                await RemoteCatalogProvider(_profile(), client).fetch_media_info("m1")

    @pytest.mark.asyncio
    async def test_transport_error_is_provider_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        async with _client(handler) as client:
            with pytest.raises(ProviderUnavailableError):
                await RemoteCatalogProvider(_profile(), client).search("x")

    @pytest.mark.asyncio
    async def test_unsupported_route_makes_no_request(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=[])

        async with _client(handler) as client:
            provider = RemoteCatalogProvider(_profile(capabilities=["search", "info", "watch"]), client)
            assert provider.supports(Capability.TRENDING) is False
            with pytest.raises(UnsupportedOperationError):
                await provider.fetch_trending_movies()

        assert calls == []
