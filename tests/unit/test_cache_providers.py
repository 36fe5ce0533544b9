"""Unit tests for the memory and Redis cache backends."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.redis_cache import RedisCacheProvider
from src.utils.errors import BackendError


# ======================================================================
# MemoryCacheProvider
# ======================================================================


class TestMemoryCacheProvider:
    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, memory_backend: MemoryCacheProvider) -> None:
        assert await memory_backend.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, memory_backend: MemoryCacheProvider) -> None:
        await memory_backend.set("key1", b"value1", 60)
        assert await memory_backend.get("key1") == b"value1"

    @pytest.mark.asyncio
    async def test_set_overwrites_existing(self, memory_backend: MemoryCacheProvider) -> None:
        await memory_backend.set("key1", b"old", 60)
        await memory_backend.set("key1", b"new", 60)
        assert await memory_backend.get("key1") == b"new"

    @pytest.mark.asyncio
    async def test_delete_removes_key(self, memory_backend: MemoryCacheProvider) -> None:
        await memory_backend.set("key1", b"value1", 60)
        await memory_backend.delete("key1")
        assert await memory_backend.get("key1") is None

    @pytest.mark.asyncio
    async def test_delete_nonexistent_is_noop(self, memory_backend: MemoryCacheProvider) -> None:
        await memory_backend.delete("nonexistent")

    @pytest.mark.asyncio
    async def test_each_entry_expires_on_its_own_ttl(self, memory_backend: MemoryCacheProvider, clock) -> None:
        await memory_backend.set("short", b"s", 1800)
        await memory_backend.set("long", b"l", 21600)

        clock.advance(1801)

        assert await memory_backend.get("short") is None
        assert await memory_backend.get("long") == b"l"

        clock.advance(21600)
        assert await memory_backend.get("long") is None

    @pytest.mark.asyncio
    async def test_len_ignores_expired_entries(self, memory_backend: MemoryCacheProvider, clock) -> None:
        await memory_backend.set("a", b"1", 10)
        await memory_backend.set("b", b"2", 100)
        clock.advance(11)
        assert len(memory_backend) == 1

    @pytest.mark.asyncio
    async def test_max_size_evicts(self, clock) -> None:
        cache = MemoryCacheProvider(max_size=2, timer=clock)
        for key in ("a", "b", "c"):
            await cache.set(key, b"x", 60)
        assert len(cache) == 2

    def test_provider_name(self, memory_backend: MemoryCacheProvider) -> None:
        assert memory_backend.get_provider_name() == "memory"


# ======================================================================
# RedisCacheProvider
# ======================================================================


def _redis_client() -> MagicMock:
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    return client


class TestRedisCacheProvider:
    @pytest.mark.asyncio
    async def test_get_returns_bytes(self) -> None:
        client = _redis_client()
        client.get.return_value = b'{"a":1}'
        provider = RedisCacheProvider(client, key_prefix="cg:")

        assert await provider.get("flixhq:info:m1") == b'{"a":1}'
        client.get.assert_awaited_once_with("cg:flixhq:info:m1")

    @pytest.mark.asyncio
    async def test_get_miss_returns_none(self) -> None:
        provider = RedisCacheProvider(_redis_client())
        assert await provider.get("missing") is None

    @pytest.mark.asyncio
    async def test_get_str_payload_is_encoded(self) -> None:
        client = _redis_client()
        client.get.return_value = "[1,2]"
        assert await RedisCacheProvider(client).get("k") == b"[1,2]"

    @pytest.mark.asyncio
    async def test_set_uses_expiry(self) -> None:
        client = _redis_client()
        provider = RedisCacheProvider(client, key_prefix="cg:")

        await provider.set("k", b"v", 21600)

        client.set.assert_awaited_once_with("cg:k", b"v", ex=21600)

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        client = _redis_client()
        await RedisCacheProvider(client).delete("k")
        client.delete.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_redis_errors_become_backend_errors(self) -> None:
        client = _redis_client()
        client.get.side_effect = RedisConnectionError("refused")
        client.set.side_effect = RedisConnectionError("refused")
        client.delete.side_effect = RedisConnectionError("refused")
        provider = RedisCacheProvider(client)

        with pytest.raises(BackendError):
            await provider.get("k")
        with pytest.raises(BackendError):
            await provider.set("k", b"v", 60)
        with pytest.raises(BackendError):
            await provider.delete("k")

    @pytest.mark.asyncio
    async def test_ping(self) -> None:
        client = _redis_client()
        provider = RedisCacheProvider(client)
        assert await provider.ping() is True

        client.ping.side_effect = RedisConnectionError("refused")
        assert await provider.ping() is False

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        client = _redis_client()
        await RedisCacheProvider(client).close()
        client.aclose.assert_awaited_once()

    def test_from_url_builds_client_without_connecting(self) -> None:
        provider = RedisCacheProvider.from_url("redis://localhost:6379/0", key_prefix="cg:")
        assert provider.get_provider_name() == "redis"
