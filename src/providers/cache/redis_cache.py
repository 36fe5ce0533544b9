"""Redis cache backend using ``redis.asyncio``.

Shared across workers and processes.  Entries are written with ``SET ... EX``
so Redis expires them itself; nothing here tracks TTLs.  Every
``RedisError`` (connection refused, timeout, auth) is re-raised as
:class:`~src.utils.errors.BackendError`, which the cache-aside store treats
as a miss or a skipped write.
"""

from __future__ import annotations

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.interfaces.cache_provider import ICacheProvider
from src.utils.errors import BackendError
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)


class RedisCacheProvider(ICacheProvider):
    """Cache backend talking to a Redis server.

    The client is created by the caller (normally once, at startup) and
    must be constructed with ``decode_responses=False`` so payloads come
    back as bytes.  ``key_prefix`` namespaces every key, letting several
    deployments share one Redis database.
    """

    def __init__(self, client: Redis, key_prefix: str = "") -> None:
        self._client = client
        self._prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "", timeout: float = 2.0) -> RedisCacheProvider:
        """Build a provider with its own connection pool for *url*."""
        client = Redis.from_url(
            url,
            decode_responses=False,
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
        )
        return cls(client, key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> bytes | None:
        try:
            payload = await self._client.get(self._key(key))
        except RedisError as exc:
            raise BackendError(f"Redis GET failed: {exc}", provider_name="redis") from exc
        if payload is None:
            logger.debug("cache_miss", key=key, backend="redis")
            return None
        logger.debug("cache_hit", key=key, backend="redis")
        if isinstance(payload, str):
            return payload.encode("utf-8")
        return payload

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        try:
            await self._client.set(self._key(key), value, ex=ttl)
        except RedisError as exc:
            raise BackendError(f"Redis SET failed: {exc}", provider_name="redis") from exc
        logger.debug("cache_set", key=key, ttl=ttl, backend="redis")

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except RedisError as exc:
            raise BackendError(f"Redis DEL failed: {exc}", provider_name="redis") from exc

    async def ping(self) -> bool:
        """Return ``True`` when the server answers ``PING``."""
        try:
            return bool(await self._client.ping())
        except RedisError as exc:
            logger.warning("redis_ping_failed", error=str(exc))
            return False

    async def close(self) -> None:
        await self._client.aclose()

    def get_provider_name(self) -> str:
        return "redis"
