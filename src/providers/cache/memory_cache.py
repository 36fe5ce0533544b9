"""In-memory cache backend using cachetools.TLRUCache.

Fast and good enough for development and single-process deployments.  Unlike
``TTLCache``, ``TLRUCache`` computes an expiry per entry, so each ``set``
honours the TTL its caller chose.  Swap in :class:`RedisCacheProvider` when
several workers should share one cache.
"""

from __future__ import annotations

import time
from typing import Callable, NamedTuple

import structlog
from cachetools import TLRUCache

from src.interfaces.cache_provider import ICacheProvider
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)


class _Entry(NamedTuple):
    payload: bytes
    ttl: int


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class MemoryCacheProvider(ICacheProvider):
    """In-process TTL cache backed by ``cachetools.TLRUCache``.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted.
    timer:
        Clock used for expiry.  Defaults to ``time.monotonic``; tests pass
        a controllable clock.
    """

    def __init__(
        self,
        max_size: int = 1000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=max_size, ttu=_time_to_use, timer=timer
        )

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> bytes | None:
        """Return the payload for *key*, or ``None`` if missing/expired."""
        entry = self._cache.get(key)
        if entry is None:
            logger.debug("cache_miss", key=key, backend="memory")
            return None
        logger.debug("cache_hit", key=key, backend="memory")
        return entry.payload

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store *value* under *key*; it expires *ttl* seconds from now."""
        self._cache[key] = _Entry(payload=value, ttl=ttl)
        logger.debug("cache_set", key=key, ttl=ttl, backend="memory")

    async def delete(self, key: str) -> None:
        self._cache.pop(key, None)
        logger.debug("cache_delete", key=key, backend="memory")

    def get_provider_name(self) -> str:
        return "memory"

    def __len__(self) -> int:
        self._cache.expire()
        return len(self._cache)
