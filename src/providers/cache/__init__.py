"""Cache backends.

MemoryCacheProvider keeps entries in process memory: fast, but not shared
across workers.  RedisCacheProvider shares one cache between every worker
and survives restarts.  Both implement ICacheProvider, so the cache-aside
store does not care which one it is handed (or whether it is handed one
at all).
"""

from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.redis_cache import RedisCacheProvider

__all__ = ["MemoryCacheProvider", "RedisCacheProvider"]
