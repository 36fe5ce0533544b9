"""Utility modules for cinegate.

- **errors** -- Exception hierarchy rooted at CinegateError; upstream,
  backend and codec failures each have their own subclass so the cache
  store can absorb backend trouble while propagating upstream failures.
- **codec** -- JSON byte codec for values stored in the cache backend.
- **cache_keys** -- ``namespace:operation:params`` key construction.
- **concurrency** -- Ordered, optionally semaphore-bounded gather.
- **logging** -- structlog setup: console output in development, JSON in
  production.
"""

from src.utils.cache_keys import build_cache_key
from src.utils.codec import JsonCodec
from src.utils.concurrency import throttled_gather
from src.utils.errors import (
    BackendError,
    CinegateError,
    CodecError,
    ConfigurationError,
    ImageFetchError,
    MediaNotFoundError,
    ProviderUnavailableError,
    UnsupportedOperationError,
    UpstreamError,
)
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "BackendError",
    "CinegateError",
    "CodecError",
    "ConfigurationError",
    "ImageFetchError",
    "JsonCodec",
    "MediaNotFoundError",
    "ProviderUnavailableError",
    "UnsupportedOperationError",
    "UpstreamError",
    "build_cache_key",
    "configure_logging",
    "get_logger",
    "throttled_gather",
]
