"""Custom exception hierarchy for cinegate.

All application exceptions inherit from :class:`CinegateError`, which
carries an optional ``provider_name`` so error handlers can identify which
catalog provider (e.g. "flixhq", "dramacool") or backend caused the failure.

The hierarchy is organized by where the failure originates:

    CinegateError  (base -- catch-all for any cinegate error)
    +-- UpstreamError              (remote source failed: catalog API, image host)
    |   +-- ProviderUnavailableError   (catalog API down / bad response)
    |   +-- MediaNotFoundError         (catalog API reports the item missing)
    |   +-- UnsupportedOperationError  (provider does not offer the route)
    |   +-- ImageFetchError            (poster / cover download failed)
    +-- BackendError               (cache backend read/write failed)
    +-- CodecError                 (value could not be (de)serialized)
    +-- ConfigurationError         (startup / missing config)

Only ``UpstreamError`` ever reaches a route as a failed outcome.  Backend
and codec errors are absorbed by the cache-aside store and treated as a
cache miss or a skipped write.
"""


class CinegateError(Exception):
    """Base exception for all cinegate errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which provider triggered the error.
    ``__str__`` prefixes the provider name in brackets for log output,
    e.g. ``[flixhq] Catalog API returned 502``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Upstream errors (catalog providers, image hosts)
# ---------------------------------------------------------------------------

class UpstreamError(CinegateError):
    """Raised when a remote source fails (network, parse, non-success status)."""

    def __init__(
        self,
        message: str = "Upstream request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(UpstreamError):
    """Raised when a catalog provider is unreachable or answers with garbage."""

    def __init__(
        self,
        message: str = "Catalog provider is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class MediaNotFoundError(UpstreamError):
    """Raised when the catalog provider reports the requested media missing."""

    def __init__(
        self,
        message: str = "Media Not found.",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UnsupportedOperationError(UpstreamError):
    """Raised when a provider is asked for a route it does not offer."""

    def __init__(
        self,
        message: str = "Operation not supported by this provider",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ImageFetchError(UpstreamError):
    """Raised by image fetchers when an image cannot be downloaded."""

    def __init__(
        self,
        message: str = "Image fetch failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Cache backend / serialization errors
# ---------------------------------------------------------------------------

class BackendError(CinegateError):
    """Raised by cache backends when a read or write fails."""

    def __init__(
        self,
        message: str = "Cache backend operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CodecError(CinegateError):
    """Raised when a value cannot be encoded to or decoded from bytes."""

    def __init__(
        self,
        message: str = "Serialization failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(CinegateError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
