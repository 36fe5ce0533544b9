"""Abstract base class for cache backends.

Defines the byte-level key-value contract wrapped by the cache-aside store.
Implementations may keep entries in process memory, in Redis, or anywhere
else; the store never depends on a concrete backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class ICacheProvider(ABC):
    """Contract for key-value cache backends.

    All operations are async so network-backed stores do not block the
    event loop.  Every method may fail; implementations raise
    :class:`~src.utils.errors.BackendError` and callers treat that as a
    miss (reads) or a skipped write (writes).
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Retrieve the payload stored under *key*.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        bytes or None
            The stored payload if present and not expired; ``None`` otherwise.

        Raises
        ------
        src.utils.errors.BackendError
            If the backend cannot be read.
        """

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store *value* under *key* for *ttl* seconds.

        Parameters
        ----------
        key:
            The cache key.
        value:
            The serialized payload.
        ttl:
            Time-to-live in seconds.  The entry expires on its own after
            this long; an existing entry under *key* is replaced.

        Raises
        ------
        src.utils.errors.BackendError
            If the backend cannot be written.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry stored under *key*.  No-op if absent."""

    def get_provider_name(self) -> str:
        return type(self).__name__
