"""Cache-aside store wrapping an optional key-value backend.

The flow for one call to :meth:`CacheAsideStore.fetch`:

    backend is None  ->  run the producer, return its outcome (no caching)
    backend present  ->  GET key
                          hit + decodes   ->  Success(cached value)
                          miss / error    ->  run the producer
                                                failed   ->  Failure, nothing written
                                                ok       ->  SET key EX ttl, Success(value)

Backend and codec failures never reach the caller: a failed read is a miss,
a failed write is logged and skipped, and the fresh value is still
returned.  Only upstream (producer) failures surface, as a
:class:`~src.models.outcome.Failure`.

Concurrent misses on the same key each run the producer unless the store
is built with ``coalesce_misses=True``.  Then the first miss starts one
shared task and later misses await it; cancelling any caller, the first
included, never cancels that task.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import structlog

from src.interfaces.cache_provider import ICacheProvider
from src.models.outcome import Failure, Outcome, Success
from src.utils.codec import JsonCodec
from src.utils.errors import BackendError, CodecError, UpstreamError
from src.utils.logging import get_logger

Producer = Callable[[], Awaitable[Any]]

_logger: structlog.BoundLogger = get_logger(__name__)

_MISS = object()


class CacheAsideStore:
    """Read-through cache in front of caller-supplied producers.

    The store owns the lifecycle of the entries it writes but not the
    backend, which is passed in per call and may be ``None``.  TTLs are
    chosen by the caller and forwarded as-is.
    """

    def __init__(self, codec: JsonCodec | None = None, coalesce_misses: bool = False) -> None:
        self._codec = codec or JsonCodec()
        self._coalesce_misses = coalesce_misses
        self._in_flight: dict[str, asyncio.Task[Outcome[Any]]] = {}

    async def fetch(
        self,
        backend: ICacheProvider | None,
        key: str,
        producer: Producer,
        ttl_seconds: int,
    ) -> Outcome[Any]:
        """Return the value for *key*, computing it with *producer* on a miss.

        Parameters
        ----------
        backend:
            Cache backend, or ``None`` to bypass caching entirely.
        key:
            Fully built cache key (see :func:`~src.utils.cache_keys.build_cache_key`).
        producer:
            Zero-argument coroutine function producing the value.  Called at
            most once per ``fetch`` call and never on a hit.
        ttl_seconds:
            Expiry written alongside a freshly produced value.

        Returns
        -------
        Outcome
            ``Success(value)`` from the cache or the producer, or
            ``Failure(error)`` when the producer failed.
        """
        if backend is None:
            return await self._produce(key, producer)

        cached = await self._read(backend, key)
        if cached is not _MISS:
            return Success(cached)

        if self._coalesce_misses:
            return await self._produce_coalesced(backend, key, producer, ttl_seconds)
        return await self._produce_and_store(backend, key, producer, ttl_seconds)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _read(self, backend: ICacheProvider, key: str) -> Any:
        try:
            payload = await backend.get(key)
        except BackendError as exc:
            _logger.warning("cache_read_failed", key=key, error=str(exc))
            return _MISS
        except Exception as exc:  # noqa: BLE001 -- third-party backends raise anything
            _logger.warning("cache_read_failed", key=key, error=repr(exc))
            return _MISS

        if payload is None:
            _logger.debug("cache_miss", key=key)
            return _MISS

        try:
            value = self._codec.decode(payload)
        except CodecError as exc:
            _logger.warning("cache_decode_failed", key=key, error=str(exc))
            return _MISS

        _logger.debug("cache_hit", key=key)
        return value

    async def _write(self, backend: ICacheProvider, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            payload = self._codec.encode(value)
            await backend.set(key, payload, ttl_seconds)
        except (BackendError, CodecError) as exc:
            _logger.warning("cache_write_failed", key=key, error=str(exc))
        except Exception as exc:  # noqa: BLE001 -- third-party backends raise anything
            _logger.warning("cache_write_failed", key=key, error=repr(exc))
        else:
            _logger.debug("cache_stored", key=key, ttl=ttl_seconds, size=len(payload))

    async def _produce(self, key: str, producer: Producer) -> Outcome[Any]:
        try:
            value = await producer()
        except UpstreamError as exc:
            _logger.info("producer_failed", key=key, error=str(exc))
            return Failure(exc)
        except Exception as exc:  # noqa: BLE001 -- wrap unexpected adapter faults
            _logger.exception("producer_crashed", key=key)
            return Failure(UpstreamError(f"Producer raised {type(exc).__name__}: {exc}"))
        return Success(value)

    async def _produce_and_store(
        self,
        backend: ICacheProvider,
        key: str,
        producer: Producer,
        ttl_seconds: int,
    ) -> Outcome[Any]:
        outcome = await self._produce(key, producer)
        if isinstance(outcome, Success):
            await self._write(backend, key, outcome.value, ttl_seconds)
        return outcome

    async def _produce_coalesced(
        self,
        backend: ICacheProvider,
        key: str,
        producer: Producer,
        ttl_seconds: int,
    ) -> Outcome[Any]:
        task = self._in_flight.get(key)
        if task is None:
            # The shared work runs as its own task so no single caller owns it.
            task = asyncio.ensure_future(
                self._produce_and_store(backend, key, producer, ttl_seconds)
            )
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        else:
            _logger.debug("cache_miss_coalesced", key=key)
        # shield: a cancelled caller stops waiting, the shared task keeps running.
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task[Outcome[Any]]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
