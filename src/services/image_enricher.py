"""Image enrichment: inline remote posters as ``data:`` URIs.

For every record in a batch the enricher looks up an image URL, downloads
the bytes through an :class:`~src.interfaces.image_fetcher.IImageFetcher`,
and writes ``data:image/jpeg;base64,...`` into a new field.  All downloads
run concurrently and the batch waits for every one of them (join barrier)
before returning.

Failure is data, not an exception: a record without a URL, or whose
download fails or times out, gets ``None`` in the target field and the rest
of the batch is unaffected.  Output order always follows input order and
every other field is passed through untouched.
"""

from __future__ import annotations

import asyncio
import base64
from typing import Any, Callable, Sequence

import structlog

from src.interfaces.image_fetcher import IImageFetcher
from src.utils.concurrency import throttled_gather
from src.utils.errors import UpstreamError
from src.utils.logging import get_logger

Record = dict[str, Any]
UrlRewrite = Callable[[str], str]

DATA_URI_PREFIX = "data:image/jpeg;base64,"
IMAGE_FIELD = "base64Image"
COVER_FIELD = "base64Cover"

_logger: structlog.BoundLogger = get_logger(__name__)


def default_url_of(record: Record) -> str | None:
    """Return the record's ``image`` URL, or ``None`` when absent/blank."""
    url = record.get("image")
    if isinstance(url, str) and url.strip():
        return url
    return None


def to_data_uri(payload: bytes) -> str:
    return DATA_URI_PREFIX + base64.b64encode(payload).decode("ascii")


def _lookup_url(url_of: Callable[[Record], str | None], record: Record) -> str | None:
    """Run a caller-supplied URL lookup; a lookup that raises means no URL."""
    try:
        return url_of(record)
    except Exception as exc:  # noqa: BLE001 -- one odd record must not sink the batch
        _logger.warning("image_url_lookup_failed", record_id=record.get("id"), error=repr(exc))
        return None


class ImageEnricher:
    """Concurrent poster/cover inliner.

    Parameters
    ----------
    fetcher:
        Downloads image bytes.
    timeout:
        Seconds allowed per download; a slower download counts as a
        failure.  ``None`` disables the limit.
    max_concurrency:
        Upper bound on simultaneous downloads across one call.  ``None``
        or ``0`` means one download per record, all at once.
    """

    def __init__(
        self,
        fetcher: IImageFetcher,
        timeout: float | None = 10.0,
        max_concurrency: int | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._timeout = timeout
        self._max_concurrency = max_concurrency or None

    async def encode_image(self, url: str | None, rewrite: UrlRewrite | None = None) -> str | None:
        """Download *url* and return it as a data URI, or ``None`` on any failure."""
        if not url:
            return None
        target = url
        try:
            if rewrite is not None:
                target = rewrite(url)
            if self._timeout is None:
                payload = await self._fetcher.fetch(target)
            else:
                payload = await asyncio.wait_for(self._fetcher.fetch(target), self._timeout)
        except asyncio.TimeoutError:
            _logger.warning("image_fetch_timeout", url=target, timeout=self._timeout)
            return None
        except UpstreamError as exc:
            _logger.warning("image_fetch_failed", url=target, error=str(exc))
            return None
        except Exception as exc:  # noqa: BLE001 -- one bad image must not sink the batch
            _logger.warning("image_fetch_failed", url=target, error=repr(exc))
            return None
        return to_data_uri(payload)

    async def enrich(
        self,
        records: Sequence[Record],
        url_of: Callable[[Record], str | None] = default_url_of,
        rewrite: UrlRewrite | None = None,
        target_field: str = IMAGE_FIELD,
    ) -> list[Record]:
        """Return copies of *records* with *target_field* set.

        Parameters
        ----------
        records:
            Records to enrich.  They are not mutated.
        url_of:
            Extracts the image URL from a record; ``None`` skips the fetch.
        rewrite:
            Optional URL transform applied before fetching (e.g. swap a
            thumbnail size for a full-size one).
        target_field:
            Field receiving the data URI or ``None``.

        Returns
        -------
        list[dict]
            Same length and order as *records*.
        """
        if not records:
            return []

        urls = [_lookup_url(url_of, record) for record in records]
        semaphore = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None
        encoded = await throttled_gather(
            [self.encode_image(url, rewrite) for url in urls],
            semaphore=semaphore,
        )

        failures = sum(1 for url, value in zip(urls, encoded) if url and value is None)
        _logger.debug("images_enriched", total=len(records), failed=failures)

        return [{**record, target_field: value} for record, value in zip(records, encoded)]

    async def enrich_search_page(
        self,
        page: Record,
        url_of: Callable[[Record], str | None] = default_url_of,
        rewrite: UrlRewrite | None = None,
        target_field: str = IMAGE_FIELD,
    ) -> Record:
        """Enrich ``page["results"]`` and leave pagination metadata alone."""
        results = page.get("results") or []
        enriched = await self.enrich(results, url_of=url_of, rewrite=rewrite, target_field=target_field)
        return {**page, "results": enriched}

    async def enrich_media_info(self, info: Record, rewrite: UrlRewrite | None = None) -> Record:
        """Inline both the poster (``image``) and the backdrop (``cover``) of one title."""
        image, cover = await asyncio.gather(
            self.encode_image(default_url_of(info), rewrite),
            self.encode_image(default_url_of({"image": info.get("cover")}), rewrite),
        )
        return {**info, IMAGE_FIELD: image, COVER_FIELD: cover}
