"""Image fetcher backed by the shared ``httpx.AsyncClient``."""

from __future__ import annotations

import httpx

from src.interfaces.image_fetcher import IImageFetcher
from src.utils.errors import ImageFetchError
from src.utils.logging import get_logger

_USER_AGENT = "cinegate/0.1.0"


class HttpxImageFetcher(IImageFetcher):
    """Download images with a GET request, following redirects.

    Any transport error or non-2xx status becomes an
    :class:`ImageFetchError`.  ``timeout`` bounds each request on top of
    whatever default the shared client carries.
    """

    def __init__(self, http_client: httpx.AsyncClient, timeout: float = 10.0) -> None:
        self._http = http_client
        self._timeout = timeout
        self._logger = get_logger(__name__)

    async def fetch(self, url: str) -> bytes:
        headers = {"User-Agent": _USER_AGENT, "Accept": "image/*"}
        try:
            response = await self._http.get(
                url, headers=headers, follow_redirects=True, timeout=self._timeout
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ImageFetchError(
                f"Image host returned {exc.response.status_code} for {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ImageFetchError(f"Image request failed for {url}: {exc}") from exc

        self._logger.debug("image_fetched", url=url, size=len(response.content))
        return response.content
