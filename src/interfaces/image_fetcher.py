"""Abstract base class for image fetchers.

An image fetcher turns a URL into raw bytes.  It knows nothing about
encoding or records; the enrichment pipeline builds on top of it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IImageFetcher(ABC):
    """Contract for downloading remote images."""

    @abstractmethod
    async def fetch(self, url: str) -> bytes:
        """Download the image at *url*.

        Parameters
        ----------
        url:
            Absolute HTTP(S) URL of the image.  Treated as untrusted.

        Returns
        -------
        bytes
            The raw response body.

        Raises
        ------
        src.utils.errors.ImageFetchError
            On network errors, timeouts, or a non-success status.
        """
