"""Image fetchers."""

from src.providers.image.httpx_image_fetcher import HttpxImageFetcher

__all__ = ["HttpxImageFetcher"]
