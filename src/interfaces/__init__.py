"""Public interface definitions for every pluggable collaborator.

Concrete adapters implement these abstract base classes and are injected at
startup in ``src/main.py``, so a cache backend or a catalog provider can be
swapped without touching the services or routes.

CONCRETE IMPLEMENTATION MAP:
    Interface        →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────
    ICacheProvider   →  MemoryCacheProvider, RedisCacheProvider
    IImageFetcher    →  HttpxImageFetcher
    IMovieProvider   →  RemoteCatalogProvider

Re-exports
----------
ICacheProvider
    Byte-level key-value backend contract.
IImageFetcher
    URL → bytes download contract.
IMovieProvider, Record
    Catalog provider contract and its record alias.
"""

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.image_fetcher import IImageFetcher
from src.interfaces.movie_provider import IMovieProvider, Record

__all__ = [
    "ICacheProvider",
    "IImageFetcher",
    "IMovieProvider",
    "Record",
]
