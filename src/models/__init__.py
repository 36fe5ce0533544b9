"""cinegate domain models.

- catalog.py  -- provider profiles, capabilities, streaming servers
- outcome.py  -- Success / Failure results returned by the core services

Catalog records themselves (movies, shows, episode sources) are plain dicts
owned by the providers and are not modelled.
"""

from __future__ import annotations

from src.models.catalog import Capability, ImageRewrite, ProviderProfile, StreamingServer
from src.models.outcome import Failure, Outcome, Success

__all__ = [
    "Capability",
    "Failure",
    "ImageRewrite",
    "Outcome",
    "ProviderProfile",
    "StreamingServer",
    "Success",
]
