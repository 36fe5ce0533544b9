"""Registry of configured catalog providers.

Built once at startup from the provider profiles and handed to the routes
through ``app.state``; there is no module-level provider instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from src.interfaces.movie_provider import IMovieProvider
from src.models.catalog import ProviderProfile
from src.utils.errors import ConfigurationError


@dataclass(frozen=True)
class RegisteredProvider:
    """A provider adapter paired with the profile that configures it."""

    profile: ProviderProfile
    adapter: IMovieProvider

    @property
    def name(self) -> str:
        return self.profile.name


class ProviderRegistry:
    """Name → :class:`RegisteredProvider` lookup, case-insensitive."""

    def __init__(self, providers: Iterable[RegisteredProvider] = ()) -> None:
        self._providers: dict[str, RegisteredProvider] = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: RegisteredProvider) -> None:
        key = provider.name.lower()
        if key in self._providers:
            raise ConfigurationError(f"Provider {provider.name!r} registered twice")
        self._providers[key] = provider

    def get(self, name: str) -> RegisteredProvider | None:
        return self._providers.get(name.lower())

    def names(self) -> list[str]:
        return sorted(self._providers)

    def __iter__(self) -> Iterator[RegisteredProvider]:
        return iter(self._providers.values())

    def __len__(self) -> int:
        return len(self._providers)
