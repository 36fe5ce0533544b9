"""YAML configuration loader with environment variable overrides.

Configuration is layered, later layers win:

  1. config/config.yaml  -- provider profiles and static defaults
  2. .env file           -- local overrides (not committed)
  3. Environment vars    -- set at deploy time

``load_config`` reads the YAML and deep-merges the env-derived values on
top; ``load_provider_profiles`` turns the ``providers`` section into
validated :class:`~src.models.catalog.ProviderProfile` objects.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.config.settings import Settings
from src.models.catalog import ProviderProfile
from src.utils.errors import ConfigurationError


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file yields
              an empty base layer.
        settings: Settings to merge; a fresh ``Settings()`` when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    if not isinstance(yaml_config, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "cache": {
            "backend": settings.cache_backend_kind(),
            "coalesce_misses": settings.cache_coalesce_misses,
        },
        "catalog": {
            "base_url": settings.catalog_api_base_url,
        },
        "images": {
            "timeout": settings.image_fetch_timeout,
            "max_concurrency": settings.image_fetch_max_concurrency,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def load_provider_profiles(config: dict, catalog_base_url: str) -> list[ProviderProfile]:
    """Validate the ``providers`` section of *config*.

    The section may be a mapping of name → settings or a list of settings
    each carrying ``name``.  Profiles without ``base_url`` get
    ``{catalog_base_url}/movies/{name}``.

    Raises:
        ConfigurationError: If a profile fails validation.
    """
    raw = config.get("providers") or {}
    if isinstance(raw, dict):
        entries = [{"name": name, **(body or {})} for name, body in raw.items()]
    elif isinstance(raw, list):
        entries = list(raw)
    else:
        raise ConfigurationError("'providers' must be a mapping or a list")

    base = catalog_base_url.rstrip("/")
    profiles: list[ProviderProfile] = []
    for entry in entries:
        try:
            profile = ProviderProfile.model_validate(entry)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid provider profile: {exc}",
                provider_name=entry.get("name") if isinstance(entry, dict) else None,
            ) from exc
        if not profile.base_url:
            profile = profile.model_copy(update={"base_url": f"{base}/movies/{profile.name}"})
        profiles.append(profile)
    return profiles


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> None:
    """Recursively merge *overrides* into *base* in place."""
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
