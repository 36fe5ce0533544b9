"""Application settings loaded from environment variables via pydantic-settings.

Sources, highest priority first:

  1. Environment variables (``REDIS_URL=redis://cache:6379/0``)
  2. ``.env`` in the working directory
  3. The defaults below

Field ``redis_url`` maps to env var ``REDIS_URL`` and so on; pydantic-settings
matches case-insensitively.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """cinegate application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Cache ===
    # Empty = no Redis.  The app then falls back to the in-process cache, or
    # to no cache at all when memory_cache_enabled is False.
    redis_url: str = ""
    redis_key_prefix: str = "cinegate:"
    redis_timeout: float = 2.0
    memory_cache_enabled: bool = True
    memory_cache_max_size: int = 2048
    cache_coalesce_misses: bool = False

    # === Catalog providers ===
    providers_config_path: str = "config/config.yaml"
    # Providers without an explicit base_url live at {catalog_api_base_url}/movies/{name}.
    catalog_api_base_url: str = "http://localhost:3000"
    http_timeout: float = 30.0

    # === Image enrichment ===
    image_fetch_timeout: float = 10.0
    image_fetch_max_concurrency: int = 0  # 0 = one download per record

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def cache_backend_kind(self) -> str:
        """Return ``"redis"``, ``"memory"`` or ``"none"``."""
        if self.redis_url:
            return "redis"
        if self.memory_cache_enabled:
            return "memory"
        return "none"
