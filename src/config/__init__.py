"""Configuration module -- exports Settings and the YAML loaders."""

from src.config.loader import load_config, load_provider_profiles
from src.config.settings import Settings

__all__ = ["Settings", "load_config", "load_provider_profiles"]
