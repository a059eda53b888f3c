"""Configuration for nestcache.

Settings come from ``NESTCACHE_*`` environment variables or a local ``.env``
file. The cache roots are shared by every caller and every process run, so
they live under the user's home directory by default.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get the nestcache home directory (not created here)."""
    return Path.home() / ".nestcache"


class Settings(BaseSettings):
    """nestcache settings with env and .env file support."""

    model_config = SettingsConfigDict(env_prefix="NESTCACHE_", env_file=".env", extra="ignore")

    cache_dir: Path = Field(
        default_factory=lambda: get_config_dir() / "nested-jars",
        description="Directory holding content-named nested archives",
    )
    resolver_dir: Path = Field(
        default_factory=lambda: get_config_dir() / "jar-url-files",
        description="Directory holding files materialized from jar:...!/ URLs",
    )
    http_timeout: float = Field(
        default=30.0, description="Timeout in seconds when reading http(s) URLs"
    )
    log_level: str = Field(default="INFO", description="Root log level for the CLI")


@lru_cache
def _load_settings() -> Settings:
    settings = Settings()
    logger.debug("Loaded settings: cache_dir=%s", settings.cache_dir)
    return settings


def get_settings(force_reload: bool = False) -> Settings:
    """Get cached settings instance, re-reading the environment on ``force_reload``."""
    if force_reload:
        _load_settings.cache_clear()
    return _load_settings()
