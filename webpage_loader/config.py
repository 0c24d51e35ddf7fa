"""Configuration for webpage-loader using pydantic-settings.

All settings are driven by environment variables with the WEBLOADER_ prefix.
"""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Loader configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WEBLOADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    user_agent: str = "webpage-loader/0.1 (+https://example.com/webpage-loader)"
    accept_language: str = "en-US,en;q=0.9"

    min_delay_seconds: float = 0.0
    timeout_total: float = 30.0

    max_attempts: int = 3
    backoff_multiplier: float = 1.0
    backoff_min: float = 1.0
    backoff_max: float = 30.0

    default_selector: str = "body"

    chunk_size: int = 1000
    chunk_overlap: int = 200


def get_settings() -> Settings:
    """Load settings from the environment."""
    s = Settings()
    logger.debug("Loaded settings: timeout=%s max_attempts=%d", s.timeout_total, s.max_attempts)
    return s
