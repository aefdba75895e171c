"""Centralized settings management for the travel content pipeline."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings powered by pydantic-settings.

    Loads configuration from environment variables and a .env file located
    next to the travel_content package.
    """

    # -------------------------------------------------------------------------
    # ENVIRONMENT
    # -------------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"

    # -------------------------------------------------------------------------
    # NORMALIZATION DEFAULTS
    # -------------------------------------------------------------------------
    DEFAULT_LOCALE: str = "en-US"
    DEFAULT_CURRENCY: str = Field(default="USD", min_length=3, max_length=3)

    ENABLE_DEDUPLICATION: bool = False
    DEDUPLICATION_THRESHOLD: float = Field(default=0.8, ge=0.0, le=1.0)
    VALIDATE_OUTPUT: bool = False
    BATCH_SIZE: int = Field(default=10, ge=1)

    # -------------------------------------------------------------------------
    # PATHS
    # -------------------------------------------------------------------------
    # BASE_DIR points to the travel_content package
    BASE_DIR: Path = Path(__file__).resolve().parents[1]

    TAXONOMY_DATA_PATH: Path = BASE_DIR / "assets" / "travel_taxonomy.json"
    NORMALIZATION_CONFIG_PATH: Path = BASE_DIR / "configs" / "normalization.yaml"

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        # Allow extra fields in .env but ignore them in the model
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
