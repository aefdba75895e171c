"""Configuration loader for the travel content pipeline."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from travel_content.configs.settings import get_settings

if TYPE_CHECKING:
    from travel_content.ingestion.pipeline import NormalizationOptions

settings = get_settings()


class Config:
    """Configuration for the travel content pipeline."""

    CONFIG_DIR = Path(__file__).parent.resolve()
    PROJECT_ROOT = settings.BASE_DIR

    NORMALIZATION_CONFIG_PATH = settings.NORMALIZATION_CONFIG_PATH
    TAXONOMY_DATA_PATH = settings.TAXONOMY_DATA_PATH

    @classmethod
    @lru_cache
    def load_normalization_config(cls) -> dict:
        """Load the YAML configuration for the normalization pipeline."""
        if not cls.NORMALIZATION_CONFIG_PATH.exists():
            raise FileNotFoundError(
                f"Missing config at {cls.NORMALIZATION_CONFIG_PATH}"
            )

        with open(cls.NORMALIZATION_CONFIG_PATH, encoding="utf-8") as f:
            content = f.read()

            # Substitute ${VAR} placeholders from settings
            for key, value in get_settings().model_dump().items():
                placeholder = f"${{{key}}}"
                if placeholder in content:
                    val_str = str(value).lower() if isinstance(value, bool) else str(value)
                    content = content.replace(placeholder, val_str)

            return yaml.safe_load(content) or {}

    @classmethod
    def get_taxonomy_path(cls) -> Path:
        """Return the absolute path to the taxonomy JSON."""
        return cls.TAXONOMY_DATA_PATH

    @classmethod
    def get_tagging_config(cls) -> dict:
        """Return the tagging section of the normalization config."""
        return cls.load_normalization_config().get("tagging", {})

    @classmethod
    def default_options(cls) -> "NormalizationOptions":
        """Build pipeline options from the ``pipeline`` section of the YAML file."""
        from travel_content.ingestion.pipeline import NormalizationOptions

        pipeline_cfg = cls.load_normalization_config().get("pipeline", {})
        return NormalizationOptions(
            enable_deduplication=bool(pipeline_cfg.get("enable_deduplication", False)),
            deduplication_threshold=float(
                pipeline_cfg.get("deduplication_threshold", 0.8)
            ),
            validate_output=bool(pipeline_cfg.get("validate_output", False)),
            batch_size=int(pipeline_cfg.get("batch_size", 10)),
        )
