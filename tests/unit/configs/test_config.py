"""
Unit tests for the config module.

Tests for Config path resolution and YAML loading.
"""

import logging
from pathlib import Path

from travel_content.configs.config import Config
from travel_content.configs.logging_config import configure_logging
from travel_content.ingestion.pipeline import NormalizationOptions


class TestConfigPaths:
    """Tests for Config path attributes."""

    def test_config_dir_exists(self):
        """CONFIG_DIR should exist."""
        assert isinstance(Config.CONFIG_DIR, Path)
        assert Config.CONFIG_DIR.exists()

    def test_normalization_config_path_exists(self):
        """NORMALIZATION_CONFIG_PATH points at the bundled YAML file."""
        assert Config.NORMALIZATION_CONFIG_PATH.exists()

    def test_get_taxonomy_path(self):
        """get_taxonomy_path returns the taxonomy asset."""
        path = Config.get_taxonomy_path()
        assert path.name == "travel_taxonomy.json"
        assert path.exists()


class TestLoadNormalizationConfig:
    """Tests for load_normalization_config and derived accessors."""

    def test_placeholders_are_substituted(self):
        """${VAR} placeholders are replaced by settings values."""
        config = Config.load_normalization_config()
        assert config["pipeline"]["batch_size"] == 10
        assert config["pipeline"]["enable_deduplication"] is False
        assert config["pipeline"]["deduplication_threshold"] == 0.8

    def test_tagging_config(self):
        """Tagging thresholds are read from the YAML file."""
        tagging = Config.get_tagging_config()
        assert tagging["confidence_threshold"] == 0.5
        assert tagging["keyword_match_threshold"] == 0.15
        assert tagging["default_tag_confidence"] == 0.3

    def test_default_options(self):
        """default_options builds NormalizationOptions from the pipeline section."""
        options = Config.default_options()
        assert isinstance(options, NormalizationOptions)
        assert options.enable_deduplication is False
        assert options.deduplication_threshold == 0.8
        assert options.validate_output is False
        assert options.batch_size == 10


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_explicit_level(self, monkeypatch):
        """The requested level is passed to basicConfig."""
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging("debug")
        assert calls["level"] == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        """Unknown level names fall back to INFO."""
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging("chatty")
        assert calls["level"] == logging.INFO
