from travel_content.configs.settings import Settings, get_settings


def test_settings_default_values():
    """Test default values for settings."""
    settings = Settings()
    assert settings.DEFAULT_LOCALE == "en-US"
    assert settings.DEFAULT_CURRENCY == "USD"
    assert settings.ENABLE_DEDUPLICATION is False
    assert settings.DEDUPLICATION_THRESHOLD == 0.8
    assert settings.BATCH_SIZE == 10


def test_settings_from_environment(monkeypatch):
    """Environment variables override defaults."""
    monkeypatch.setenv("DEDUPLICATION_THRESHOLD", "0.9")
    monkeypatch.setenv("BATCH_SIZE", "25")
    settings = Settings()
    assert settings.DEDUPLICATION_THRESHOLD == 0.9
    assert settings.BATCH_SIZE == 25


def test_paths():
    """Test that paths are correctly resolved."""
    settings = Settings()
    assert settings.BASE_DIR.name == "travel_content"
    assert settings.TAXONOMY_DATA_PATH.name == "travel_taxonomy.json"
    assert settings.NORMALIZATION_CONFIG_PATH.name == "normalization.yaml"
    assert settings.TAXONOMY_DATA_PATH.exists()


def test_get_settings_is_cached():
    """get_settings returns the same instance on every call."""
    assert get_settings() is get_settings()
