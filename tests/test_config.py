import pytest
from core.config import Settings, DEFAULT_DATABASE_URL


def test_defaults_without_environment():
    settings = Settings.from_env({})
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.cache_ttl_seconds == 300
    assert settings.default_page_size == 20
    assert settings.max_page_size == 100
    assert settings.frontend_url == "*"
    assert settings.port == 3000


def test_values_from_environment():
    settings = Settings.from_env({
        "DATABASE_URL": "sqlite+aiosqlite:///./other.db",
        "DB_TIMEOUT_SECONDS": "2.5",
        "CACHE_TTL_SECONDS": "60",
        "CACHE_MAX_ENTRIES": "10",
        "MAX_PAGE_SIZE": "50",
        "FRONTEND_URL": "https://dashboard.example.com",
        "LOG_LEVEL": "debug",
    })
    assert settings.database_url == "sqlite+aiosqlite:///./other.db"
    assert settings.db_timeout_seconds == 2.5
    assert settings.cache_ttl_seconds == 60
    assert settings.cache_max_entries == 10
    assert settings.max_page_size == 50
    assert settings.frontend_url == "https://dashboard.example.com"
    assert settings.log_level == "DEBUG"


def test_malformed_number_fails_fast():
    with pytest.raises(ValueError):
        Settings.from_env({"CACHE_TTL_SECONDS": "five minutes"})
