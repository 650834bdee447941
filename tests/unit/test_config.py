"""Tests for configuration module."""

import pytest

from smilehub.core.config import DatabaseSettings, Settings, get_settings


class TestSettings:
    """Test Settings configuration."""

    def test_default_settings(self):
        """Test default settings values."""
        settings = Settings()
        assert settings.app_name == "SmileHub"
        assert settings.app_version == "1.0.0"
        assert settings.environment == "development"

    def test_token_lifetime_is_one_day(self):
        settings = Settings()
        assert settings.access_token_expire_minutes == 1440
        assert settings.algorithm == "HS256"

    def test_insecure_secret_replaced_in_development(self):
        """An empty secret is swapped for a generated development key."""
        settings = Settings(secret_key="")
        assert settings.secret_key.startswith("dev-only-insecure-")

    def test_insecure_secret_rejected_in_production(self):
        with pytest.raises(ValueError):
            Settings(environment="production", secret_key="changeme")

    def test_debug_rejected_in_production(self):
        with pytest.raises(ValueError):
            Settings(environment="production", secret_key="a" * 64, debug=True)

    def test_request_body_limit(self):
        settings = Settings(max_request_body_mb=2)
        assert settings.max_request_body_bytes == 2 * 1024 * 1024

    def test_get_settings_cached(self):
        """Test settings are cached."""
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2


class TestDatabaseSettings:
    """Test database URL assembly."""

    def test_url_from_parts(self):
        db = DatabaseSettings(user="clinic", password="pw", host="db", port=5433, name="smile")
        assert db.url == "postgresql+asyncpg://clinic:pw@db:5433/smile"

    def test_explicit_url_wins(self):
        db = DatabaseSettings(url_override="sqlite+aiosqlite:///./smilehub.db")
        assert db.url == "sqlite+aiosqlite:///./smilehub.db"
