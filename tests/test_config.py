"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from taskboard.config import Settings, get_settings, validate_settings_on_startup


class TestSettings:

    def test_test_environment_uses_sqlite(self):
        settings = get_settings()

        assert settings.is_sqlite()
        assert settings.cache_ttl_tasks == 3600
        assert settings.default_per_page == 10
        assert settings.max_per_page == 100

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")

    def test_non_positive_limits_rejected(self):
        with pytest.raises(ValidationError):
            Settings(max_per_page=0)
        with pytest.raises(ValidationError):
            Settings(cache_ttl_tasks=-1)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CACHE_TTL_TASKS", "60")

        assert Settings().cache_ttl_tasks == 60

    def test_default_db_password_rejected_in_production(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        with pytest.raises(ValidationError):
            Settings(database_url="postgresql://taskboard:password@db:5432/taskboard")

    def test_debug_rejected_in_production(self):
        settings = Settings(environment="production", debug=True)

        with pytest.raises(ValueError):
            validate_settings_on_startup(settings)

    def test_default_page_size_cannot_exceed_max(self):
        settings = Settings(default_per_page=50, max_per_page=20)

        with pytest.raises(ValueError):
            validate_settings_on_startup(settings)
