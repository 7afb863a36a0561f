"""
Tests for application configuration.
"""

import os
from unittest.mock import patch

import pytest


class TestAppModeEnum:
    """Tests for AppMode enum."""

    def test_app_mode_values(self):
        from config import AppMode

        assert AppMode.DEV.value == "dev"
        assert AppMode.PROD.value == "prod"

    def test_app_mode_from_string(self):
        from config import AppMode

        assert AppMode("dev") == AppMode.DEV
        assert AppMode("prod") == AppMode.PROD


class TestSettingsDefaults:
    """Tests for Settings default values."""

    def test_default_app_mode(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import AppMode, Settings

            settings = Settings(_env_file=None)
            assert settings.APP_MODE == AppMode.DEV

    def test_default_host_and_port(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import Settings

            settings = Settings(_env_file=None)
            assert settings.HOST == "0.0.0.0"
            assert settings.PORT == 5000

    def test_default_gemini_settings(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import Settings

            settings = Settings(_env_file=None)
            assert settings.GEMINI_API_KEY == ""
            assert settings.GEMINI_IMAGE_MODEL == "gemini-2.5-flash-image"
            assert settings.GEMINI_ASPECT_RATIO == "3:4"
            assert settings.HARD_STRICT_MODE is False

    def test_default_size_lock_range(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import Settings

            settings = Settings(_env_file=None)
            assert settings.SIZE_LOCK_MIN_BYTES == 1024 * 1024
            assert settings.SIZE_LOCK_MAX_BYTES == 3 * 1024 * 1024
            assert settings.SIZE_LOCK_START_WIDTH == 2800
            assert settings.SIZE_LOCK_START_QUALITY == 94


class TestSettingsFromEnv:
    """Tests for Settings loading from environment variables."""

    def test_app_mode_from_env(self):
        with patch.dict(os.environ, {"APP_MODE": "prod"}, clear=True):
            from config import AppMode, Settings

            settings = Settings(_env_file=None)
            assert settings.APP_MODE == AppMode.PROD

    def test_gemini_api_key_from_env(self):
        with patch.dict(os.environ, {"GEMINI_API_KEY": "test-key"}, clear=True):
            from config import Settings

            settings = Settings(_env_file=None)
            assert settings.GEMINI_API_KEY == "test-key"

    def test_size_lock_from_env(self):
        env_vars = {"SIZE_LOCK_MIN_BYTES": "500000", "SIZE_LOCK_MAX_BYTES": "900000"}
        with patch.dict(os.environ, env_vars, clear=True):
            from config import Settings

            settings = Settings(_env_file=None)
            assert settings.SIZE_LOCK_MIN_BYTES == 500000
            assert settings.SIZE_LOCK_MAX_BYTES == 900000


class TestCORSOrigins:
    """Tests for CORS origins configuration."""

    def test_default_allows_any_origin(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import Settings

            assert Settings(_env_file=None).CORS_ORIGINS == ["*"]

    def test_empty_origins_dev_mode(self):
        with patch.dict(os.environ, {"APP_MODE": "dev", "CORS_ALLOWED_ORIGINS": ""}, clear=True):
            from config import Settings

            origins = Settings(_env_file=None).CORS_ORIGINS
            assert "http://localhost:3000" in origins
            assert "http://localhost:5173" in origins

    def test_empty_origins_prod_mode(self):
        with patch.dict(os.environ, {"APP_MODE": "prod", "CORS_ALLOWED_ORIGINS": ""}, clear=True):
            from config import Settings

            assert Settings(_env_file=None).CORS_ORIGINS == []

    def test_custom_origins_with_spaces(self):
        env_vars = {
            "CORS_ALLOWED_ORIGINS": "https://example.com, https://studio.example.com ,",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            from config import Settings

            origins = Settings(_env_file=None).CORS_ORIGINS
            assert origins == ["https://example.com", "https://studio.example.com"]


class TestLogLevel:
    def test_log_level_follows_debug(self):
        from config import Settings

        assert Settings(_env_file=None, DEBUG=True).LOG_LEVEL == "DEBUG"
        assert Settings(_env_file=None, DEBUG=False).LOG_LEVEL == "INFO"


class TestValidateSettings:
    """Tests for fail-fast settings validation."""

    def test_debug_in_production_fails(self):
        from config import AppMode, Settings, _validate_settings

        with pytest.raises(ValueError, match="DEBUG=True in production"):
            _validate_settings(Settings(_env_file=None, APP_MODE=AppMode.PROD, DEBUG=True))

    def test_inverted_size_range_fails(self):
        from config import Settings, _validate_settings

        settings = Settings(_env_file=None, SIZE_LOCK_MIN_BYTES=5, SIZE_LOCK_MAX_BYTES=1)
        with pytest.raises(ValueError, match="must not exceed"):
            _validate_settings(settings)

    def test_non_positive_size_range_fails(self):
        from config import Settings, _validate_settings

        with pytest.raises(ValueError, match="must be positive"):
            _validate_settings(Settings(_env_file=None, SIZE_LOCK_MIN_BYTES=0))

    def test_missing_key_in_production_only_warns(self, caplog):
        from config import AppMode, Settings, _validate_settings

        settings = Settings(_env_file=None, APP_MODE=AppMode.PROD, GEMINI_API_KEY="")
        assert _validate_settings(settings) is settings
        assert "GEMINI_API_KEY is not set" in caplog.text

    def test_get_settings_is_cached(self):
        from config import get_settings

        assert get_settings() is get_settings()
