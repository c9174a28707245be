"""Tests for configuration management."""

import os
import tempfile
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from lifeplan.config import (
    Settings,
    get_global_settings,
    get_settings,
    reset_global_settings,
)


class TestSettings:
    """Test cases for Settings validation."""

    def test_secret_key_validation_works(self):
        """Test that SECRET_KEY validation rejects the placeholder."""
        with patch.dict(os.environ, {"SECRET_KEY": "valid-secret-123"}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.secret_key == "valid-secret-123"

        with patch.dict(
            os.environ,
            {"SECRET_KEY": "your-secret-key-here-change-in-production"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)
            assert "SECRET_KEY must be set to a secure value" in str(exc_info.value)

    def test_missing_secret_key_fails(self):
        """Test that missing SECRET_KEY causes failure."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)
            assert "SECRET_KEY" in str(exc_info.value)

    def test_app_env_validation_works(self):
        """Test that APP_ENV validation works correctly."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-123", "APP_ENV": "production"},
            clear=True,
        ):
            assert Settings(_env_file=None).app_env == "production"

        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-123", "APP_ENV": "staging"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)
            assert "APP_ENV must be one of" in str(exc_info.value)

    def test_log_level_is_upper_cased(self):
        """Test that LOG_LEVEL is validated and normalised."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-123", "LOG_LEVEL": "debug"},
            clear=True,
        ):
            assert Settings(_env_file=None).log_level == "DEBUG"

        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-123", "LOG_LEVEL": "VERBOSE"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)
            assert "LOG_LEVEL must be one of" in str(exc_info.value)

    def test_projection_and_export_defaults(self):
        """Test defaults of simulator-specific settings."""
        with patch.dict(os.environ, {"SECRET_KEY": "valid-secret-123"}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.max_horizon_years == 121
            assert settings.csv_include_bom is True

    def test_projection_settings_from_environment(self):
        """Test that simulator settings are read from the environment."""
        env = {
            "SECRET_KEY": "valid-secret-123",
            "MAX_HORIZON_YEARS": "60",
            "CSV_INCLUDE_BOM": "false",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
            assert settings.max_horizon_years == 60
            assert settings.csv_include_bom is False

    def test_env_file_loading_works(self):
        """Test that .env file loading works correctly."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".env", delete=False) as f:
            f.write("SECRET_KEY=test-secret-from-file\n")
            f.write("APP_ENV=testing\n")
            f.write("MAX_HORIZON_YEARS=90\n")
            temp_env_file = f.name

        try:
            with patch.dict(os.environ, {}, clear=True):
                settings = get_settings(temp_env_file)
                assert settings.secret_key == "test-secret-from-file"
                assert settings.app_env == "testing"
                assert settings.max_horizon_years == 90
        finally:
            os.unlink(temp_env_file)


class TestGlobalSettings:
    """Test the cached global settings instance."""

    def test_global_settings_are_cached_until_reset(self):
        """Test that get_global_settings returns one instance until reset."""
        reset_global_settings()
        with patch.dict(os.environ, {"SECRET_KEY": "valid-secret-123"}, clear=True):
            first = get_global_settings()
            assert get_global_settings() is first
            reset_global_settings()
            assert get_global_settings() is not first
        reset_global_settings()
