"""
Unit tests for Configuration Management

Tests settings defaults, environment overrides and validation.
"""
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.core.config import Settings, get_settings


class TestSettingsProperties:
    """Test Settings property methods"""

    def test_is_development(self):
        """Test is_development property"""
        with patch.dict("os.environ", {"ENVIRONMENT": "development"}):
            settings = Settings()
            assert settings.is_development is True

    def test_is_production(self):
        """Test is_production property"""
        with patch.dict("os.environ", {"ENVIRONMENT": "production"}):
            settings = Settings()
            assert settings.is_production is True

    def test_is_not_production_in_dev(self):
        """Test is_production returns False in development"""
        with patch.dict("os.environ", {"ENVIRONMENT": "development"}):
            settings = Settings()
            assert settings.is_production is False


class TestAnalyticsSettings:
    """Test analytics limits"""

    def test_defaults(self):
        """Test analytics defaults when nothing is set"""
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings()
            assert settings.analytics_max_rows == 50_000
            assert settings.session_max_history == 10
            assert settings.app_name == "QueryLens"

    def test_env_override(self):
        """Test limits are read from the environment"""
        with patch.dict("os.environ", {"ANALYTICS_MAX_ROWS": "500", "SESSION_MAX_HISTORY": "3"}):
            settings = Settings()
            assert settings.analytics_max_rows == 500
            assert settings.session_max_history == 3

    def test_limits_validated(self):
        """Test out-of-range limits are rejected"""
        with patch.dict("os.environ", {"ANALYTICS_MAX_ROWS": "0"}):
            with pytest.raises(ValidationError):
                Settings()


class TestSettingsValidation:
    """Test field validation"""

    def test_invalid_environment(self):
        with patch.dict("os.environ", {"ENVIRONMENT": "qa"}):
            with pytest.raises(ValidationError):
                Settings()

    def test_invalid_log_level(self):
        with patch.dict("os.environ", {"LOG_LEVEL": "VERBOSE"}):
            with pytest.raises(ValidationError):
                Settings()

    def test_cors_origins_from_string(self):
        """Test a comma-separated origin string is split"""
        settings = Settings(cors_origins="http://a.test, http://b.test")
        assert settings.cors_origins == ["http://a.test", "http://b.test"]


class TestGetSettings:
    """Test get_settings caching"""

    def test_cached(self):
        assert get_settings() is get_settings()
