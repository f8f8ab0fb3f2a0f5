"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from fauna.config import Settings, clear_settings_cache, get_settings


class TestSettings:
    """Tests for Settings loading and validation."""

    def test_settings_loads_from_env(self, mock_env_vars: dict[str, str]) -> None:
        settings = get_settings()

        assert settings.FAUNA_SECRET == "test-secret-0123456789"
        assert settings.FAUNA_DOMAIN == "db.example.test"
        assert settings.FAUNA_TIMEOUT == 5.0
        assert settings.FAUNA_MAX_RETRIES == 2
        assert settings.LOG_LEVEL == "DEBUG"

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.FAUNA_SECRET is None
        assert settings.FAUNA_DOMAIN == "rest.fauna.org"
        assert settings.FAUNA_SCHEME == "https"
        assert settings.FAUNA_PORT is None
        assert settings.FAUNA_MAX_RETRIES == 3
        assert settings.base_url == "https://rest.fauna.org/v1/"

    def test_base_url_includes_port(self) -> None:
        settings = Settings(
            _env_file=None,
            FAUNA_DOMAIN="localhost",
            FAUNA_SCHEME="http",
            FAUNA_PORT=8443,
            FAUNA_API_VERSION="/v2/",
        )

        assert settings.base_url == "http://localhost:8443/v2/"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"FAUNA_SCHEME": "ftp"},
            {"FAUNA_PORT": 0},
            {"FAUNA_TIMEOUT": 0},
            {"FAUNA_MAX_RETRIES": 0},
            {"FAUNA_DOMAIN": "https://rest.fauna.org"},
            {"FAUNA_DOMAIN": "  "},
        ],
    )
    def test_invalid_values_rejected(self, overrides: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)

    def test_secret_redacted(self, mock_env_vars: dict[str, str]) -> None:
        display = get_settings().redacted_display()

        assert display["FAUNA_SECRET"] == "test...6789"
        assert display["FAUNA_DOMAIN"] == "db.example.test"

    def test_short_secret_fully_masked(self) -> None:
        settings = Settings(_env_file=None, FAUNA_SECRET="short")
        assert settings.redacted_display()["FAUNA_SECRET"] == "***"

    def test_settings_cached_until_cleared(self, mock_env_vars: dict[str, str]) -> None:
        first = get_settings()
        assert get_settings() is first

        clear_settings_cache()
        assert get_settings() is not first
