"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env files.
Validates fields and provides typed access to connection settings.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    Optional:
        FAUNA_SECRET: Key or token used to authenticate requests
        FAUNA_DOMAIN: Host of the REST service
        FAUNA_SCHEME: http or https
        FAUNA_PORT: Port, omitted from the URL when unset
        FAUNA_API_VERSION: API version path prefix
        FAUNA_TIMEOUT: Request timeout in seconds
        FAUNA_MAX_RETRIES: Connection attempts before giving up
        LOG_LEVEL: Logging level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    FAUNA_SECRET: str | None = Field(default=None, description="Fauna key or token secret")
    FAUNA_DOMAIN: str = Field(default="rest.fauna.org", description="Service host")
    FAUNA_SCHEME: Literal["http", "https"] = Field(default="https", description="URL scheme")
    FAUNA_PORT: int | None = Field(default=None, ge=1, le=65535, description="Service port")
    FAUNA_API_VERSION: str = Field(default="v1", description="API version path prefix")

    FAUNA_TIMEOUT: float = Field(default=60.0, gt=0.0, description="Request timeout in seconds")
    FAUNA_MAX_RETRIES: int = Field(
        default=3, ge=1, le=10, description="Connection attempts per request"
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )

    @field_validator("FAUNA_DOMAIN")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        """Reject domains that carry a scheme or path."""
        v = v.strip()
        if not v or "/" in v:
            raise ValueError("FAUNA_DOMAIN must be a bare host name (no scheme or path)")
        return v

    @field_validator("FAUNA_API_VERSION")
    @classmethod
    def strip_version_slashes(cls, v: str) -> str:
        """Normalize the version prefix to have no surrounding slashes."""
        return v.strip("/")

    @property
    def base_url(self) -> str:
        """Base URL every reference is resolved against."""
        host = self.FAUNA_DOMAIN
        if self.FAUNA_PORT is not None:
            host = f"{host}:{self.FAUNA_PORT}"
        return f"{self.FAUNA_SCHEME}://{host}/{self.FAUNA_API_VERSION}/"

    def redacted_display(self) -> dict[str, str | int | float | None]:
        """Return settings with the secret redacted for display."""
        secret = self.FAUNA_SECRET
        if secret is not None:
            secret = f"{secret[:4]}...{secret[-4:]}" if len(secret) > 12 else "***"

        return {
            "FAUNA_SECRET": secret,
            "FAUNA_DOMAIN": self.FAUNA_DOMAIN,
            "FAUNA_SCHEME": self.FAUNA_SCHEME,
            "FAUNA_PORT": self.FAUNA_PORT,
            "FAUNA_API_VERSION": self.FAUNA_API_VERSION,
            "FAUNA_TIMEOUT": self.FAUNA_TIMEOUT,
            "FAUNA_MAX_RETRIES": self.FAUNA_MAX_RETRIES,
            "LOG_LEVEL": self.LOG_LEVEL,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
