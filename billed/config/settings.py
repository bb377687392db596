"""
Configuration Management for Billed Portal Core

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The remote store location, the session key and the logging level are the
only knobs the core has, and they are all read from the environment (or a
.env file) at startup.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Remote store (portal REST API) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BILLED_STORE_",
        extra="ignore"
    )

    base_url: str = Field(
        default="http://localhost:5678",
        description="Base URL of the portal API"
    )
    # None means calls run to completion, there is no client-side abort
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Optional HTTP timeout in seconds"
    )

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Routes are joined with a leading slash."""
        v = v.strip()
        if not v:
            raise ValueError("Store base URL cannot be empty")
        return v.rstrip("/")


class SessionSettings(BaseSettings):
    """Session store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BILLED_SESSION_",
        extra="ignore"
    )

    user_key: str = Field(
        default="user",
        min_length=1,
        description="Session store key holding the signed-in identity"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum level for diagnostic logging"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()

    @property
    def session(self) -> SessionSettings:
        return SessionSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry describing each failure.
    """
    results = {}

    settings = get_settings()

    for name in ("store", "session", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
