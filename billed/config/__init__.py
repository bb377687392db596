"""Configuration package."""

from billed.config.settings import (
    AppSettings,
    SessionSettings,
    Settings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "SessionSettings",
    "Settings",
    "StoreSettings",
    "get_settings",
    "validate_all_settings",
]
