"""Configuration package."""

from flowguide.config.settings import (
    AppSettings,
    CallSettings,
    Settings,
    StoreSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "CallSettings",
    "Settings",
    "StoreSettings",
    "get_settings",
    "validate_all_settings",
]
