"""Configuration package."""

from finance_tracker.config.settings import (
    AccessGateSettings,
    AppSettings,
    GoogleSheetsSettings,
    LocalStoreSettings,
    Settings,
    get_settings,
    remote_store_configured,
    validate_all_settings,
)

__all__ = [
    "AccessGateSettings",
    "AppSettings",
    "GoogleSheetsSettings",
    "LocalStoreSettings",
    "Settings",
    "get_settings",
    "remote_store_configured",
    "validate_all_settings",
]
