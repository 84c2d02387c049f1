"""Configuration package."""

from finance_ledger.config.settings import (
    DEFAULT_STORAGE_KEY,
    AppSettings,
    GoogleSheetsSettings,
    LedgerSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "AppSettings",
    "GoogleSheetsSettings",
    "LedgerSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
