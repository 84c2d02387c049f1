"""
Configuration Management for Finance Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see which storage backend is in use and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_STORAGE_KEY = "financeTrackerState_enhanced_en"


class LedgerSettings(BaseSettings):
    """Ledger behaviour: currency display and validation thresholds."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    currency_symbol: str = Field(
        default="₹",
        min_length=1,
        max_length=5,
        description="Currency glyph prefixed to formatted amounts"
    )
    digit_grouping: str = Field(
        default="indian",
        pattern="^(indian|western)$",
        description="Thousands grouping style for formatted amounts"
    )

    # Warning thresholds (never block a command)
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a transaction date can be"
    )
    max_transaction_amount: float = Field(
        default=10_000_000.0,
        gt=0,
        description="Amount above which a transaction is flagged as unusual"
    )


class StorageSettings(BaseSettings):
    """Persistence backend configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json_file",
        pattern="^(json_file|memory|google_sheets)$",
        description="Key-value store used to persist the ledger"
    )
    data_path: str = Field(
        default="ledger_data.json",
        description="Path of the JSON file used by the json_file backend"
    )
    storage_key: str = Field(
        default=DEFAULT_STORAGE_KEY,
        min_length=1,
        description="Fixed key under which the ledger snapshot is stored"
    )


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )
    store_sheet_name: str = Field(
        default="LedgerStore",
        description="Name of the key/value worksheet"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


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

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


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

    # Sub-settings are loaded lazily so that an unused backend
    # (e.g. Google Sheets) does not need to be configured.

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for each group that failed to load.
    Google Sheets is only checked when it is the selected backend.
    """
    results = {}

    settings = get_settings()
    groups = ["ledger", "storage", "app"]

    try:
        if settings.storage.backend == "google_sheets":
            groups.append("google_sheets")
    except Exception:
        pass

    for name in groups:
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
