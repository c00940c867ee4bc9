"""
Configuration Management for the Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here and resolved once at
startup. Components never read the environment themselves; they receive the
settings (or the backends built from them) as constructor parameters.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Remote tabular store (Google Sheets) configuration."""

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
        min_length=1,
        description="ID of the spreadsheet holding both tables"
    )

    # One worksheet per logical table
    transactions_sheet_name: str = Field(
        default="transactions",
        description="Name of the sheet for transactions"
    )
    invoices_sheet_name: str = Field(
        default="invoices",
        description="Name of the sheet for invoices"
    )

    @property
    def credentials_available(self) -> bool:
        return Path(self.credentials_path).is_file()


class LocalStoreSettings(BaseSettings):
    """Local fallback store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOCAL_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".data"),
        description="Directory holding one JSON blob per entity kind"
    )
    transactions_key: str = Field(
        default="kedjora_transactions",
        description="Logical name of the transactions blob"
    )
    invoices_key: str = Field(
        default="kedjora_invoices",
        description="Logical name of the invoices blob"
    )


class AccessGateSettings(BaseSettings):
    """
    Password gate configuration.

    The gate is a cosmetic client-side check, not a security boundary.
    """

    model_config = SettingsConfigDict(
        env_prefix="ACCESS_GATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    password: str = Field(
        default="kedjora123",
        min_length=1,
        description="Shared secret compared against user input"
    )
    session_minutes: int = Field(
        default=10,
        ge=1,
        description="How long a successful login stays valid"
    )
    recheck_seconds: int = Field(
        default=30,
        ge=1,
        description="How often the UI re-checks session expiry"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug logging"
    )
    timezone: Optional[str] = Field(
        default=None,
        description="IANA zone used for calendar math (unset = system local)"
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Reject zone names the tz database does not know."""
        if v is None or not v.strip():
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        """Zone for calendar math; None means the system local zone."""
        return ZoneInfo(self.timezone) if self.timezone else None


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

    # Sub-settings are loaded lazily so the remote store may stay unconfigured

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def local_store(self) -> LocalStoreSettings:
        return LocalStoreSettings()

    @property
    def access_gate(self) -> AccessGateSettings:
        return AccessGateSettings()

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


def remote_store_configured(settings: Settings) -> bool:
    """
    Decide whether the remote backend can be used.

    True only when the Google Sheets settings load and the credentials
    file exists on disk.
    """
    try:
        sheets = settings.google_sheets
    except ValidationError:
        return False
    return sheets.credentials_available


def validate_all_settings(settings: Optional[Settings] = None) -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for every failing section.
    """
    results = {}
    settings = settings or get_settings()

    sections = {
        "google_sheets": lambda: settings.google_sheets,
        "local_store": lambda: settings.local_store,
        "access_gate": lambda: settings.access_gate,
        "app": lambda: settings.app,
    }
    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except ValidationError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    if results["google_sheets"] and not remote_store_configured(settings):
        results["google_sheets"] = False
        results["google_sheets_error"] = "credentials file not found"

    return results
