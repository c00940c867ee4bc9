"""
Tests for configuration and backend selection

Every test runs in an empty temp directory so a developer's .env file
does not leak in.
"""

import pytest
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from finance_tracker.config import (
    AppSettings,
    LocalStoreSettings,
    Settings,
    remote_store_configured,
    validate_all_settings,
)
from finance_tracker.orchestrator import create_app_components, select_backend
from finance_tracker.services.storage import (
    GoogleSheetsTransactionBackend,
    LocalTransactionBackend,
    StorageBackend,
)

ENV_VARS = [
    "GOOGLE_SHEETS_CREDENTIALS_PATH",
    "GOOGLE_SHEETS_SPREADSHEET_ID",
    "LOCAL_STORE_DATA_DIR",
    "APP_TIMEZONE",
    "APP_DEBUG_MODE",
    "ACCESS_GATE_PASSWORD",
    "ACCESS_GATE_SESSION_MINUTES",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def credentials(tmp_path, monkeypatch):
    path = tmp_path / "service-account.json"
    path.write_text("{}")
    monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(path))
    monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-id")
    return path


class TestSettings:
    """Tests for individual settings sections."""

    def test_local_defaults(self):
        local = LocalStoreSettings()
        assert local.transactions_key == "kedjora_transactions"
        assert local.invoices_key == "kedjora_invoices"

    def test_timezone(self, monkeypatch):
        monkeypatch.setenv("APP_TIMEZONE", "Asia/Jakarta")
        assert AppSettings().tzinfo == ZoneInfo("Asia/Jakarta")

    def test_unset_timezone_is_system_local(self):
        assert AppSettings().tzinfo is None

    def test_unknown_timezone_rejected(self, monkeypatch):
        monkeypatch.setenv("APP_TIMEZONE", "Mars/Olympus")
        with pytest.raises(ValidationError):
            AppSettings()


class TestBackendSelection:
    """Tests for choosing the remote or local backend."""

    def test_unconfigured_is_local(self):
        settings = Settings()
        assert remote_store_configured(settings) is False
        assert select_backend(settings) == StorageBackend.LOCAL

    def test_missing_credentials_file_is_local(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(tmp_path / "nope.json"))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-id")
        assert select_backend(Settings()) == StorageBackend.LOCAL

    def test_configured_is_remote(self, credentials):
        assert select_backend(Settings()) == StorageBackend.GOOGLE_SHEETS

    def test_validate_all_settings(self):
        results = validate_all_settings(Settings())
        assert results["google_sheets"] is False
        assert "google_sheets_error" in results
        assert results["local_store"] is True
        assert results["app"] is True


class TestCreateAppComponents:
    """Tests for wiring the stores."""

    def test_local_wiring(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOCAL_STORE_DATA_DIR", str(tmp_path / "data"))
        components = create_app_components(Settings())

        assert components.backend == StorageBackend.LOCAL
        assert isinstance(components.transactions.backend, LocalTransactionBackend)
        assert components.transactions.backend.path == tmp_path / "data" / "kedjora_transactions.json"
        assert components.invoices.entity_type == "invoice"

    def test_remote_wiring_is_lazy(self, credentials):
        """Building the Sheets backends does not contact the API."""
        components = create_app_components(Settings())
        assert components.backend == StorageBackend.GOOGLE_SHEETS
        assert isinstance(components.transactions.backend, GoogleSheetsTransactionBackend)

    def test_forced_backend(self, credentials):
        components = create_app_components(Settings(), backend=StorageBackend.LOCAL)
        assert isinstance(components.transactions.backend, LocalTransactionBackend)

    def test_access_gate_uses_state(self):
        components = create_app_components(Settings())
        state = {}
        gate = components.access_gate(state)
        assert gate.login("kedjora123") is True
        assert components.access_gate(state).is_authenticated() is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
