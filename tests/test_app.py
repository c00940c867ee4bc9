"""
Tests for the Streamlit pages

The app runs headless through Streamlit's AppTest against a local store
in a temp directory. The access gate is opened by seeding session state.
"""

import asyncio
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import streamlit as st
from streamlit.testing.v1 import AppTest

from finance_tracker.config import get_settings
from finance_tracker.models import TransactionDraft
from finance_tracker.services.storage import LocalInvoiceBackend, LocalTransactionBackend
from finance_tracker.session import EXPIRY_KEY

APP_PATH = str(Path(__file__).resolve().parent.parent / "app" / "main.py")


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
    monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
    monkeypatch.setenv("LOCAL_STORE_DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    st.cache_resource.clear()
    yield tmp_path / "data"
    get_settings.cache_clear()
    st.cache_resource.clear()


def _open_app(page: str) -> AppTest:
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state[EXPIRY_KEY] = datetime.now(timezone.utc) + timedelta(minutes=10)
    at.run()
    at.sidebar.radio[0].set_value(page).run()
    return at


class TestDeleteConfirmation:
    """Deleting from the history page takes two clicks."""

    def test_first_click_only_asks(self, data_dir):
        backend = LocalTransactionBackend(data_dir, "kedjora_transactions")
        tx = asyncio.run(
            backend.insert(
                TransactionDraft(
                    amount=Decimal("25000"),
                    description="Makan siang",
                    type="expense",
                    category="Makanan",
                )
            )
        )

        at = _open_app("🕘 Riwayat")
        assert not at.exception

        at.button(key=f"delete_tx_{tx.id}").click().run()
        assert [w.value for w in at.warning] == ["Hapus transaksi ini?"]
        assert [r.id for r in asyncio.run(backend.fetch_all())] == [tx.id]

        at.button(key=f"confirm_tx_{tx.id}").click().run()
        assert not at.exception
        assert asyncio.run(backend.fetch_all()) == []

    def test_cancel_keeps_record(self, data_dir):
        backend = LocalTransactionBackend(data_dir, "kedjora_transactions")
        tx = asyncio.run(
            backend.insert(
                TransactionDraft(
                    amount=Decimal("10000"),
                    description="Parkir",
                    type="expense",
                    category="Transport",
                )
            )
        )

        at = _open_app("🕘 Riwayat")
        at.button(key=f"delete_tx_{tx.id}").click().run()
        at.button(key=f"cancel_tx_{tx.id}").click().run()

        assert len(at.warning) == 0
        assert [r.id for r in asyncio.run(backend.fetch_all())] == [tx.id]


class TestCreateInvoiceForm:
    """Invalid invoice input is reported, not raised."""

    def test_overlong_description_shows_warning(self, data_dir):
        at = _open_app("🧾 Invoice")

        next(w for w in at.text_input if w.label == "Keterangan").input("x" * 501)
        next(w for w in at.text_input if w.label == "Jumlah (Rp)").input("1000")
        next(b for b in at.button if b.label == "Buat").click().run()

        assert not at.exception
        assert "Keterangan terlalu panjang atau jumlah tidak valid." in [
            w.value for w in at.warning
        ]
        backend = LocalInvoiceBackend(data_dir, "kedjora_invoices")
        assert asyncio.run(backend.fetch_all()) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
