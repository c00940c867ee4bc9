"""Shared fixtures for the finance tracker tests."""

from datetime import datetime
from decimal import Decimal
from itertools import count

import pytest

from finance_tracker.models.records import Invoice, Transaction, TransactionType


@pytest.fixture
def make_tx():
    """Factory for stored transactions with sequential ids."""
    ids = count(1)

    def _make(amount, tx_type="expense", category="Makanan", when=None, description=None):
        n = next(ids)
        return Transaction(
            id=f"tx-{n}",
            amount=Decimal(str(amount)),
            description=description or f"transaction {n}",
            date=when or datetime(2024, 3, 10, 12, 0),
            type=TransactionType(tx_type),
            category=category,
        )

    return _make


@pytest.fixture
def make_invoice():
    """Factory for stored invoices with sequential ids."""
    ids = count(1)

    def _make(amount, when, number=None, description=None):
        n = next(ids)
        return Invoice(
            id=f"inv-{n}",
            invoice_number=number or f"INV-{when.year}-{n:03d}",
            description=description or f"invoice {n}",
            amount=Decimal(str(amount)),
            date=when,
        )

    return _make
