"""
Tests for the Finance Tracker data models

Test strategy:
1. Unit tests for models, the engine and formatting
2. Store and backend tests against a temp directory or an in-test fake sheet
3. No real API calls in tests
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import TypeAdapter, ValidationError

from finance_tracker.models import (
    CATEGORIES,
    AllPeriods,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Invoice,
    InvoiceDraft,
    MonthPeriod,
    PeriodFilter,
    Transaction,
    TransactionDraft,
    TransactionType,
    YearPeriod,
    categories_for,
    coerce_amount,
)


class TestRecordModels:
    """Tests for stored records and drafts."""

    def test_transaction_parses_string_amount(self):
        """Backends may return numeric-as-string."""
        tx = Transaction(
            id="abc",
            amount="1500000",
            description="Gaji Maret",
            date="2024-03-10T08:00:00Z",
            type="income",
            category="Gaji",
        )
        assert tx.amount == Decimal("1500000")
        assert tx.type == TransactionType.INCOME
        assert tx.date.tzinfo is not None

    def test_transaction_accepts_unknown_category(self):
        """Category vocabulary is a UI concern only."""
        tx = Transaction(
            id="abc",
            amount=10,
            description="Misc",
            date=datetime(2024, 1, 1),
            type="expense",
            category="Parkir",
        )
        assert tx.category == "Parkir"

    def test_transaction_is_immutable(self):
        """Records are never mutated after creation."""
        tx = Transaction(
            id="abc",
            amount=10,
            description="Misc",
            date=datetime(2024, 1, 1),
            type="expense",
        )
        with pytest.raises(ValidationError):
            tx.amount = Decimal(20)

    def test_invalid_type_rejected(self):
        """Type is one of income/expense."""
        with pytest.raises(ValidationError):
            Transaction(
                id="abc",
                amount=10,
                description="Misc",
                date=datetime(2024, 1, 1),
                type="transfer",
            )

    def test_draft_requires_description(self):
        """Empty descriptions are stopped at the draft boundary."""
        with pytest.raises(ValidationError):
            TransactionDraft(amount=Decimal("10"), description="   ", type="expense")

    def test_draft_rejects_negative_amount(self):
        """Amounts are non-negative."""
        with pytest.raises(ValidationError):
            TransactionDraft(amount=Decimal("-1"), description="x", type="expense")

    def test_draft_defaults_date_to_now(self):
        """Creation time is the default date."""
        before = datetime.now(timezone.utc)
        draft = TransactionDraft(amount=Decimal("10"), description="x", type="income")
        assert draft.date >= before

    def test_invoice_draft_number_format(self):
        """Invoice numbers follow INV-<year>-<seq>."""
        draft = InvoiceDraft(
            invoice_number="INV-2025-001",
            description="Website",
            amount=Decimal("2500000"),
        )
        assert draft.invoice_number == "INV-2025-001"
        with pytest.raises(ValidationError):
            InvoiceDraft(invoice_number="2025-1", description="x", amount=Decimal(1))

    def test_invoice_amount_coercion(self):
        """Invoices coerce amounts like transactions."""
        inv = Invoice(
            id="i1",
            invoice_number="INV-2025-001",
            description="Website",
            amount=2500000.0,
            date="2025-01-05T00:00:00+07:00",
        )
        assert inv.amount == Decimal("2500000.0")


class TestCoerceAmount:
    """Tests for numeric coercion of wire values."""

    def test_float_goes_through_str(self):
        assert coerce_amount(0.1) == Decimal("0.1")

    def test_string_is_stripped(self):
        assert coerce_amount(" 42 ") == Decimal("42")

    @pytest.mark.parametrize("value", ["", None, True, "abc"])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            coerce_amount(value)


class TestCategories:
    """Tests for the category vocabulary."""

    def test_both_types_have_fallback(self):
        for tx_type in TransactionType:
            assert "Lainnya" in CATEGORIES[tx_type]

    def test_categories_for_accepts_string(self):
        assert categories_for("expense")[0] == "Makanan"
        assert categories_for(TransactionType.INCOME)[0] == "Project"


class TestPeriodFilter:
    """Tests for the tagged period filter."""

    def test_discriminated_parsing(self):
        """The kind tag selects the variant."""
        adapter = TypeAdapter(PeriodFilter)
        assert adapter.validate_python({"kind": "all"}) == AllPeriods()
        assert adapter.validate_python({"kind": "year", "year": 2024}) == YearPeriod(year=2024)
        assert adapter.validate_python(
            {"kind": "month", "year": 2024, "month": 2}
        ) == MonthPeriod(year=2024, month=2)

    def test_month_is_zero_indexed(self):
        """Month index is in [0, 11]."""
        MonthPeriod(year=2024, month=0)
        MonthPeriod(year=2024, month=11)
        with pytest.raises(ValidationError):
            MonthPeriod(year=2024, month=12)

    def test_filters_are_hashable(self):
        """Frozen filters can be cache keys."""
        assert len({YearPeriod(year=2024), YearPeriod(year=2024)}) == 1


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            description="Transaction added",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        event = AuditEventBuilder.load_failed("transaction", "boom")
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "load_failed"
        assert log_dict["severity"] == "error"
        assert log_dict["error_message"] == "boom"

    def test_record_removed_reports_found(self):
        event = AuditEventBuilder.record_removed("invoice", "inv-1", found=False)
        assert event.entity_id == "inv-1"
        assert event.details == {"found": False}
        assert event.is_user_action is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
