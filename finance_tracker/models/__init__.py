"""
Data Models Package

This package contains all Pydantic models used in the finance tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.records import (
    CATEGORIES,
    FALLBACK_CATEGORY,
    Invoice,
    InvoiceDraft,
    Transaction,
    TransactionDraft,
    TransactionType,
    categories_for,
    coerce_amount,
)
from finance_tracker.models.stats import (
    AllPeriods,
    CategoryShare,
    DashboardView,
    FinancialSummary,
    InvoiceSummary,
    MonthPeriod,
    PeriodFilter,
    SeriesBucket,
    YearPeriod,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "CATEGORIES",
    "FALLBACK_CATEGORY",
    "Invoice",
    "InvoiceDraft",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "categories_for",
    "coerce_amount",
    # Period filter and derived views
    "AllPeriods",
    "CategoryShare",
    "DashboardView",
    "FinancialSummary",
    "InvoiceSummary",
    "MonthPeriod",
    "PeriodFilter",
    "SeriesBucket",
    "YearPeriod",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
