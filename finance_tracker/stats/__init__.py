"""Aggregation engine package."""

from finance_tracker.stats.engine import (
    MONTH_NAMES,
    available_years,
    build_dashboard,
    build_series,
    category_breakdown,
    days_in_month,
    filter_by_period,
    generate_invoice_number,
    income_transactions,
    invoice_draft_from_transaction,
    invoice_summary,
    invoice_years,
    invoices_in_year,
    local_date,
    local_today,
    max_series_value,
    period_label,
    series_title,
    summarize,
)

__all__ = [
    "MONTH_NAMES",
    "available_years",
    "build_dashboard",
    "build_series",
    "category_breakdown",
    "days_in_month",
    "filter_by_period",
    "generate_invoice_number",
    "income_transactions",
    "invoice_draft_from_transaction",
    "invoice_summary",
    "invoice_years",
    "invoices_in_year",
    "local_date",
    "local_today",
    "max_series_value",
    "period_label",
    "series_title",
    "summarize",
]
