"""
Aggregation Engine

DESIGN DECISION: Every derived view is a PURE function of its inputs.
The dashboard recomputes all of them on each rerun; nothing is patched
incrementally and correctness never depends on caching.

Timezone handling is explicit. Calendar math (year, month, day buckets)
uses the record's local date:
- aware timestamps are converted to `tz` first (None = system local zone)
- naive timestamps are taken as local wall time already

This keeps a transaction stored as 2024-03-31T18:00Z in April for a
Jakarta user, consistently across filters, series and invoice numbering.
"""

import calendar
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, tzinfo
from decimal import Decimal
from typing import Optional, TypeVar

from finance_tracker.models.records import (
    Invoice,
    InvoiceDraft,
    Transaction,
    TransactionType,
)
from finance_tracker.models.stats import (
    AllPeriods,
    CategoryShare,
    DashboardView,
    FinancialSummary,
    InvoiceSummary,
    PeriodFilter,
    SeriesBucket,
    YearPeriod,
)

T = TypeVar("T", Transaction, Invoice)

MONTH_NAMES = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]
SHORT_MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "Mei", "Jun",
    "Jul", "Ags", "Sep", "Okt", "Nov", "Des",
]
# Monday first, matching date.weekday()
SHORT_WEEKDAY_NAMES = ["Sen", "Sel", "Rab", "Kam", "Jum", "Sab", "Min"]

TRAILING_DAYS = 7
ZERO = Decimal(0)


# =============================================================================
# CALENDAR HELPERS
# =============================================================================

def local_date(value: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar date of a timestamp in the local zone."""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(tz).date()


def local_today(tz: Optional[tzinfo] = None) -> date:
    return datetime.now(tz).date() if tz else date.today()


def days_in_month(year: int, month: int) -> int:
    """Day count of a month. `month` is 0-indexed."""
    return calendar.monthrange(year, month + 1)[1]


def _in_period(day: date, period: PeriodFilter) -> bool:
    if isinstance(period, AllPeriods):
        return True
    if isinstance(period, YearPeriod):
        return day.year == period.year
    return day.year == period.year and day.month == period.month + 1


# =============================================================================
# FILTERS & SUMMARIES
# =============================================================================

def filter_by_period(
    records: Iterable[T],
    period: PeriodFilter,
    tz: Optional[tzinfo] = None,
) -> list[T]:
    """Keep the records whose local calendar date falls in the period."""
    return [r for r in records if _in_period(local_date(r.date, tz), period)]


def summarize(transactions: Iterable[Transaction]) -> FinancialSummary:
    """Total income, total expense and their difference."""
    income = ZERO
    expense = ZERO
    for tx in transactions:
        if tx.type == TransactionType.INCOME:
            income += tx.amount
        elif tx.type == TransactionType.EXPENSE:
            expense += tx.amount

    return FinancialSummary(
        total_income=income,
        total_expense=expense,
        balance=income - expense,
    )


def available_years(
    transactions: Iterable[Transaction],
    invoices: Iterable[Invoice],
    current_year: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> list[int]:
    """
    Years present in either collection, newest first.

    Never empty: with no records at all the current year is returned so
    the year picker always has an option.
    """
    years = {local_date(r.date, tz).year for r in transactions}
    years.update(local_date(r.date, tz).year for r in invoices)
    if not years:
        years.add(current_year or local_today(tz).year)
    return sorted(years, reverse=True)


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryShare]:
    """
    Expense totals per category, largest first.

    Categories are grouped by exact string. Ties keep the order in which
    categories were first seen.
    """
    totals: dict[str, Decimal] = {}
    for tx in transactions:
        if tx.type != TransactionType.EXPENSE:
            continue
        totals[tx.category] = totals.get(tx.category, ZERO) + tx.amount

    grand_total = sum(totals.values(), ZERO)
    shares = [
        CategoryShare(
            category=category,
            total=total,
            percentage=float(total / grand_total * 100) if grand_total > 0 else 0.0,
        )
        for category, total in totals.items()
    ]
    return sorted(shares, key=lambda s: s.total, reverse=True)


def invoice_summary(
    invoices: Iterable[Invoice],
    period: PeriodFilter,
    tz: Optional[tzinfo] = None,
) -> InvoiceSummary:
    """Count and total of the invoices dated in the period."""
    matching = filter_by_period(invoices, period, tz)
    return InvoiceSummary(
        count=len(matching),
        total=sum((inv.amount for inv in matching), ZERO),
    )


# =============================================================================
# CHART SERIES
# =============================================================================

def build_series(
    transactions: Iterable[Transaction],
    period: PeriodFilter,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> list[SeriesBucket]:
    """
    Zero-filled income/expense buckets for the bar chart.

    - all:   the 7 days ending today, oldest first
    - year:  12 months, January first
    - month: every day of the month, 1 first
    """
    if isinstance(period, AllPeriods):
        end = today or local_today(tz)
        keys = [end - timedelta(days=offset) for offset in range(TRAILING_DAYS - 1, -1, -1)]
        labels = [SHORT_WEEKDAY_NAMES[day.weekday()] for day in keys]

        def key_of(day: date):
            return day
    elif isinstance(period, YearPeriod):
        keys = list(range(1, 13))
        labels = list(SHORT_MONTH_NAMES)

        def key_of(day: date):
            return day.month if day.year == period.year else None
    else:
        keys = list(range(1, days_in_month(period.year, period.month) + 1))
        labels = [str(day) for day in keys]

        def key_of(day: date):
            if day.year == period.year and day.month == period.month + 1:
                return day.day
            return None

    income = {key: ZERO for key in keys}
    expense = {key: ZERO for key in keys}
    for tx in transactions:
        key = key_of(local_date(tx.date, tz))
        if key not in income:
            continue
        if tx.type == TransactionType.INCOME:
            income[key] += tx.amount
        elif tx.type == TransactionType.EXPENSE:
            expense[key] += tx.amount

    return [
        SeriesBucket(label=label, income=income[key], expense=expense[key])
        for key, label in zip(keys, labels)
    ]


def max_series_value(series: Iterable[SeriesBucket]) -> Decimal:
    """Largest bar in the series, never below 1 so it can divide."""
    values = [Decimal(1)]
    for bucket in series:
        values.extend((bucket.income, bucket.expense))
    return max(values)


# =============================================================================
# LABELS
# =============================================================================

def period_label(period: PeriodFilter) -> str:
    if isinstance(period, AllPeriods):
        return "Semua Waktu"
    if isinstance(period, YearPeriod):
        return f"Tahun {period.year}"
    return f"{MONTH_NAMES[period.month]} {period.year}"


def series_title(period: PeriodFilter) -> str:
    """Heading shown above the bar chart."""
    if isinstance(period, AllPeriods):
        return f"{TRAILING_DAYS} Hari Terakhir"
    if isinstance(period, YearPeriod):
        return f"Bulanan {period.year}"
    return period_label(period)


# =============================================================================
# INVOICES
# =============================================================================

def generate_invoice_number(
    invoices: Iterable[Invoice],
    invoice_date: datetime,
    tz: Optional[tzinfo] = None,
) -> str:
    """
    Next number in the invoice's year: INV-<year>-<seq>.

    <seq> is 1 + the invoices already dated in that year, zero-padded to
    three digits. Two writers computing a number at the same time get the
    same value.
    """
    year = local_date(invoice_date, tz).year
    existing = len(filter_by_period(invoices, YearPeriod(year=year), tz))
    return f"INV-{year}-{existing + 1:03d}"


def income_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Transactions an invoice may be pre-filled from."""
    return [tx for tx in transactions if tx.type == TransactionType.INCOME]


def invoice_draft_from_transaction(
    transaction: Transaction,
    invoices: Sequence[Invoice],
    tz: Optional[tzinfo] = None,
) -> InvoiceDraft:
    """
    Snapshot an income transaction into a new invoice draft.

    Only description, amount and date are copied; no link back to the
    transaction is kept.
    """
    return InvoiceDraft(
        invoice_number=generate_invoice_number(invoices, transaction.date, tz),
        description=transaction.description,
        amount=transaction.amount,
        date=transaction.date,
    )


def invoice_years(
    invoices: Iterable[Invoice],
    current_year: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> list[int]:
    """Years offered in the invoice view, always including the current one."""
    years = {local_date(inv.date, tz).year for inv in invoices}
    years.add(current_year or local_today(tz).year)
    return sorted(years, reverse=True)


def invoices_in_year(
    invoices: Iterable[Invoice],
    year: int,
    tz: Optional[tzinfo] = None,
) -> list[Invoice]:
    """Invoices of one year, oldest first."""
    matching = filter_by_period(invoices, YearPeriod(year=year), tz)
    return sorted(matching, key=lambda inv: inv.date.timestamp())


# =============================================================================
# DASHBOARD
# =============================================================================

def build_dashboard(
    transactions: Sequence[Transaction],
    invoices: Sequence[Invoice],
    period: PeriodFilter,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> DashboardView:
    """
    Compute every dashboard value for one render.

    The chart always looks at the full collection (the "all" chart shows
    the last 7 days regardless of period); summary and category breakdown
    use the period-filtered transactions.
    """
    filtered = filter_by_period(transactions, period, tz)
    series = build_series(transactions, period, today=today, tz=tz)
    today = today or local_today(tz)

    return DashboardView(
        period=period,
        period_label=period_label(period),
        series_title=series_title(period),
        summary=summarize(filtered),
        series=series,
        max_series_value=max_series_value(series),
        categories=category_breakdown(filtered),
        invoice_summary=invoice_summary(invoices, period, tz),
        available_years=available_years(
            transactions, invoices, current_year=today.year, tz=tz
        ),
    )
