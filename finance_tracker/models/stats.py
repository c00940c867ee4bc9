"""
Period Filter and Derived-View Models

The period filter is a tagged variant: exactly one of "all", "month" or
"year". Each variant is a frozen model so filters can be compared, hashed
and used as cache keys.
"""

from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# PERIOD FILTER
# =============================================================================

class AllPeriods(BaseModel):
    """No date restriction."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["all"] = "all"


class MonthPeriod(BaseModel):
    """A single calendar month. `month` is 0-indexed (0 = January)."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["month"] = "month"
    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=0, le=11)


class YearPeriod(BaseModel):
    """A single calendar year."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["year"] = "year"
    year: int = Field(..., ge=1, le=9999)


PeriodFilter = Annotated[
    Union[AllPeriods, MonthPeriod, YearPeriod],
    Field(discriminator="kind"),
]


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class FinancialSummary(BaseModel):
    """Totals over a set of transactions."""
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = Decimal(0)
    total_expense: Decimal = Decimal(0)
    balance: Decimal = Decimal(0)


class SeriesBucket(BaseModel):
    """One bar group of the income/expense chart."""
    model_config = ConfigDict(frozen=True)

    label: str
    income: Decimal = Decimal(0)
    expense: Decimal = Decimal(0)


class CategoryShare(BaseModel):
    """
    Expense total of one category and its share of all expenses.

    Unbounded: stored amounts are not checked for sign, so a negative
    expense can push other shares past 100.
    """
    model_config = ConfigDict(frozen=True)

    category: str
    total: Decimal
    percentage: float = Field(..., description="Share of the grand expense total")


class InvoiceSummary(BaseModel):
    """Count and sum of invoices in a period."""
    model_config = ConfigDict(frozen=True)

    count: int = Field(default=0, ge=0)
    total: Decimal = Decimal(0)


class DashboardView(BaseModel):
    """
    Every derived value the dashboard renders, computed in one pass.

    Rebuilt from scratch on every input change; nothing here is patched
    incrementally.
    """
    model_config = ConfigDict(frozen=True)

    period: PeriodFilter
    period_label: str
    series_title: str
    summary: FinancialSummary
    series: list[SeriesBucket]
    max_series_value: Decimal
    categories: list[CategoryShare]
    invoice_summary: InvoiceSummary
    available_years: list[int]
