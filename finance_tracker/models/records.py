"""
Core Record Models for the Finance Tracker

Two entity kinds are persisted: transactions and invoices.

DESIGN DECISION: Stored records are deliberately permissive. Required-field
checks live on the *draft* models that the presentation layer builds from
form input. Anything that reaches storage through another path is accepted
as-is, and the aggregation engine must cope with it (e.g. unknown categories).
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS & VOCABULARY
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money movement. Fixed at creation."""
    INCOME = "income"
    EXPENSE = "expense"


# Closed category vocabulary per type. Enforced by the UI only.
CATEGORIES: dict[TransactionType, tuple[str, ...]] = {
    TransactionType.INCOME: (
        "Project",
        "Gaji",
        "Bonus",
        "Investasi",
        "Lainnya",
    ),
    TransactionType.EXPENSE: (
        "Makanan",
        "Transport",
        "Internet",
        "Listrik",
        "Belanja",
        "Hiburan",
        "Kesehatan",
        "Pendidikan",
        "Lainnya",
    ),
}

FALLBACK_CATEGORY = "Lainnya"


def categories_for(tx_type: TransactionType) -> tuple[str, ...]:
    """Categories offered by the UI for a transaction type."""
    return CATEGORIES[TransactionType(tx_type)]


def coerce_amount(value) -> Decimal:
    """
    Parse an amount from whatever representation a backend returns.

    Remote stores may hand back numeric-as-string; the local blob stores
    pydantic's JSON form (a string). Floats go through str() so 0.1 stays 0.1.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("amount must be numeric")
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str) and value.strip():
        try:
            return Decimal(value.strip())
        except InvalidOperation as e:
            raise ValueError(f"amount must be numeric, got {value!r}") from e
    raise ValueError(f"amount must be numeric, got {value!r}")


# =============================================================================
# STORED RECORDS
# =============================================================================

class Transaction(BaseModel):
    """A single income or expense event."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque unique identifier")
    amount: Decimal = Field(..., description="Monetary value in IDR")
    description: str
    date: datetime = Field(..., description="When the transaction happened")
    type: TransactionType
    category: str = Field(
        default=FALLBACK_CATEGORY,
        description="Free category string; vocabulary is a UI concern"
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description="Backend creation timestamp, if the backend records one"
    )

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return coerce_amount(v)


class Invoice(BaseModel):
    """An internal billing record with a generated sequential number."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque unique identifier")
    invoice_number: str = Field(..., description="INV-<year>-<seq>")
    description: str
    amount: Decimal
    date: datetime
    created_at: Optional[datetime] = None

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return coerce_amount(v)


# =============================================================================
# DRAFTS (records without id)
# =============================================================================

class TransactionDraft(BaseModel):
    """
    A transaction about to be created.

    These are the checks the form boundary guarantees before calling
    the store: non-empty description and non-negative amount.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    amount: Decimal = Field(..., ge=0)
    description: str = Field(..., min_length=1, max_length=500)
    type: TransactionType
    category: str = Field(default=FALLBACK_CATEGORY, min_length=1)
    date: datetime = Field(default_factory=_utcnow)


class InvoiceDraft(BaseModel):
    """An invoice about to be created. The number is generated by the caller."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    invoice_number: str = Field(..., pattern=r"^INV-\d{4}-\d{3,}$")
    description: str = Field(..., min_length=1, max_length=500)
    amount: Decimal = Field(..., ge=0)
    date: datetime = Field(default_factory=_utcnow)
