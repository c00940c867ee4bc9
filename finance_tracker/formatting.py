"""
Display formatting for the single supported locale (id-ID, Rupiah).

Amounts are shown without fraction digits and with "." as the thousands
separator, the way the dashboard's users write them.
"""

from datetime import datetime, tzinfo
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

from finance_tracker.stats.engine import MONTH_NAMES, local_date

Number = Union[Decimal, int, float]


def _to_decimal(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _group_thousands(whole: int) -> str:
    return f"{whole:,}".replace(",", ".")


def format_currency(value: Number) -> str:
    """Format as Rupiah, e.g. "Rp 1.500.000"."""
    amount = _to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}Rp {_group_thousands(abs(int(amount)))}"


def format_short(value: Number) -> str:
    """Compact chart label: 1.5jt, 500rb, 999."""
    amount = _to_decimal(value)
    if amount >= 1_000_000:
        return f"{(amount / 1_000_000).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)}jt"
    if amount >= 1_000:
        return f"{(amount / 1_000).quantize(Decimal('1'), rounding=ROUND_HALF_UP)}rb"
    if amount == amount.to_integral_value():
        return str(int(amount))
    return str(amount.normalize())


def format_amount_input(text: str) -> str:
    """Group the digits of a form input: "1500000" -> "1.500.000"."""
    digits = "".join(ch for ch in text if ch.isdigit())
    if not digits:
        return ""
    return _group_thousands(int(digits))


def parse_amount_input(text: str) -> Decimal:
    """
    Parse an amount typed into a form.

    Accepts "1.500.000" (thousands separators) as well as plain digits.
    A single "," is read as the decimal separator.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("amount required")
    cleaned = text.strip().replace("Rp", "").replace(" ", "").replace(".", "")
    cleaned = cleaned.replace(",", ".")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError("amount invalid") from e
    if not amount.is_finite():
        raise ValueError("amount invalid")
    if amount < 0:
        raise ValueError("amount must be non-negative")
    return amount


def format_date(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Long Indonesian date, e.g. "10 Maret 2024"."""
    day = local_date(value, tz)
    return f"{day.day} {MONTH_NAMES[day.month - 1]} {day.year}"
