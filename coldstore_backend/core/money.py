# core/money.py

"""
MONEY + QUANTITY NORMALIZERS

HARD RULES:
- Money is Decimal, quantized to 2dp, ROUND_HALF_UP (PKR, single currency).
- Quantities are whole integer units (no fractional boxes).
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from core.exceptions import ValidationError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest single cash amount accepted from the API.
MAX_AMOUNT = Decimal("999999999")


def money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    try:
        value = Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid amount: {v!r}") from exc
    if not value.is_finite():
        raise ValidationError(f"Invalid amount: {v!r}")
    return value


def to_int_qty(value, *, field: str = "quantity") -> int:
    """
    Quantity normalizer.
    Accepts ints and digit strings; rejects bools, floats and negatives.
    """
    if value is None or value == "":
        return 0

    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a whole integer unit", field=field)

    if isinstance(value, int):
        if value < 0:
            raise ValidationError(f"{field} cannot be negative", field=field)
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return int(s)

    raise ValidationError(f"{field} must be a whole integer unit", field=field)


def format_amount(v, symbol: str | None = None) -> str:
    from django.conf import settings

    symbol = symbol or getattr(settings, "CURRENCY_SYMBOL", "Rs.")
    return f"{symbol} {money(v):,.2f}"
