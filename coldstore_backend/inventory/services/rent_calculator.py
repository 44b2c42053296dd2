# inventory/services/rent_calculator.py

"""
RENT CALCULATOR

days_stored = max(1, ceil((clearance_date − entry_date) / 1 day))
rent        = qty × days_stored × unit_price      (unit_price is per unit per day)
kj_rent     = kj_qty × kj_unit_price              (flat packaging fee, NOT per day)
total       = rent + kj_rent

Same-day clearances still pay one day (no free storage).
Money is quantized to 2dp, ROUND_HALF_UP.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from django.utils import timezone

from core.money import money

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class RentQuote:
    days_stored: int
    rent: Decimal
    kj_rent: Decimal

    @property
    def total(self) -> Decimal:
        return self.rent + self.kj_rent


def days_stored(entry_date: datetime, clearance_date: datetime | None = None) -> int:
    clearance_date = clearance_date or timezone.now()
    elapsed = clearance_date - entry_date
    return max(1, math.ceil(elapsed / ONE_DAY))


def rent(qty: int, days: int, unit_price) -> Decimal:
    return money(Decimal(qty) * Decimal(days) * Decimal(str(unit_price)))


def kj_rent(kj_qty: int, kj_unit_price) -> Decimal:
    return money(Decimal(kj_qty) * Decimal(str(kj_unit_price or 0)))


def quote(*, lot, qty: int, kj_qty: int = 0, clearance_date: datetime | None = None) -> RentQuote:
    """Price one clearance line against a lot (EntryItem with entry_receipt loaded)."""
    days = days_stored(lot.entry_receipt.entry_date, clearance_date)
    return RentQuote(
        days_stored=days,
        rent=rent(qty, days, lot.unit_price),
        kj_rent=kj_rent(kj_qty, lot.kj_unit_price) if kj_qty else money(0),
    )
