# cashbook/services/summary_service.py

"""
DAILY CASH SUMMARY SERVICE

Balances (computed on read, never stored):
- opening(D) = explicit override stored for D, else closing(D − 1), else 0
- closing(D) = opening(D) + inflows(D) − outflows(D)

The "previous day" chain is folded forward from the latest override before D
(or from the beginning of time when there is none), so a missing summary row
for any day is never an error; it simply carries the balance forward.

summary() / summaries() are pure reads. Writes happen only in
set_opening_balance() and reconcile().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.money import MAX_AMOUNT, ZERO, money
from cashbook.models import DailyCashSummary, OpeningBalanceAudit
from cashbook.services import aggregator
from cashbook.services.exceptions import InvalidOpeningBalance
from cashbook.services.sources import DateWindow

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DaySummary:
    date: date
    opening_balance: Decimal
    total_inflows: Decimal
    total_outflows: Decimal
    transaction_count: int
    opening_is_override: bool
    is_reconciled: bool = False
    reconciled_by: str = ""
    reconciled_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def closing_balance(self) -> Decimal:
        return self.opening_balance + self.total_inflows - self.total_outflows

    @property
    def net_flow(self) -> Decimal:
        return self.total_inflows - self.total_outflows


# ============================================================
# READS
# ============================================================

def _latest_override_before(day: date):
    return (
        DailyCashSummary.objects.filter(date__lt=day, opening_balance__isnull=False)
        .order_by("-date")
        .first()
    )


def carried_opening(day: date) -> Decimal:
    """Closing balance of day − 1 (0 when there is no history)."""
    anchor = _latest_override_before(day)
    if anchor is None:
        return money(aggregator.net_flow(DateWindow(end=day - ONE_DAY)))

    return money(
        anchor.opening_balance
        + aggregator.net_flow(DateWindow(start=anchor.date, end=day - ONE_DAY))
    )


def summaries(start: date, end: date) -> list[DaySummary]:
    """Consecutive day summaries for [start, end], folded in one pass."""
    if start > end:
        return []

    stored = {s.date: s for s in DailyCashSummary.objects.filter(date__gte=start, date__lte=end)}
    flows = aggregator.flows_by_date(DateWindow(start=start, end=end))

    result = []
    opening = None
    day = start
    while day <= end:
        row = stored.get(day)
        if row is not None and row.opening_balance is not None:
            opening = row.opening_balance
            is_override = True
        else:
            if opening is None:
                opening = carried_opening(day)
            is_override = False

        day_flows = flows.get(day) or aggregator.DayFlows()
        summary = DaySummary(
            date=day,
            opening_balance=money(opening),
            total_inflows=money(day_flows.inflows),
            total_outflows=money(day_flows.outflows),
            transaction_count=day_flows.count,
            opening_is_override=is_override,
            is_reconciled=bool(row and row.is_reconciled),
            reconciled_by=(row.reconciled_by if row else ""),
            reconciled_at=(row.reconciled_at if row else None),
            updated_at=(row.updated_at if row else None),
        )
        result.append(summary)

        opening = summary.closing_balance
        day += ONE_DAY

    return result


def summary(day: date) -> DaySummary:
    return summaries(day, day)[0]


# ============================================================
# WRITES
# ============================================================

def _validate_opening(day: date, value) -> Decimal:
    value = money(value)
    if value < ZERO:
        raise InvalidOpeningBalance("Opening balance cannot be negative")
    if value > MAX_AMOUNT:
        raise InvalidOpeningBalance("Opening balance is too large")

    max_days = getattr(settings, "OPENING_BALANCE_MAX_FUTURE_DAYS", 7)
    if day > timezone.localdate() + timedelta(days=max_days):
        raise InvalidOpeningBalance(
            f"Cannot set opening balance more than {max_days} days in the future"
        )
    return value


@transaction.atomic
def set_opening_balance(day: date, value, *, reason: str | None = None, actor: str | None = None):
    """
    Override the opening balance of `day`.

    Returns (DaySummary, audit_created). A change larger than
    CASH_BOOK_SIGNIFICANT_CHANGE_THRESHOLD writes an OpeningBalanceAudit row.
    Reconciliation state is left exactly as it was.
    """
    new_value = _validate_opening(day, value)

    row, _ = DailyCashSummary.objects.select_for_update().get_or_create(date=day)
    old_value = row.opening_balance if row.opening_balance is not None else carried_opening(day)

    row.opening_balance = new_value
    row.save()

    threshold = Decimal(str(getattr(settings, "CASH_BOOK_SIGNIFICANT_CHANGE_THRESHOLD", "1000")))
    audit_created = abs(new_value - old_value) > threshold
    if audit_created:
        OpeningBalanceAudit.objects.create(
            summary=row,
            old_opening_balance=old_value,
            new_opening_balance=new_value,
            change_reason=(reason or "").strip() or "Opening balance adjustment",
            changed_by=(actor or "").strip() or "System",
        )

    logger.info(
        "Opening balance set",
        extra={
            "date": day.isoformat(),
            "old_opening_balance": str(old_value),
            "new_opening_balance": str(new_value),
            "audit_created": audit_created,
            "changed_by": actor or "System",
        },
    )
    return summary(day), audit_created


@transaction.atomic
def reconcile(day: date, *, is_reconciled: bool, reconciled_by: str | None = None) -> DaySummary:
    row, _ = DailyCashSummary.objects.select_for_update().get_or_create(date=day)

    row.is_reconciled = bool(is_reconciled)
    if row.is_reconciled:
        row.reconciled_by = (reconciled_by or "").strip() or "System"
        row.reconciled_at = timezone.now()
    else:
        row.reconciled_by = ""
        row.reconciled_at = None
    row.save()

    logger.info(
        "Cash book reconciliation changed",
        extra={"date": day.isoformat(), "is_reconciled": row.is_reconciled, "by": row.reconciled_by},
    )
    return summary(day)
