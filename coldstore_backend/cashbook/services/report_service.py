# cashbook/services/report_service.py

"""
CASH BOOK REPORTS (READ-ONLY)

build_report(date_from, date_to)
    totals, per-source breakdown, per-day breakdown with day summaries.
    Range is inclusive and capped at MAX_REPORT_DAYS.

audit_trail(date | date_from/date_to)
    opening balance override history, newest first.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta

from core.exceptions import ValidationError
from core.money import ZERO
from cashbook.models import OpeningBalanceAudit, TransactionType
from cashbook.services import aggregator, summary_service
from cashbook.services.sources import DateWindow

MAX_REPORT_DAYS = 365


def _check_range(date_from: date, date_to: date) -> None:
    if date_from > date_to:
        raise ValidationError("Start date must be before or equal to end date", field="from")
    if (date_to - date_from) > timedelta(days=MAX_REPORT_DAYS):
        raise ValidationError(
            f"Date range cannot exceed {MAX_REPORT_DAYS} days", field="to"
        )


def build_report(date_from: date, date_to: date) -> dict:
    _check_range(date_from, date_to)

    entries = aggregator.collect(DateWindow(start=date_from, end=date_to))
    days = summary_service.summaries(date_from, date_to)

    by_source = defaultdict(lambda: {"inflows": ZERO, "outflows": ZERO, "count": 0})
    by_date = defaultdict(lambda: {"inflows": ZERO, "outflows": ZERO, "count": 0})

    total_in = ZERO
    total_out = ZERO
    for entry in entries:
        side = "inflows" if entry.transaction_type == TransactionType.INFLOW else "outflows"
        for bucket in (by_source[entry.source], by_date[entry.date]):
            bucket[side] += entry.amount
            bucket["count"] += 1
        if side == "inflows":
            total_in += entry.amount
        else:
            total_out += entry.amount

    return {
        "period": {"from": date_from, "to": date_to},
        "summary": {
            "total_inflows": total_in,
            "total_outflows": total_out,
            "net_cash_flow": total_in - total_out,
            "opening_balance": days[0].opening_balance,
            "closing_balance": days[-1].closing_balance,
            "transaction_count": len(entries),
        },
        "by_source": {
            name: {**totals, "net": totals["inflows"] - totals["outflows"]}
            for name, totals in sorted(by_source.items())
        },
        "by_date": [
            {"date": day, **totals, "net": totals["inflows"] - totals["outflows"]}
            for day, totals in sorted(by_date.items())
        ],
        "daily_summaries": days,
    }


def audit_trail(*, day: date | None = None, date_from: date | None = None, date_to: date | None = None):
    qs = OpeningBalanceAudit.objects.select_related("summary")

    if day is not None:
        return qs.filter(summary__date=day)

    if date_from is not None and date_to is not None and date_from > date_to:
        raise ValidationError("fromDate must be before or equal to toDate", field="fromDate")
    if date_from is not None:
        qs = qs.filter(summary__date__gte=date_from)
    if date_to is not None:
        qs = qs.filter(summary__date__lte=date_to)
    return qs
