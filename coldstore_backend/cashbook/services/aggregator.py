# cashbook/services/aggregator.py

"""
CASH BOOK AGGREGATOR

collect(window)       normalize every registered source for the window, merge,
                      and sort (date desc, created_at desc)
list_entries(filters) collect + filter (type / source / customer / search)
                      + optional re-sort (date | amount | description)
flows_by_date(window) {date: DayFlows} for summaries and reports

Pure reads: nothing here writes.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation

from core.exceptions import ValidationError
from core.money import ZERO
from cashbook.models import TransactionType
from cashbook.services import sources
from cashbook.services.sources import CashBookEntry, DateWindow

SORT_FIELDS = ("date", "amount", "description")
SORT_ORDERS = ("asc", "desc")


@dataclass
class CashBookFilters:
    date: date | None = None
    date_from: date | None = None
    date_to: date | None = None
    transaction_type: str | None = None
    source: str | None = None
    customer_id: int | None = None
    search: str | None = None
    sort_by: str = "date"
    sort_order: str = "desc"

    def window(self) -> DateWindow:
        if self.date is not None:
            return DateWindow.day(self.date)
        return DateWindow(start=self.date_from, end=self.date_to)

    def validate(self) -> None:
        if self.transaction_type in ("", "all"):
            self.transaction_type = None
        if self.source in ("", "all"):
            self.source = None

        if self.transaction_type and self.transaction_type not in TransactionType.values:
            raise ValidationError(
                "Transaction type must be inflow, outflow or all", field="transactionType"
            )
        if self.source and self.source not in sources.registered_sources():
            raise ValidationError(
                f"Source must be one of: {', '.join(sources.registered_sources())}, all",
                field="source",
            )
        if self.sort_by not in SORT_FIELDS:
            raise ValidationError("sortBy must be date, amount or description", field="sortBy")
        if self.sort_order not in SORT_ORDERS:
            raise ValidationError("sortOrder must be asc or desc", field="sortOrder")
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValidationError("dateFrom must be before or equal to dateTo", field="dateFrom")
        if self.search and len(self.search) > 100:
            raise ValidationError("Search term is too long", field="search")


@dataclass
class DayFlows:
    inflows: Decimal = ZERO
    outflows: Decimal = ZERO
    count: int = 0
    entries: list = field(default_factory=list)

    @property
    def net(self) -> Decimal:
        return self.inflows - self.outflows

    def add(self, entry: CashBookEntry) -> None:
        if entry.transaction_type == TransactionType.INFLOW:
            self.inflows += entry.amount
        else:
            self.outflows += entry.amount
        self.count += 1
        self.entries.append(entry)


def _default_sort(entries: list[CashBookEntry]) -> list[CashBookEntry]:
    return sorted(entries, key=lambda e: (e.date, e.created_at), reverse=True)


def collect(window: DateWindow | None = None, *, only_sources=None) -> list[CashBookEntry]:
    window = window or DateWindow()
    merged: list[CashBookEntry] = []
    for name in only_sources or sources.registered_sources():
        merged.extend(sources.normalizer(name)(window))
    return _default_sort(merged)


def _matches_search(entry: CashBookEntry, term: str, amount: Decimal | None) -> bool:
    needle = term.lower()
    haystacks = (entry.description, entry.customer_name, entry.customer_phone)
    if any(h and needle in h.lower() for h in haystacks):
        return True
    return amount is not None and entry.amount == amount


def _search_amount(term: str) -> Decimal | None:
    try:
        value = Decimal(term)
    except (InvalidOperation, ValueError):
        return None
    return value if value.is_finite() else None


def list_entries(filters: CashBookFilters) -> list[CashBookEntry]:
    filters.validate()

    only = (filters.source,) if filters.source else None
    entries = collect(filters.window(), only_sources=only)

    if filters.transaction_type:
        entries = [e for e in entries if e.transaction_type == filters.transaction_type]

    if filters.customer_id:
        entries = [e for e in entries if e.customer_id == filters.customer_id]

    term = (filters.search or "").strip()
    if term:
        amount = _search_amount(term)
        entries = [e for e in entries if _matches_search(e, term, amount)]

    reverse = filters.sort_order == "desc"
    if filters.sort_by == "amount":
        entries.sort(key=lambda e: e.amount, reverse=reverse)
    elif filters.sort_by == "description":
        entries.sort(key=lambda e: e.description.lower(), reverse=reverse)
    elif not reverse:
        entries.reverse()

    return entries


def flows_by_date(window: DateWindow) -> dict[date, DayFlows]:
    days: dict[date, DayFlows] = defaultdict(DayFlows)
    for entry in collect(window):
        days[entry.date].add(entry)
    return dict(days)


def net_flow(window: DateWindow) -> Decimal:
    return sum((e.signed_amount for e in collect(window)), ZERO)
