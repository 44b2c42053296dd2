# cashbook/services/sources.py

"""
CASH BOOK SOURCES (TAGGED VARIANT)

Every money movement that touches the till is normalized into one
CashBookEntry shape, tagged by `source`:

    clearance  ClearanceReceipt.payment_amount > 0      -> inflow
    ledger     direct_cash Ledger rows not created by a
               manual transaction                       -> credit: inflow, debit: outflow
    expense    every Expense                            -> outflow
    manual     ManualCashTransaction                    -> as entered

Each source registers one normalizer: fn(window) -> iterable[CashBookEntry].
The date window is pushed down into the source query; merging, filtering
and sorting are source-agnostic (cashbook.services.aggregator).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable

from django.utils import timezone

from clearances.models import ClearanceReceipt
from cashbook.models import ManualCashTransaction, TransactionType
from expenses.models import Expense
from ledger.models import Ledger

SOURCE_CLEARANCE = "clearance"
SOURCE_LEDGER = "ledger"
SOURCE_EXPENSE = "expense"
SOURCE_MANUAL = "manual"


@dataclass(frozen=True)
class DateWindow:
    """Inclusive calendar-date bounds; None = open-ended."""

    start: date | None = None
    end: date | None = None

    @classmethod
    def day(cls, d: date) -> "DateWindow":
        return cls(start=d, end=d)

    def apply(self, qs, field: str):
        if self.start is not None:
            qs = qs.filter(**{f"{field}__gte": self.start})
        if self.end is not None:
            qs = qs.filter(**{f"{field}__lte": self.end})
        return qs


@dataclass(frozen=True)
class CashBookEntry:
    source: str
    source_pk: int
    date: date
    transaction_type: str
    amount: Decimal
    description: str
    created_at: datetime
    customer_id: int | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    reference_id: int | None = None
    reference_type: str | None = None

    @property
    def id(self) -> str:
        return f"{self.source}-{self.source_pk}"

    @property
    def is_editable(self) -> bool:
        return self.source == SOURCE_MANUAL

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.transaction_type == TransactionType.INFLOW else -self.amount


Normalizer = Callable[[DateWindow], Iterable[CashBookEntry]]

_REGISTRY: dict[str, Normalizer] = {}


def register(source: str):
    def decorator(fn: Normalizer) -> Normalizer:
        _REGISTRY[source] = fn
        return fn

    return decorator


def registered_sources() -> tuple[str, ...]:
    return tuple(_REGISTRY)


def normalizer(source: str) -> Normalizer:
    return _REGISTRY[source]


def _customer_fields(customer) -> dict:
    if customer is None:
        return {"customer_id": None, "customer_name": None, "customer_phone": None}
    return {
        "customer_id": customer.pk,
        "customer_name": customer.name,
        "customer_phone": customer.phone or None,
    }


# ============================================================
# NORMALIZERS
# ============================================================

@register(SOURCE_CLEARANCE)
def clearance_payments(window: DateWindow) -> Iterable[CashBookEntry]:
    qs = ClearanceReceipt.objects.select_related("customer").filter(payment_amount__gt=0)
    qs = window.apply(qs, "clearance_date__date")
    for receipt in qs:
        yield CashBookEntry(
            source=SOURCE_CLEARANCE,
            source_pk=receipt.pk,
            date=timezone.localdate(receipt.clearance_date),
            transaction_type=TransactionType.INFLOW,
            amount=receipt.payment_amount,
            description=f"Clearance payment {receipt.clearance_no}",
            created_at=receipt.created_at,
            reference_id=receipt.pk,
            reference_type="clearance_receipt",
            **_customer_fields(receipt.customer),
        )


@register(SOURCE_LEDGER)
def ledger_direct_cash(window: DateWindow) -> Iterable[CashBookEntry]:
    # Rows created by a manual transaction are already counted by that transaction.
    qs = Ledger.objects.select_related("customer").filter(
        type=Ledger.Type.DIRECT_CASH,
        cash_transaction__isnull=True,
    )
    qs = window.apply(qs, "created_at__date")
    for row in qs:
        yield CashBookEntry(
            source=SOURCE_LEDGER,
            source_pk=row.pk,
            date=timezone.localdate(row.created_at),
            transaction_type=(
                TransactionType.INFLOW if row.credit_amount > 0 else TransactionType.OUTFLOW
            ),
            amount=row.amount,
            description=row.description,
            created_at=row.recorded_at,
            reference_id=row.pk,
            reference_type="ledger_entry",
            **_customer_fields(row.customer),
        )


@register(SOURCE_EXPENSE)
def expenses(window: DateWindow) -> Iterable[CashBookEntry]:
    qs = window.apply(Expense.objects.select_related("category"), "date")
    for expense in qs:
        label = expense.category.name
        yield CashBookEntry(
            source=SOURCE_EXPENSE,
            source_pk=expense.pk,
            date=expense.date,
            transaction_type=TransactionType.OUTFLOW,
            amount=expense.amount,
            description=f"{label}: {expense.description}" if expense.description else label,
            created_at=expense.created_at,
            reference_id=expense.pk,
            reference_type="expense",
        )


@register(SOURCE_MANUAL)
def manual_transactions(window: DateWindow) -> Iterable[CashBookEntry]:
    qs = window.apply(ManualCashTransaction.objects.select_related("customer"), "date")
    for txn in qs:
        yield from_manual(txn)


def from_manual(txn: ManualCashTransaction) -> CashBookEntry:
    return CashBookEntry(
        source=SOURCE_MANUAL,
        source_pk=txn.pk,
        date=txn.date,
        transaction_type=txn.transaction_type,
        amount=txn.amount,
        description=txn.description,
        created_at=txn.created_at,
        **_customer_fields(txn.customer),
    )
