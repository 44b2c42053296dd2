# ledger/services/ledger_service.py

"""
FINANCIAL LEDGER SERVICE

Single entry point for money movements against a customer.

Contract:
- post(customer, type, direction, amount, description, ...) -> Ledger
- balance(customer) = Σ debit − Σ credit   (DB aggregate; order independent)
- statement(customer) -> rows in chronological order with a running balance
- post_direct_cash(...) / delete_direct_cash(ledger_id)

Callers that post as part of a larger operation (entry receipt, clearance)
run inside their own transaction.atomic block; post() joins it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from core.exceptions import NotFound, ValidationError
from core.money import MAX_AMOUNT, ZERO, money
from ledger.models import Ledger, MovementDirection
from ledger.services.exceptions import ProtectedLedgerEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatementLine:
    entry: Ledger
    running_balance: Decimal


def _positive_amount(amount) -> Decimal:
    value = money(amount)
    if value <= ZERO:
        raise ValidationError("Amount must be greater than zero", field="amount")
    if value > MAX_AMOUNT:
        raise ValidationError("Amount is too large", field="amount")
    return value


def post(
    *,
    customer,
    type: str,
    direction: str,
    amount,
    description: str,
    entry_receipt=None,
    clearance_receipt=None,
    cash_transaction=None,
    is_discount: bool = False,
    created_at: datetime | None = None,
) -> Ledger:
    """
    Post one movement.

    direction is MovementDirection.DEBIT (customer owes more) or
    MovementDirection.CREDIT (customer owes less).
    """
    if direction not in MovementDirection.values:
        raise ValidationError(f"Invalid ledger direction: {direction!r}", field="type")

    value = _positive_amount(amount)

    row = Ledger(
        customer=customer,
        type=type,
        entry_receipt=entry_receipt,
        clearance_receipt=clearance_receipt,
        cash_transaction=cash_transaction,
        debit_amount=value if direction == MovementDirection.DEBIT else ZERO,
        credit_amount=value if direction == MovementDirection.CREDIT else ZERO,
        is_discount=is_discount,
        description=description,
        created_at=created_at or timezone.now(),
    )
    row.save()

    logger.info(
        "Ledger movement posted",
        extra={
            "ledger_id": row.id,
            "customer_id": row.customer_id,
            "ledger_type": row.type,
            "direction": str(direction),
            "amount": str(value),
        },
    )
    return row


def balance(customer) -> Decimal:
    customer_id = getattr(customer, "pk", customer)
    totals = Ledger.objects.filter(customer_id=customer_id).aggregate(
        debit=Sum("debit_amount"),
        credit=Sum("credit_amount"),
    )
    return money(totals["debit"] or ZERO) - money(totals["credit"] or ZERO)


def statement(customer) -> list[StatementLine]:
    """Chronological rows with a running balance fold."""
    customer_id = getattr(customer, "pk", customer)
    rows = (
        Ledger.objects.filter(customer_id=customer_id)
        .select_related("entry_receipt", "clearance_receipt")
        .order_by("created_at", "id")
    )

    running = ZERO
    lines = []
    for row in rows:
        running = running + row.debit_amount - row.credit_amount
        lines.append(StatementLine(entry=row, running_balance=running))
    return lines


def instant_for(day: date) -> datetime:
    """Business date -> movement instant (now when the day is today)."""
    now = timezone.localtime()
    if day == now.date():
        return now
    return timezone.make_aware(datetime.combine(day, now.time()))


@transaction.atomic
def post_direct_cash(*, customer, direction: str, amount, description: str, created_at=None) -> Ledger:
    """
    Cash handed over the counter outside any receipt.
    credit = cash received from the customer; debit = cash/loan given out.
    """
    return post(
        customer=customer,
        type=Ledger.Type.DIRECT_CASH,
        direction=direction,
        amount=amount,
        description=description,
        created_at=created_at,
    )


@transaction.atomic
def delete_direct_cash(ledger_id) -> None:
    """
    Delete a user-entered direct_cash row.

    - Receipt-backed rows raise ProtectedLedgerEntry.
    - A row created by a manual cash-book transaction takes that
      transaction with it (the cash book must not keep a phantom inflow).
    """
    try:
        row = Ledger.objects.select_for_update().get(pk=ledger_id)
    except Ledger.DoesNotExist:
        raise NotFound("Ledger entry not found")

    if row.is_system_generated or row.type != Ledger.Type.DIRECT_CASH:
        logger.warning(
            "Refused to delete system-generated ledger row",
            extra={"ledger_id": row.id, "ledger_type": row.type},
        )
        raise ProtectedLedgerEntry()

    cash_transaction = row.cash_transaction
    row.delete()
    if cash_transaction is not None:
        cash_transaction.delete()

    logger.info(
        "Direct cash ledger row deleted",
        extra={
            "ledger_id": ledger_id,
            "customer_id": row.customer_id,
            "cash_transaction_id": getattr(cash_transaction, "id", None),
        },
    )
