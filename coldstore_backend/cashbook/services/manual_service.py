# cashbook/services/manual_service.py

"""
MANUAL CASH TRANSACTION SERVICE

The only write path into the cash book's entry list.

- create / update / delete ManualCashTransaction
- when a customer is linked, keep exactly one direct_cash ledger row in step
  (inflow -> CREDIT, outflow -> DEBIT). Ledger rows are immutable, so an
  update deletes the old row and posts a fresh one.
- resolve_entry_id() maps a cash-book id ("manual-12" / "12") to a manual
  transaction and refuses every other source (ReadOnlyCashBookEntry).
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.exceptions import NotFound, ValidationError
from core.money import MAX_AMOUNT, ZERO, money
from customers.models import Customer
from cashbook.models import ManualCashTransaction, TransactionType
from cashbook.services.exceptions import DuplicateTransaction, ReadOnlyCashBookEntry
from cashbook.services.sources import SOURCE_MANUAL
from ledger.models import Ledger, MovementDirection
from ledger.services import ledger_service

logger = logging.getLogger(__name__)

DUPLICATE_WINDOW = timedelta(seconds=60)
MAX_DESCRIPTION = 500


# ============================================================
# VALIDATION
# ============================================================

def _clean_amount(value) -> Decimal:
    try:
        raw = Decimal(str(value))
    except (InvalidOperation, TypeError):
        raise ValidationError("Amount must be a number", field="amount")

    if not raw.is_finite():
        raise ValidationError("Amount must be a number", field="amount")
    if raw.as_tuple().exponent < -2:
        raise ValidationError("Amount cannot have more than 2 decimal places", field="amount")
    if raw <= ZERO:
        raise ValidationError("Amount must be positive", field="amount")
    if raw > MAX_AMOUNT:
        raise ValidationError("Amount exceeds maximum allowed value", field="amount")
    return money(raw)


def _clean_description(value) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError("Description cannot be only whitespace", field="description")
    if len(text) > MAX_DESCRIPTION:
        raise ValidationError(
            f"Description cannot exceed {MAX_DESCRIPTION} characters", field="description"
        )
    return text


def _clean_date(value: date) -> date:
    max_days = getattr(settings, "CASH_BOOK_MAX_FUTURE_DAYS", 1)
    if value > timezone.localdate() + timedelta(days=max_days):
        raise ValidationError("Date cannot be in the future", field="date")
    return value


def _clean_type(value: str) -> str:
    if value not in TransactionType.values:
        raise ValidationError(
            "Transaction type must be either inflow or outflow", field="transactionType"
        )
    return value


def _resolve_customer(customer_id):
    if customer_id in (None, ""):
        return None
    try:
        return Customer.objects.get(pk=customer_id)
    except (Customer.DoesNotExist, ValueError, TypeError):
        raise ValidationError("Customer not found", field="customerId")


# ============================================================
# LEDGER MIRROR
# ============================================================

def _post_ledger_mirror(txn: ManualCashTransaction) -> Ledger | None:
    if txn.customer_id is None:
        return None

    direction = (
        MovementDirection.CREDIT
        if txn.transaction_type == TransactionType.INFLOW
        else MovementDirection.DEBIT
    )
    return ledger_service.post(
        customer=txn.customer,
        type=Ledger.Type.DIRECT_CASH,
        direction=direction,
        amount=txn.amount,
        description=txn.description,
        cash_transaction=txn,
        created_at=ledger_service.instant_for(txn.date),
    )


def _drop_ledger_mirror(txn: ManualCashTransaction) -> None:
    for row in Ledger.objects.filter(cash_transaction=txn):
        row.delete()


# ============================================================
# WRITES
# ============================================================

@transaction.atomic
def create_manual_transaction(
    *,
    date: date,
    transaction_type: str,
    amount,
    description: str,
    customer_id=None,
    created_by: str = "",
) -> ManualCashTransaction:
    day = _clean_date(date)
    kind = _clean_type(transaction_type)
    value = _clean_amount(amount)
    text = _clean_description(description)
    customer = _resolve_customer(customer_id)

    duplicate = ManualCashTransaction.objects.filter(
        date=day,
        transaction_type=kind,
        amount=value,
        description=text,
        created_at__gte=timezone.now() - DUPLICATE_WINDOW,
    ).exists()
    if duplicate:
        logger.warning(
            "Duplicate manual cash transaction rejected",
            extra={"date": day.isoformat(), "amount": str(value), "type": kind},
        )
        raise DuplicateTransaction(
            "Potential duplicate transaction detected. Please wait a minute before "
            "creating an identical transaction."
        )

    txn = ManualCashTransaction.objects.create(
        date=day,
        transaction_type=kind,
        amount=value,
        description=text,
        customer=customer,
        created_by=created_by or "",
    )
    _post_ledger_mirror(txn)

    logger.info(
        "Manual cash transaction created",
        extra={
            "transaction_id": txn.id,
            "type": kind,
            "amount": str(value),
            "customer_id": txn.customer_id,
        },
    )
    return txn


_UNSET = object()


@transaction.atomic
def update_manual_transaction(
    txn_id,
    *,
    description=None,
    amount=None,
    customer_id=_UNSET,
) -> ManualCashTransaction:
    """
    Editable fields: description, amount, customer.
    Date and type are fixed once recorded.
    """
    try:
        txn = ManualCashTransaction.objects.select_for_update().get(pk=txn_id)
    except ManualCashTransaction.DoesNotExist:
        raise NotFound("Transaction not found")

    if description is not None:
        txn.description = _clean_description(description)
    if amount is not None:
        txn.amount = _clean_amount(amount)
    if customer_id is not _UNSET:
        txn.customer = _resolve_customer(customer_id)

    txn.save()

    _drop_ledger_mirror(txn)
    _post_ledger_mirror(txn)

    logger.info(
        "Manual cash transaction updated",
        extra={"transaction_id": txn.id, "amount": str(txn.amount), "customer_id": txn.customer_id},
    )
    return txn


@transaction.atomic
def delete_manual_transaction(txn_id) -> None:
    try:
        txn = ManualCashTransaction.objects.select_for_update().get(pk=txn_id)
    except ManualCashTransaction.DoesNotExist:
        raise NotFound("Transaction not found")

    _drop_ledger_mirror(txn)
    txn.delete()

    logger.info("Manual cash transaction deleted", extra={"transaction_id": txn_id})


# ============================================================
# ID RESOLUTION
# ============================================================

def resolve_entry_id(entry_id: str) -> int:
    """
    "manual-12" or "12" -> 12. Any other source prefix is read-only.
    """
    raw = str(entry_id).strip()
    source, sep, pk = raw.rpartition("-")
    if not sep:
        source, pk = SOURCE_MANUAL, raw

    if source != SOURCE_MANUAL:
        raise ReadOnlyCashBookEntry()
    if not pk.isdigit():
        raise NotFound("Transaction not found")
    return int(pk)


def get_manual_transaction(entry_id: str) -> ManualCashTransaction:
    pk = resolve_entry_id(entry_id)
    try:
        return ManualCashTransaction.objects.select_related("customer").get(pk=pk)
    except ManualCashTransaction.DoesNotExist:
        raise NotFound("Transaction not found")
