# inventory/services/lot_tracker.py

"""
LOT TRACKER

Owns the remaining-quantity state of each lot (EntryItem).

HARD RULES:
- remaining_quantity / remaining_kj_quantity only ever go DOWN here.
- decrement() must run inside the caller's transaction.atomic block,
  after the caller locked the row with select_for_update().
- The write itself is a guarded compare-and-update:
      UPDATE ... SET remaining = remaining - qty WHERE id = ? AND remaining >= qty
  so a stale read can never drive a lot negative.
- A lot is editable only while untouched (remaining == original for both kinds).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.db.models import F

from core.exceptions import NotFound
from core.money import to_int_qty
from inventory.models import EntryItem
from inventory.services.exceptions import InsufficientStock, LotLocked

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LotRemaining:
    quantity: int
    kj_quantity: int


def _get_lot(lot_id) -> EntryItem:
    try:
        return EntryItem.objects.get(pk=lot_id)
    except EntryItem.DoesNotExist:
        raise NotFound(f"Entry item {lot_id} not found")


def get_remaining(lot_id) -> LotRemaining:
    lot = _get_lot(lot_id)
    return LotRemaining(
        quantity=lot.remaining_quantity,
        kj_quantity=lot.remaining_kj_quantity,
    )


def lock_lots(lot_ids) -> dict:
    """
    Row-lock lots in ascending id order (deadlock-safe ordering).
    Must be called inside transaction.atomic.
    """
    ids = sorted({int(i) for i in lot_ids})
    lots = EntryItem.objects.select_for_update().filter(pk__in=ids).order_by("pk")
    return {lot.pk: lot for lot in lots}


def decrement(lot_id, qty, kj_qty=0) -> LotRemaining:
    """
    Decrement remaining quantities of one lot.
    Raises InsufficientStock when the guarded update matches no row.
    """
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("lot_tracker.decrement() must run inside transaction.atomic")

    qty = to_int_qty(qty, field="quantityCleared")
    kj_qty = to_int_qty(kj_qty, field="kjQuantityCleared")

    if qty == 0 and kj_qty == 0:
        return get_remaining(lot_id)

    updated = EntryItem.objects.filter(
        pk=lot_id,
        remaining_quantity__gte=qty,
        remaining_kj_quantity__gte=kj_qty,
    ).update(
        remaining_quantity=F("remaining_quantity") - qty,
        remaining_kj_quantity=F("remaining_kj_quantity") - kj_qty,
    )

    if updated != 1:
        current = get_remaining(lot_id)
        logger.warning(
            "Lot decrement refused",
            extra={
                "lot_id": lot_id,
                "requested": qty,
                "requested_kj": kj_qty,
                "remaining": current.quantity,
                "remaining_kj": current.kj_quantity,
            },
        )
        raise InsufficientStock(
            f"Insufficient quantity for item {lot_id}. "
            f"Available: {current.quantity} (KJ {current.kj_quantity}), "
            f"Requested: {qty} (KJ {kj_qty})",
            details={
                "lot_id": lot_id,
                "requested": qty,
                "remaining": current.quantity,
                "requested_kj": kj_qty,
                "remaining_kj": current.kj_quantity,
            },
        )

    return get_remaining(lot_id)


def is_editable(lot: EntryItem) -> bool:
    if lot.remaining_quantity < lot.quantity:
        return False
    if lot.remaining_kj_quantity < lot.kj_quantity:
        return False
    return not lot.cleared_items.exists()


def assert_editable(lot: EntryItem) -> None:
    if not is_editable(lot):
        raise LotLocked(
            f"Entry item {lot.pk} has been (partially) cleared and cannot be edited",
            details={
                "lot_id": lot.pk,
                "quantity": lot.quantity,
                "remaining": lot.remaining_quantity,
            },
        )
