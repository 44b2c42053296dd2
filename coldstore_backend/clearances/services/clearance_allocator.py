# clearances/services/clearance_allocator.py

"""
CLEARANCE ALLOCATOR

Orchestrates one clearance request:

    EmptySelection check
      -> resolve entry receipt by exact number        (ReceiptNotFound)
      -> validate lines against the receipt's lots    (LotNotInReceipt, OverClearance)
      -> price lines                                  (rent_calculator)
      -> COMMIT (one transaction.atomic):
           lock lots (select_for_update, id order)
           re-validate under the lock                 (OverClearance)
           guarded decrement per lot                  (lot_tracker)
           ClearanceReceipt + ClearedItems
           ledger DEBIT  = clearance total
           ledger CREDIT = payment   (if > 0)
           ledger CREDIT = discount  (if > 0, is_discount)

All-or-nothing: any failure rolls the whole request back.
Two requests racing for the same lot serialize on the row lock; the loser
re-validates against the winner's decrement and gets OverClearance.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from clearances.models import ClearanceReceipt, ClearedItem
from clearances.services.exceptions import EmptySelection, OverClearance
from core.exceptions import ValidationError
from core.money import ZERO, format_amount, money, to_int_qty
from core.receipt_numbers import CLEARANCE_PREFIX, next_receipt_number
from inventory.models import EntryItem
from inventory.services import lot_tracker, rent_calculator
from inventory.services.entry_service import get_by_receipt_no
from inventory.services.exceptions import InsufficientStock, LotNotInReceipt
from ledger.models import Ledger, MovementDirection
from ledger.services import ledger_service

logger = logging.getLogger(__name__)


@dataclass
class _Line:
    lot_id: int
    qty: int = 0
    kj_qty: int = 0


# ============================================================
# STEP HELPERS
# ============================================================

def _merge_lines(items) -> "OrderedDict[int, _Line]":
    """
    Normalize request lines and sum duplicates per lot.
    Lines clearing nothing are dropped.
    """
    merged: "OrderedDict[int, _Line]" = OrderedDict()
    for index, raw in enumerate(items or []):
        lot_id = raw.get("entry_item_id")
        try:
            lot_id = int(lot_id)
        except (TypeError, ValueError):
            raise ValidationError("Entry item is required", field=f"items[{index}].entryItemId")

        qty = to_int_qty(raw.get("quantity_cleared"), field=f"items[{index}].quantityCleared")
        kj_qty = to_int_qty(raw.get("kj_quantity_cleared"), field=f"items[{index}].kjQuantityCleared")
        if qty == 0 and kj_qty == 0:
            continue

        line = merged.setdefault(lot_id, _Line(lot_id=lot_id))
        line.qty += qty
        line.kj_qty += kj_qty
    return merged


def _shortfalls(lots: dict, lines) -> list[dict]:
    problems = []
    for line in lines:
        lot = lots[line.lot_id]

        if line.kj_qty and not lot.has_khali_jali:
            raise ValidationError(
                f"Item {lot.pk} does not have Khali Jali",
                field="items",
                details={"lot_id": lot.pk, "kjQuantityCleared": ["Lot has no Khali Jali"]},
            )

        for kind, requested, remaining in (
            ("quantity", line.qty, lot.remaining_quantity),
            ("kj_quantity", line.kj_qty, lot.remaining_kj_quantity),
        ):
            if requested > remaining:
                problems.append(
                    {
                        "lot_id": lot.pk,
                        "kind": kind,
                        "requested": requested,
                        "remaining": remaining,
                        "shortfall": requested - remaining,
                    }
                )
    return problems


def _raise_over_clearance(problems: list[dict]) -> None:
    lots = ", ".join(sorted({str(p["lot_id"]) for p in problems}))
    logger.warning("Over-clearance refused", extra={"problems": problems})
    raise OverClearance(
        f"Requested quantity exceeds remaining quantity for item(s): {lots}",
        details=problems,
    )


def _resolve_lots(receipt, lines) -> dict:
    wanted = {line.lot_id for line in lines}
    lots = {
        lot.pk: lot
        for lot in EntryItem.objects.select_related("entry_receipt").filter(
            entry_receipt=receipt, pk__in=wanted
        )
    }
    foreign = sorted(wanted - set(lots))
    if foreign:
        raise LotNotInReceipt(
            f"Entry item(s) {', '.join(map(str, foreign))} do not belong to receipt {receipt.receipt_no}",
            field="items",
            details={"lot_ids": foreign, "receipt_no": receipt.receipt_no},
        )
    return lots


# ============================================================
# PUBLIC ENTRY POINT
# ============================================================

def create_clearance(
    *,
    customer_id,
    entry_receipt_no: str,
    items,
    car_no: str = "",
    description: str = "",
    clearance_date=None,
    clearance_no: str | None = None,
    payment_amount=None,
    discount_amount=None,
) -> ClearanceReceipt:
    # 1) Empty selection (before any lookup or side effect)
    lines = _merge_lines(items)
    if not lines:
        raise EmptySelection()

    # 2) Resolve
    receipt = get_by_receipt_no(entry_receipt_no)

    if customer_id is not None and int(customer_id) != receipt.customer_id:
        raise ValidationError(
            "Customer does not match the entry receipt customer",
            field="customerId",
        )

    clearance_date = clearance_date or timezone.now()
    if clearance_date < receipt.entry_date:
        raise ValidationError(
            "Clearance date cannot be before the entry date",
            field="clearanceDate",
        )

    payment = money(payment_amount)
    discount = money(discount_amount)
    if payment < ZERO:
        raise ValidationError("Payment amount cannot be negative", field="paymentAmount")
    if discount < ZERO:
        raise ValidationError("Discount amount cannot be negative", field="discountAmount")

    # 3) Validate (unlocked read; repeated under the lock in commit)
    lots = _resolve_lots(receipt, lines.values())
    problems = _shortfalls(lots, lines.values())
    if problems:
        _raise_over_clearance(problems)

    # 4) Price
    quotes = {
        line.lot_id: rent_calculator.quote(
            lot=lots[line.lot_id],
            qty=line.qty,
            kj_qty=line.kj_qty,
            clearance_date=clearance_date,
        )
        for line in lines.values()
    }
    total = money(sum((q.total for q in quotes.values()), ZERO))

    if discount > total:
        raise ValidationError("Discount cannot exceed the clearance total", field="discountAmount")

    # 5) Commit
    return _commit(
        receipt=receipt,
        lines=list(lines.values()),
        quotes=quotes,
        total=total,
        payment=payment,
        discount=discount,
        car_no=car_no,
        description=description,
        clearance_date=clearance_date,
        clearance_no=clearance_no,
    )


@transaction.atomic
def _commit(*, receipt, lines, quotes, total, payment, discount, car_no, description, clearance_date, clearance_no):
    locked = lot_tracker.lock_lots([line.lot_id for line in lines])

    problems = _shortfalls(locked, lines)
    if problems:
        logger.info(
            "Clearance lost race for lot stock",
            extra={"receipt_no": receipt.receipt_no, "problems": problems},
        )
        _raise_over_clearance(problems)

    for line in sorted(lines, key=lambda ln: ln.lot_id):
        try:
            lot_tracker.decrement(line.lot_id, line.qty, line.kj_qty)
        except InsufficientStock as exc:
            _raise_over_clearance([exc.details])

    clearance_no = (clearance_no or "").strip()
    if clearance_no:
        if ClearanceReceipt.objects.filter(clearance_no=clearance_no).exists():
            raise ValidationError("Clearance number already exists", field="receiptNo")
    else:
        clearance_no = next_receipt_number(
            model=ClearanceReceipt,
            field="clearance_no",
            prefix=CLEARANCE_PREFIX,
            instant=clearance_date,
        )

    clearance = ClearanceReceipt(
        clearance_no=clearance_no,
        customer=receipt.customer,
        entry_receipt=receipt,
        car_no=(car_no or "").strip(),
        clearance_date=clearance_date,
        total_amount=total,
        payment_amount=payment,
        discount_amount=discount,
        description=description or "",
    )
    clearance.save()

    for line in lines:
        lot = locked[line.lot_id]
        quote = quotes[line.lot_id]
        ClearedItem(
            clearance_receipt=clearance,
            entry_item=lot,
            clear_quantity=line.qty,
            clear_kj_quantity=line.kj_qty,
            days_stored=quote.days_stored,
            unit_price=lot.unit_price,
            kj_unit_price=lot.kj_unit_price,
            rent_amount=quote.rent,
            kj_amount=quote.kj_rent,
            total_amount=quote.total,
        ).save()

    customer = receipt.customer
    if total > ZERO:
        ledger_service.post(
            customer=customer,
            type=Ledger.Type.CLEARANCE,
            direction=MovementDirection.DEBIT,
            amount=total,
            description=f"Clearance {clearance_no}",
            clearance_receipt=clearance,
            created_at=clearance_date,
        )
    if payment > ZERO:
        ledger_service.post(
            customer=customer,
            type=Ledger.Type.CLEARANCE,
            direction=MovementDirection.CREDIT,
            amount=payment,
            description=f"Payment received for {clearance_no} ({format_amount(payment)})",
            clearance_receipt=clearance,
            created_at=clearance_date,
        )
    if discount > ZERO:
        ledger_service.post(
            customer=customer,
            type=Ledger.Type.CLEARANCE,
            direction=MovementDirection.CREDIT,
            amount=discount,
            description=f"Discount on {clearance_no}",
            clearance_receipt=clearance,
            is_discount=True,
            created_at=clearance_date,
        )

    logger.info(
        "Clearance committed",
        extra={
            "clearance_id": clearance.id,
            "clearance_no": clearance_no,
            "entry_receipt_no": receipt.receipt_no,
            "customer_id": customer.pk,
            "lines": len(lines),
            "total_amount": str(total),
            "payment_amount": str(payment),
            "discount_amount": str(discount),
        },
    )
    return clearance
