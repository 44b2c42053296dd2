# inventory/services/entry_service.py

"""
ENTRY RECEIPT SERVICE

Purpose:
- Create an entry receipt with its lots and post the inventory debit.
- Edit a receipt while its lots are untouched (guarded by the lot tracker).
- Delete a receipt that has never been cleared.

LEDGER:
- create: one `adding_inventory` DEBIT for the receipt total.
- edit:   the ledger is append-only, so a total change posts an adjustment
          row (DEBIT for an increase, CREDIT for a decrease).
- delete: the receipt's ledger rows go with it (FK cascade).

Reference data (types, packs, rooms) is resolved through an injected
ReferenceDataCache; one is constructed when the caller does not pass one.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from core.exceptions import NotFound, ValidationError
from core.money import ZERO, money, to_int_qty
from core.receipt_numbers import ENTRY_PREFIX, next_receipt_number
from core.reference_data import ReferenceDataCache
from inventory.models import EntryItem, EntryReceipt
from inventory.services import lot_tracker
from inventory.services.exceptions import LotLocked, ReceiptNotFound
from ledger.models import Ledger, MovementDirection
from ledger.services import ledger_service

logger = logging.getLogger(__name__)


# ============================================================
# ITEM BUILDING
# ============================================================

def _build_item(raw: dict, index: int, reference: ReferenceDataCache) -> EntryItem:
    prefix = f"items[{index}]"

    product_type = reference.product_type(raw.get("product_type_id"), field=f"{prefix}.productTypeId")
    sub_type = reference.product_sub_type(
        raw.get("product_sub_type_id"),
        product_type=product_type,
        field=f"{prefix}.productSubTypeId",
    )
    pack_type = reference.pack_type(raw.get("pack_type_id"), field=f"{prefix}.packTypeId")
    room = reference.room(raw.get("room_id"), field=f"{prefix}.roomId")

    quantity = to_int_qty(raw.get("quantity"), field=f"{prefix}.quantity")
    if quantity <= 0:
        raise ValidationError("Quantity must be greater than 0", field=f"{prefix}.quantity")

    unit_price = raw.get("unit_price")
    unit_price = pack_type.rent_per_day if unit_price in (None, "") else money(unit_price)
    if unit_price < ZERO:
        raise ValidationError("Unit price must be 0 or greater", field=f"{prefix}.unitPrice")

    has_kj = bool(raw.get("has_khali_jali"))
    kj_quantity = 0
    kj_unit_price = ZERO
    if has_kj:
        kj_quantity = to_int_qty(raw.get("kj_quantity"), field=f"{prefix}.kjQuantity")
        kj_unit_price = money(raw.get("kj_unit_price"))
        if kj_quantity <= 0 or kj_unit_price < ZERO:
            raise ValidationError(
                "Khali Jali quantity and unit price are required when Khali Jali is enabled",
                field=f"{prefix}.hasKhaliJali",
            )

    return EntryItem(
        product_type=product_type,
        product_sub_type=sub_type,
        pack_type=pack_type,
        room=room,
        box_no=(raw.get("box_no") or "").strip(),
        marka=(raw.get("marka") or "").strip(),
        quantity=quantity,
        remaining_quantity=quantity,
        unit_price=unit_price,
        has_khali_jali=has_kj,
        kj_quantity=kj_quantity,
        remaining_kj_quantity=kj_quantity,
        kj_unit_price=kj_unit_price,
    )


def _build_items(items, reference: ReferenceDataCache) -> list[EntryItem]:
    if not items:
        raise ValidationError("At least one item is required", field="items")
    return [_build_item(raw, i, reference) for i, raw in enumerate(items)]


def _save_items(receipt: EntryReceipt, items: list[EntryItem]) -> Decimal:
    total = ZERO
    for item in items:
        item.entry_receipt = receipt
        item.save()
        total += item.grand_total
    return money(total)


# ============================================================
# LOOKUPS
# ============================================================

def get_by_receipt_no(receipt_no: str) -> EntryReceipt:
    """Exact receipt-number match (no partial / case-folded matching)."""
    receipt_no = (receipt_no or "").strip()
    try:
        return EntryReceipt.objects.select_related("customer").get(receipt_no=receipt_no)
    except EntryReceipt.DoesNotExist:
        raise ReceiptNotFound(f"Entry receipt {receipt_no!r} not found")


def _get_for_update(receipt_id) -> EntryReceipt:
    try:
        return EntryReceipt.objects.select_for_update().select_related("customer").get(pk=receipt_id)
    except EntryReceipt.DoesNotExist:
        raise NotFound("Entry receipt not found")


# ============================================================
# CREATE
# ============================================================

@transaction.atomic
def create_entry_receipt(
    *,
    customer,
    car_no: str,
    items,
    receipt_no: str | None = None,
    entry_date=None,
    description: str = "",
    reference: ReferenceDataCache | None = None,
) -> EntryReceipt:
    reference = reference or ReferenceDataCache()
    built = _build_items(items, reference)

    receipt = EntryReceipt(
        customer=customer,
        car_no=car_no,
        description=description or "",
    )
    if entry_date is not None:
        receipt.entry_date = entry_date

    receipt_no = (receipt_no or "").strip()
    if receipt_no:
        if EntryReceipt.objects.filter(receipt_no=receipt_no).exists():
            raise ValidationError("Receipt number already exists", field="receiptNo")
        receipt.receipt_no = receipt_no
    else:
        receipt.receipt_no = next_receipt_number(
            model=EntryReceipt,
            field="receipt_no",
            prefix=ENTRY_PREFIX,
            instant=receipt.entry_date,
        )

    receipt.save()
    receipt.total_amount = _save_items(receipt, built)
    receipt.save(update_fields=["total_amount", "updated_at"])

    if receipt.total_amount > ZERO:
        ledger_service.post(
            customer=customer,
            type=Ledger.Type.ADDING_INVENTORY,
            direction=MovementDirection.DEBIT,
            amount=receipt.total_amount,
            description=f"Entry Receipt: {receipt.receipt_no}",
            entry_receipt=receipt,
            created_at=receipt.entry_date,
        )

    logger.info(
        "Entry receipt created",
        extra={
            "receipt_id": receipt.id,
            "receipt_no": receipt.receipt_no,
            "customer_id": customer.pk,
            "items": len(built),
            "total_amount": str(receipt.total_amount),
        },
    )
    return receipt


# ============================================================
# UPDATE
# ============================================================

@transaction.atomic
def update_entry_receipt(
    receipt_id,
    *,
    car_no: str | None = None,
    description: str | None = None,
    entry_date=None,
    items=None,
    reference: ReferenceDataCache | None = None,
) -> EntryReceipt:
    """
    Header fields car_no / description are always editable.
    entry_date and items are editable only while every lot is untouched
    (a changed entry date would re-price rent already charged).
    """
    receipt = _get_for_update(receipt_id)

    if car_no is not None:
        receipt.car_no = car_no
    if description is not None:
        receipt.description = description

    touches_lots = entry_date is not None or items is not None
    if touches_lots:
        existing = list(EntryItem.objects.select_for_update().filter(entry_receipt=receipt).order_by("pk"))
        for lot in existing:
            lot_tracker.assert_editable(lot)
        if receipt.has_clearances:
            raise LotLocked("Entry receipt has clearances and its lots can no longer be edited")

        if entry_date is not None:
            receipt.entry_date = entry_date

    receipt.save()

    if items is not None:
        reference = reference or ReferenceDataCache()
        built = _build_items(items, reference)

        old_total = receipt.total_amount
        EntryItem.objects.filter(entry_receipt=receipt).delete()
        new_total = _save_items(receipt, built)

        receipt.total_amount = new_total
        receipt.save(update_fields=["total_amount", "updated_at"])

        diff = new_total - old_total
        if diff != ZERO:
            ledger_service.post(
                customer=receipt.customer,
                type=Ledger.Type.ADDING_INVENTORY,
                direction=MovementDirection.DEBIT if diff > ZERO else MovementDirection.CREDIT,
                amount=abs(diff),
                description=f"Entry Receipt: {receipt.receipt_no} (adjusted)",
                entry_receipt=receipt,
            )

        logger.info(
            "Entry receipt items replaced",
            extra={
                "receipt_id": receipt.id,
                "old_total": str(old_total),
                "new_total": str(new_total),
            },
        )

    return receipt


# ============================================================
# DELETE
# ============================================================

@transaction.atomic
def delete_entry_receipt(receipt_id) -> None:
    receipt = _get_for_update(receipt_id)

    if receipt.has_clearances:
        raise LotLocked(
            "Cannot delete entry receipt with existing clearances. Clearances are permanent records."
        )

    receipt_no = receipt.receipt_no
    receipt.delete()

    logger.info("Entry receipt deleted", extra={"receipt_id": receipt_id, "receipt_no": receipt_no})
