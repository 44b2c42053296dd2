# reports/services/stock_reports.py

"""
OPERATIONAL REPORTS (READ-ONLY)

dashboard_stats()                 headline counters for the home screen
room_wise(room_id, mode, ...)     stock in one room grouped by customer and/or product
customer_wise(date_from, date_to) per-customer stock movement and ledger balance in a window

Quantities are whole units; money is Decimal. Date windows are inclusive
calendar dates evaluated in the store's local timezone.
"""

from __future__ import annotations

from datetime import date

from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from clearances.models import ClearanceReceipt, ClearedItem
from core.exceptions import NotFound, ValidationError
from core.models import Room
from core.money import ZERO, money
from customers.models import Customer
from inventory.models import EntryItem
from ledger.models import Ledger

ROOM_MODES = ("customer", "product", "both")


def dashboard_stats(today: date | None = None) -> dict:
    today = today or timezone.localdate()
    month_start = today.replace(day=1)

    monthly_revenue = ClearanceReceipt.objects.filter(
        clearance_date__date__gte=month_start,
        clearance_date__date__lte=today,
    ).aggregate(total=Sum("total_amount"))["total"]

    return {
        "total_customers": Customer.objects.count(),
        "active_entries": EntryItem.objects.filter(remaining_quantity__gt=0).count(),
        "clearances_today": ClearanceReceipt.objects.filter(clearance_date__date=today).count(),
        "monthly_revenue": money(monthly_revenue or ZERO),
    }


def _cleared_by_lot(lot_ids) -> dict[int, int]:
    rows = (
        ClearedItem.objects.filter(entry_item_id__in=lot_ids)
        .values("entry_item_id")
        .annotate(cleared=Coalesce(Sum("clear_quantity"), 0))
    )
    return {row["entry_item_id"]: row["cleared"] for row in rows}


def room_wise(room_id, *, mode: str = "customer", date_from: date | None = None, date_to: date | None = None) -> dict:
    if mode not in ROOM_MODES:
        raise ValidationError("mode must be customer, product or both", field="mode")

    try:
        room = Room.objects.get(pk=room_id)
    except (Room.DoesNotExist, ValueError, TypeError):
        raise NotFound("Room not found")

    lots = EntryItem.objects.filter(room=room).select_related(
        "entry_receipt__customer", "product_type", "product_sub_type"
    )
    if date_from and date_to:
        lots = lots.filter(
            entry_receipt__entry_date__date__gte=date_from,
            entry_receipt__entry_date__date__lte=date_to,
        )
    lots = list(lots)
    cleared = _cleared_by_lot([lot.pk for lot in lots])

    result = {"room": {"id": room.pk, "name": room.name, "type": room.room_type}}

    if mode in ("customer", "both"):
        by_customer: dict[int, dict] = {}
        for lot in lots:
            customer = lot.entry_receipt.customer
            row = by_customer.setdefault(
                customer.pk,
                {
                    "customer_id": customer.pk,
                    "customer_name": customer.name,
                    "stock_entered": 0,
                    "stock_cleared": 0,
                    "remaining_stock": 0,
                },
            )
            row["stock_entered"] += lot.quantity
            row["stock_cleared"] += cleared.get(lot.pk, 0)
            row["remaining_stock"] += lot.remaining_quantity
        result["customer_wise"] = sorted(by_customer.values(), key=lambda r: r["customer_name"].lower())

    if mode in ("product", "both"):
        by_product: dict[tuple, dict] = {}
        for lot in lots:
            key = (lot.product_type_id, lot.product_sub_type_id)
            row = by_product.setdefault(
                key,
                {
                    "product_type": lot.product_type.name,
                    "product_sub_type": lot.product_sub_type.name if lot.product_sub_type else None,
                    "entered_quantity": 0,
                    "cleared_quantity": 0,
                    "remaining_quantity": 0,
                },
            )
            row["entered_quantity"] += lot.quantity
            row["cleared_quantity"] += cleared.get(lot.pk, 0)
            row["remaining_quantity"] += lot.remaining_quantity
        result["product_wise"] = sorted(
            by_product.values(),
            key=lambda r: (r["product_type"].lower(), (r["product_sub_type"] or "").lower()),
        )

    return result


def customer_wise(date_from: date, date_to: date) -> dict:
    if date_from > date_to:
        raise ValidationError("fromDate must be before or equal to toDate", field="fromDate")

    entered = (
        EntryItem.objects.filter(
            entry_receipt__entry_date__date__gte=date_from,
            entry_receipt__entry_date__date__lte=date_to,
        )
        .values("entry_receipt__customer_id")
        .annotate(qty=Sum("quantity"))
    )
    cleared = (
        ClearedItem.objects.filter(
            clearance_receipt__clearance_date__date__gte=date_from,
            clearance_receipt__clearance_date__date__lte=date_to,
        )
        .values("clearance_receipt__customer_id")
        .annotate(qty=Sum("clear_quantity"))
    )
    movements = (
        Ledger.objects.filter(created_at__date__gte=date_from, created_at__date__lte=date_to)
        .values("customer_id")
        .annotate(debit=Sum("debit_amount"), credit=Sum("credit_amount"))
    )

    entered_by = {row["entry_receipt__customer_id"]: row["qty"] for row in entered}
    cleared_by = {row["clearance_receipt__customer_id"]: row["qty"] for row in cleared}
    balance_by = {row["customer_id"]: money(row["debit"]) - money(row["credit"]) for row in movements}

    active_ids = set(entered_by) | set(cleared_by)
    customers = Customer.objects.filter(pk__in=active_ids).order_by("name", "id")

    rows = []
    for customer in customers:
        entry_qty = entered_by.get(customer.pk, 0)
        cleared_qty = cleared_by.get(customer.pk, 0)
        rows.append(
            {
                "id": customer.pk,
                "name": customer.name,
                "entry_quantity": entry_qty,
                "cleared_quantity": cleared_qty,
                "remaining_quantity": entry_qty - cleared_qty,
                "balance": balance_by.get(customer.pk, ZERO),
            }
        )

    return {
        "customers": rows,
        "summary": {
            "total_customers": len(rows),
            "total_entry_quantity": sum(r["entry_quantity"] for r in rows),
            "total_cleared_quantity": sum(r["cleared_quantity"] for r in rows),
            "total_balance": sum((r["balance"] for r in rows), ZERO),
        },
        "filters": {"from_date": date_from, "to_date": date_to},
    }
