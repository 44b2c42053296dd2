# clearances/models/cleared_item.py

"""
CLEARED ITEM

One lot line of a clearance receipt with the rent actually charged.

Snapshot fields (never recomputed):
- days_stored, unit_price, kj_unit_price
- rent_amount = clear_quantity × days_stored × unit_price
- kj_amount   = clear_kj_quantity × kj_unit_price
- total_amount = rent_amount + kj_amount

Immutable. The referenced lot is PROTECTed from deletion.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from .clearance_receipt import ClearanceReceipt


class ClearedItem(models.Model):
    clearance_receipt = models.ForeignKey(
        ClearanceReceipt,
        on_delete=models.CASCADE,
        related_name="cleared_items",
    )
    entry_item = models.ForeignKey(
        "inventory.EntryItem",
        on_delete=models.PROTECT,
        related_name="cleared_items",
    )

    clear_quantity = models.PositiveIntegerField(default=0)
    clear_kj_quantity = models.PositiveIntegerField(default=0)

    days_stored = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    kj_unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    rent_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    kj_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(clear_quantity__gt=0) | Q(clear_kj_quantity__gt=0),
                name="chk_cleareditem_clears_something",
            ),
            models.CheckConstraint(
                condition=Q(days_stored__gte=1),
                name="chk_cleareditem_days_stored_gte_one",
            ),
        ]

    def __str__(self):
        return f"{self.clearance_receipt_id} | lot {self.entry_item_id} | {self.clear_quantity}"

    def clean(self):
        if self.total_amount != (self.rent_amount or 0) + (self.kj_amount or 0):
            raise ValidationError({"total_amount": "total_amount must equal rent_amount + kj_amount"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Cleared items are immutable once created")
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Cleared items are permanent records and cannot be deleted")
