# clearances/models/clearance_receipt.py

"""
CLEARANCE RECEIPT (OUTBOUND EVENT)

Goods leaving storage against one entry receipt, with rent charged.

RULES:
- Created ONLY by clearances.services.clearance_allocator (atomic commit).
- Immutable once created: no update, no delete (no reversal path).
- total_amount = Σ cleared_item.total_amount
- payment_amount > 0 makes the receipt a cash-book `clearance` inflow.
- discount_amount <= total_amount.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone


class ClearanceReceipt(models.Model):
    clearance_no = models.CharField(max_length=64, unique=True)

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="clearance_receipts",
    )
    entry_receipt = models.ForeignKey(
        "inventory.EntryReceipt",
        on_delete=models.PROTECT,
        related_name="clearance_receipts",
    )

    car_no = models.CharField(max_length=64, blank=True, default="")
    clearance_date = models.DateTimeField(default=timezone.now, db_index=True)

    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    payment_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    description = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-clearance_date", "-id"]
        indexes = [
            models.Index(fields=["customer", "clearance_date"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_amount__gte=0) & Q(payment_amount__gte=0) & Q(discount_amount__gte=0),
                name="chk_clearance_amounts_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(discount_amount__lte=F("total_amount")),
                name="chk_clearance_discount_lte_total",
            ),
        ]

    def __str__(self):
        return self.clearance_no

    def clean(self):
        if (self.discount_amount or 0) > (self.total_amount or 0):
            raise ValidationError({"discount_amount": "Discount cannot exceed the clearance total"})

        if self.entry_receipt_id and self.customer_id:
            if self.entry_receipt.customer_id != self.customer_id:
                raise ValidationError({"customer": "Clearance customer must match the entry receipt customer"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Clearance receipts are immutable once created")
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Clearance receipts are permanent records and cannot be deleted")
