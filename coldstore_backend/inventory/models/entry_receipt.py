# inventory/models/entry_receipt.py

"""
ENTRY RECEIPT (INBOUND SHIPMENT)

One vehicle unloading goods for one customer on one instant.

RULES:
- receipt_no is unique; auto-generated as CS-YYYYMMDD-XXXX when not supplied.
- total_amount = Σ item.grand_total (service-maintained).
- Items (lots) are created / replaced only through inventory.services.entry_service.
- A receipt whose lots have been (partially) cleared cannot be deleted.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class EntryReceipt(models.Model):
    receipt_no = models.CharField(max_length=64, unique=True)

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="entry_receipts",
    )

    car_no = models.CharField(max_length=64)
    entry_date = models.DateTimeField(default=timezone.now, db_index=True)

    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    description = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-entry_date", "-id"]
        indexes = [
            models.Index(fields=["customer", "entry_date"]),
        ]

    def __str__(self):
        return self.receipt_no

    def clean(self):
        self.receipt_no = (self.receipt_no or "").strip()
        if not self.receipt_no:
            raise ValidationError({"receipt_no": "Receipt number is required"})

        self.car_no = (self.car_no or "").strip()
        if not self.car_no:
            raise ValidationError({"car_no": "Car number is required"})

        if self.total_amount is not None and self.total_amount < 0:
            raise ValidationError({"total_amount": "total_amount cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def has_clearances(self) -> bool:
        return self.clearance_receipts.exists()

    def delete(self, *args, **kwargs):
        if self.has_clearances:
            raise ValidationError(
                "Cannot delete entry receipt: it has clearance receipts. "
                "Clearances are permanent records."
            )
        return super().delete(*args, **kwargs)
