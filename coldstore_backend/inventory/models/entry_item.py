# inventory/models/entry_item.py

"""
ENTRY ITEM (LOT)

The unit of storage: one product / pack / room line on an entry receipt.

QUANTITY MODEL:
- quantity is the original count (set on create; replaced only by a guarded edit)
- remaining_quantity is mutated ONLY by the lot tracker (clearance decrement)
- 0 <= remaining_quantity <= quantity                      (DB + clean())
- KJ (khali jali / empty crate allowance) is tracked independently:
  0 <= remaining_kj_quantity <= kj_quantity                 (DB + clean())

PRICING SNAPSHOT:
- unit_price    rent per unit per day
- total_price   quantity × unit_price
- kj_total      kj_quantity × kj_unit_price
- grand_total   total_price + kj_total

A lot referenced by a ClearedItem can never be deleted.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from .entry_receipt import EntryReceipt


class EntryItem(models.Model):
    entry_receipt = models.ForeignKey(
        EntryReceipt,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product_type = models.ForeignKey(
        "core.ProductType",
        on_delete=models.PROTECT,
        related_name="entry_items",
    )
    product_sub_type = models.ForeignKey(
        "core.ProductSubType",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="entry_items",
    )
    pack_type = models.ForeignKey(
        "core.PackType",
        on_delete=models.PROTECT,
        related_name="entry_items",
    )
    room = models.ForeignKey(
        "core.Room",
        on_delete=models.PROTECT,
        related_name="entry_items",
    )

    box_no = models.CharField(max_length=64, blank=True, default="")
    marka = models.CharField(max_length=128, blank=True, default="")

    quantity = models.PositiveIntegerField()
    remaining_quantity = models.PositiveIntegerField(
        help_text="Remaining quantity (lot tracker managed only)",
    )

    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    has_khali_jali = models.BooleanField(default=False)
    kj_quantity = models.PositiveIntegerField(default=0)
    remaining_kj_quantity = models.PositiveIntegerField(default=0)
    kj_unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    kj_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    grand_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["room"]),
            models.Index(fields=["product_type"]),
            models.Index(fields=["remaining_quantity"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_entryitem_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(remaining_quantity__lte=F("quantity")),
                name="chk_entryitem_remaining_lte_quantity",
            ),
            models.CheckConstraint(
                condition=Q(remaining_kj_quantity__lte=F("kj_quantity")),
                name="chk_entryitem_remaining_kj_lte_kj_quantity",
            ),
            models.CheckConstraint(
                condition=Q(unit_price__gte=0) & Q(kj_unit_price__gte=0),
                name="chk_entryitem_prices_gte_zero",
            ),
        ]

    def __str__(self):
        return f"{self.entry_receipt_id} | lot {self.pk} | {self.remaining_quantity}/{self.quantity}"

    # -------------------------------------------------
    # DERIVED STATE
    # -------------------------------------------------

    @property
    def is_fully_cleared(self) -> bool:
        kj_done = (not self.has_khali_jali) or self.remaining_kj_quantity == 0
        return self.remaining_quantity == 0 and kj_done

    def recompute_totals(self) -> None:
        self.total_price = (Decimal(self.quantity) * self.unit_price).quantize(Decimal("0.01"))
        if self.has_khali_jali:
            self.kj_total = (Decimal(self.kj_quantity) * self.kj_unit_price).quantize(Decimal("0.01"))
        else:
            self.kj_total = Decimal("0.00")
        self.grand_total = self.total_price + self.kj_total

    # -------------------------------------------------
    # VALIDATION
    # -------------------------------------------------

    def clean(self):
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError({"quantity": "Quantity must be greater than 0"})

        if self.remaining_quantity is None:
            self.remaining_quantity = self.quantity

        if self.remaining_quantity > self.quantity:
            raise ValidationError(
                {"remaining_quantity": "remaining_quantity cannot exceed quantity"}
            )

        if self.unit_price is None or self.unit_price < 0:
            raise ValidationError({"unit_price": "Unit price must be 0 or greater"})

        if self.has_khali_jali:
            if not self.kj_quantity or self.kj_quantity <= 0:
                raise ValidationError(
                    {"kj_quantity": "Khali Jali quantity is required when Khali Jali is enabled"}
                )
            if self.kj_unit_price is None or self.kj_unit_price < 0:
                raise ValidationError(
                    {"kj_unit_price": "Khali Jali unit price must be 0 or greater"}
                )
        else:
            if self.kj_quantity or self.remaining_kj_quantity:
                raise ValidationError(
                    {"kj_quantity": "kj_quantity requires has_khali_jali"}
                )

        if self.remaining_kj_quantity > self.kj_quantity:
            raise ValidationError(
                {"remaining_kj_quantity": "remaining_kj_quantity cannot exceed kj_quantity"}
            )

        if self.product_sub_type_id and self.product_type_id:
            if self.product_sub_type.product_type_id != self.product_type_id:
                raise ValidationError(
                    {"product_sub_type": "Product subtype does not belong to product type"}
                )

    def save(self, *args, **kwargs):
        if self._state.adding and self.remaining_quantity is None:
            self.remaining_quantity = self.quantity
        self.recompute_totals()
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """
        Audit safety: a lot with clearance history must never be deleted.
        """
        if self.cleared_items.exists():
            raise ValidationError("Cannot delete entry item: it has clearance history.")
        return super().delete(*args, **kwargs)
