# core/models/reference.py

"""
REFERENCE DATA (WAREHOUSE CONFIGURATION)

Small lookup tables used by every entry item:
- ProductType     (Potato, Onion, Garlic ...)
- ProductSubType  (Cardinal, Red, White ...) scoped to a ProductType
- PackType        (Bori, Jali ...) with a default rent rate
- Room            (cold / hot storage rooms, can be deactivated)

Rows referenced by entry items are protected (on_delete=PROTECT on EntryItem).
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class _ValidatedModel(models.Model):
    """Runs full_clean() on every save (admin, API and services alike)."""

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)


class ProductType(_ValidatedModel):
    name = models.CharField(max_length=100, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Product type name is required"})


class ProductSubType(_ValidatedModel):
    product_type = models.ForeignKey(
        ProductType,
        on_delete=models.CASCADE,
        related_name="sub_types",
    )
    name = models.CharField(max_length=100)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["product_type__name", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["product_type", "name"],
                name="uniq_subtype_name_per_product_type",
            ),
        ]

    def __str__(self):
        return f"{self.product_type} / {self.name}"

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Product subtype name is required"})


class PackType(_ValidatedModel):
    name = models.CharField(max_length=100, unique=True)

    # Default rent per pack per day (PKR); entry items carry their own unit_price.
    rent_per_day = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(rent_per_day__gte=0),
                name="chk_packtype_rent_per_day_gte_zero",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Pack type name is required"})


class Room(_ValidatedModel):
    class RoomType(models.TextChoices):
        COLD = "COLD", "Cold"
        HOT = "HOT", "Hot"

    name = models.CharField(max_length=100, unique=True)
    room_type = models.CharField(
        max_length=8,
        choices=RoomType.choices,
        default=RoomType.COLD,
    )
    capacity = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Room name is required"})
        if self.capacity is not None and self.capacity <= 0:
            raise ValidationError({"capacity": "Capacity must be a positive number"})
