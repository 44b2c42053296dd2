# customers/models/customer.py

"""
CUSTOMER

Identity + contact info for a depositor (farmer / trader).

RULES:
- Balance is DERIVED, never stored:
      balance = Σ ledger.debit_amount − Σ ledger.credit_amount
  Positive balance = customer owes us. Negative = we owe the customer.
- A customer with receipts or ledger history cannot be deleted
  (financial records must outlive the contact card).
"""

import re

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce

PHONE_RE = re.compile(r"^(\+92|0)?[0-9]{10}$")


class CustomerQuerySet(models.QuerySet):
    def with_balance(self):
        zero = Value(0, output_field=DecimalField(max_digits=14, decimal_places=2))
        return self.annotate(
            total_debit=Coalesce(Sum("ledger_entries__debit_amount"), zero),
            total_credit=Coalesce(Sum("ledger_entries__credit_amount"), zero),
        )


class Customer(models.Model):
    name = models.CharField(max_length=255, db_index=True)
    father_name = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="", db_index=True)
    address = models.CharField(max_length=500, blank=True, default="")
    village = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomerQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["name"]),
            models.Index(fields=["village"]),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Name is required"})

        self.phone = (self.phone or "").strip()
        if self.phone and not PHONE_RE.match(self.phone):
            raise ValidationError({"phone": "Invalid phone number format"})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.entry_receipts.exists() or self.ledger_entries.exists():
            raise ValidationError(
                "Cannot delete customer: entry receipts or ledger history exist."
            )
        return super().delete(*args, **kwargs)
