# cashbook/models/manual_transaction.py

"""
MANUAL CASH TRANSACTION

The only cash-book rows entered directly (cash counted in / paid out that
no receipt or expense explains). Editable and deletable through
cashbook.services.manual_service; every other cash-book source is read-only.

When linked to a customer, the service keeps exactly one direct_cash
ledger row in step with it (inflow -> CREDIT, outflow -> DEBIT).
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class TransactionType(models.TextChoices):
    INFLOW = "inflow", "Inflow"
    OUTFLOW = "outflow", "Outflow"


class ManualCashTransaction(models.Model):
    date = models.DateField(db_index=True)
    transaction_type = models.CharField(max_length=8, choices=TransactionType.choices)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    description = models.CharField(max_length=500)

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="manual_cash_transactions",
    )

    created_by = models.CharField(max_length=100, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_manualcash_amount_gt_zero",
            ),
        ]

    def __str__(self):
        return f"{self.date} | {self.transaction_type} | {self.amount}"

    def clean(self):
        if self.amount is None or self.amount <= Decimal("0.00"):
            raise ValidationError({"amount": "Amount must be positive"})

        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError({"description": "Description cannot be only whitespace"})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)
