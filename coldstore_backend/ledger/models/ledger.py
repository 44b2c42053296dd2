# ledger/models/ledger.py

"""
CUSTOMER LEDGER (SINGLE-BALANCE MODEL)

One row = one money movement against one customer.

SIGN CONVENTION (MovementDirection):
- DEBIT  increases what the customer owes us
         (inventory added, rent charged on clearance, cash/loan given out)
- CREDIT decreases what the customer owes us
         (cash received, discount granted)

RULES:
- Exactly one of debit_amount / credit_amount is non-zero (DB check constraint).
- Rows are append-only: an existing row is never updated.
- Rows backed by an entry or clearance receipt are system-generated and
  cannot be deleted directly (ProtectedLedgerEntry).
- direct_cash rows may be deleted (ledger API or their manual cash-book
  transaction).
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from ledger.services.exceptions import ProtectedLedgerEntry


class MovementDirection(models.TextChoices):
    DEBIT = "debit", "Debit (customer owes more)"
    CREDIT = "credit", "Credit (customer owes less)"


class Ledger(models.Model):
    class Type(models.TextChoices):
        ADDING_INVENTORY = "adding_inventory", "Adding inventory"
        CLEARANCE = "clearance", "Clearance"
        DIRECT_CASH = "direct_cash", "Direct cash"

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )

    type = models.CharField(max_length=32, choices=Type.choices, db_index=True)

    # Back-references (system-generated rows). Entry receipt deletion is only
    # allowed before any clearance and takes its ledger rows with it.
    entry_receipt = models.ForeignKey(
        "inventory.EntryReceipt",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="ledger_entries",
    )
    clearance_receipt = models.ForeignKey(
        "clearances.ClearanceReceipt",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="ledger_entries",
    )

    # Set when the row was created by a manual cash-book transaction.
    cash_transaction = models.ForeignKey(
        "cashbook.ManualCashTransaction",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="ledger_entries",
    )

    debit_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    credit_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    is_discount = models.BooleanField(default=False)
    description = models.CharField(max_length=500)

    # Movement instant (business date); settable for back-dated cash entries.
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    recorded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["customer", "created_at"]),
            models.Index(fields=["type", "created_at"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(debit_amount__gt=0, credit_amount=0)
                    | Q(debit_amount=0, credit_amount__gt=0)
                ),
                name="chk_ledger_exactly_one_side",
            ),
        ]

    def __str__(self):
        side = f"Dr {self.debit_amount}" if self.debit_amount else f"Cr {self.credit_amount}"
        return f"{self.customer_id} | {self.type} | {side}"

    @property
    def direction(self) -> str:
        return MovementDirection.DEBIT if self.debit_amount > 0 else MovementDirection.CREDIT

    @property
    def amount(self) -> Decimal:
        return self.debit_amount if self.debit_amount > 0 else self.credit_amount

    @property
    def is_system_generated(self) -> bool:
        return bool(self.entry_receipt_id or self.clearance_receipt_id)

    def clean(self):
        debit = self.debit_amount or Decimal("0.00")
        credit = self.credit_amount or Decimal("0.00")

        if debit < 0 or credit < 0:
            raise ValidationError("Ledger amounts cannot be negative")
        if (debit > 0) == (credit > 0):
            raise ValidationError("Exactly one of debit_amount / credit_amount must be non-zero")

        if self.type == self.Type.DIRECT_CASH and self.is_system_generated:
            raise ValidationError("direct_cash rows cannot reference a receipt")

        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError({"description": "Description is required"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Ledger rows are immutable once posted")
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.is_system_generated:
            raise ProtectedLedgerEntry()
        return super().delete(*args, **kwargs)
