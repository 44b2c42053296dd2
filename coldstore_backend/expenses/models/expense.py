# expenses/models/expense.py

"""
EXPENSES

Operating expenses of the cold store (electricity, labour, diesel ...).

- ExpenseCategory names are unique; inactive categories cannot take new expenses.
- Every Expense is a pure cash OUTFLOW for the cash book.
- Not coupled to inventory or to customer balances.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone


class ExpenseCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.CharField(max_length=500, blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "expense categories"

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if len(self.name) < 2:
            raise ValidationError({"name": "Category name must be at least 2 characters"})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)


class Expense(models.Model):
    category = models.ForeignKey(
        ExpenseCategory,
        on_delete=models.PROTECT,
        related_name="expenses",
    )

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    date = models.DateField(default=timezone.localdate, db_index=True)
    description = models.CharField(max_length=500, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="chk_expense_amount_gt_zero",
            ),
        ]

    def __str__(self):
        return f"{self.date} | {self.category} | {self.amount}"

    def clean(self):
        if self.amount is None or self.amount <= Decimal("0.00"):
            raise ValidationError({"amount": "Amount must be greater than zero"})

        if self.category_id and self._state.adding and not self.category.is_active:
            raise ValidationError({"category": "Expense category is inactive"})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)
