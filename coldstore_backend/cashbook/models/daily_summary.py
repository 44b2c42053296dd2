# cashbook/models/daily_summary.py

"""
DAILY CASH SUMMARY + OPENING BALANCE AUDIT

DailyCashSummary stores only what a person decides:
- opening_balance  explicit override for the day (NULL = carry forward)
- is_reconciled / reconciled_by / reconciled_at

Totals and the closing balance are computed on read
(cashbook.services.summary_service); they are never persisted, so a late
expense or clearance can never leave a stale closing balance behind.

OpeningBalanceAudit rows are append-only.
"""

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class DailyCashSummary(models.Model):
    date = models.DateField(unique=True)

    opening_balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Explicit opening balance override (NULL = previous day's closing)",
    )

    is_reconciled = models.BooleanField(default=False)
    reconciled_by = models.CharField(max_length=100, blank=True, default="")
    reconciled_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.CheckConstraint(
                condition=Q(opening_balance__isnull=True) | Q(opening_balance__gte=0),
                name="chk_dailysummary_opening_gte_zero",
            ),
        ]

    def __str__(self):
        return f"Cash summary {self.date}"

    def clean(self):
        if self.opening_balance is not None and self.opening_balance < 0:
            raise ValidationError({"opening_balance": "Opening balance cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)


class OpeningBalanceAudit(models.Model):
    summary = models.ForeignKey(
        DailyCashSummary,
        on_delete=models.CASCADE,
        related_name="audits",
    )

    old_opening_balance = models.DecimalField(max_digits=14, decimal_places=2)
    new_opening_balance = models.DecimalField(max_digits=14, decimal_places=2)
    change_reason = models.CharField(max_length=200, default="Opening balance adjustment")
    changed_by = models.CharField(max_length=100, default="System")
    change_timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-change_timestamp", "-id"]

    def __str__(self):
        return f"{self.summary.date}: {self.old_opening_balance} -> {self.new_opening_balance}"

    @property
    def difference(self):
        return self.new_opening_balance - self.old_opening_balance

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Opening balance audit rows are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Opening balance audit rows cannot be deleted")
