# ledger/api/serializers.py

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from ledger.models import MovementDirection


class DirectCashCreateSerializer(serializers.Serializer):
    customerId = serializers.IntegerField(source="customer_id")
    type = serializers.ChoiceField(choices=MovementDirection.choices)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    description = serializers.CharField(max_length=500)
    date = serializers.DateField(required=False, allow_null=True)

    def validate_description(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Description is required")
        return value


class LedgerEntrySerializer(serializers.Serializer):
    """One ledger row, optionally with the running balance of a statement."""

    id = serializers.IntegerField(source="entry.id")
    customerId = serializers.IntegerField(source="entry.customer_id")
    type = serializers.CharField(source="entry.type")
    direction = serializers.CharField(source="entry.direction")
    debitAmount = serializers.DecimalField(source="entry.debit_amount", max_digits=14, decimal_places=2)
    creditAmount = serializers.DecimalField(source="entry.credit_amount", max_digits=14, decimal_places=2)
    isDiscount = serializers.BooleanField(source="entry.is_discount")
    description = serializers.CharField(source="entry.description")
    entryReceiptId = serializers.IntegerField(source="entry.entry_receipt_id", allow_null=True)
    entryReceiptNo = serializers.CharField(source="entry.entry_receipt.receipt_no", default=None)
    clearanceReceiptId = serializers.IntegerField(source="entry.clearance_receipt_id", allow_null=True)
    clearanceNo = serializers.CharField(source="entry.clearance_receipt.clearance_no", default=None)
    cashTransactionId = serializers.IntegerField(source="entry.cash_transaction_id", allow_null=True)
    isSystemGenerated = serializers.BooleanField(source="entry.is_system_generated")
    runningBalance = serializers.DecimalField(
        source="running_balance", max_digits=16, decimal_places=2, default=None
    )
    createdAt = serializers.DateTimeField(source="entry.created_at")
