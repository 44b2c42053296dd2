# cashbook/api/serializers.py

"""
CASH BOOK SERIALIZERS

Query/input serializers shape the request; amount limits, the future-date
window and duplicate detection are enforced by the services.
"""

from __future__ import annotations

from rest_framework import serializers

from cashbook.models import ManualCashTransaction, OpeningBalanceAudit, TransactionType
from cashbook.services.aggregator import SORT_FIELDS, SORT_ORDERS, CashBookFilters


# ============================================================
# LIST QUERY
# ============================================================

class CashBookQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    dateFrom = serializers.DateField(source="date_from", required=False)
    dateTo = serializers.DateField(source="date_to", required=False)
    transactionType = serializers.CharField(source="transaction_type", required=False, allow_blank=True)
    source = serializers.CharField(required=False, allow_blank=True)
    customerId = serializers.IntegerField(source="customer_id", required=False, min_value=1)
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
    sortBy = serializers.ChoiceField(source="sort_by", choices=SORT_FIELDS, required=False, default="date")
    sortOrder = serializers.ChoiceField(source="sort_order", choices=SORT_ORDERS, required=False, default="desc")
    page = serializers.IntegerField(required=False, min_value=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100)

    def to_filters(self) -> CashBookFilters:
        data = dict(self.validated_data)
        data.pop("page", None)
        data.pop("limit", None)
        return CashBookFilters(**data)


# ============================================================
# ENTRIES
# ============================================================

class CashBookEntrySerializer(serializers.Serializer):
    id = serializers.CharField()
    source = serializers.CharField()
    date = serializers.DateField()
    transactionType = serializers.CharField(source="transaction_type")
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    description = serializers.CharField()
    customerId = serializers.IntegerField(source="customer_id", allow_null=True)
    customerName = serializers.CharField(source="customer_name", allow_null=True)
    customerPhone = serializers.CharField(source="customer_phone", allow_null=True)
    referenceId = serializers.IntegerField(source="reference_id", allow_null=True)
    referenceType = serializers.CharField(source="reference_type", allow_null=True)
    isEditable = serializers.BooleanField(source="is_editable")
    createdAt = serializers.DateTimeField(source="created_at")


class ManualTransactionSerializer(serializers.ModelSerializer):
    """Output shape of a manual transaction (same keys as a cash-book entry)."""

    id = serializers.SerializerMethodField()
    source = serializers.SerializerMethodField()
    transactionType = serializers.CharField(source="transaction_type")
    customerId = serializers.IntegerField(source="customer_id", allow_null=True)
    customerName = serializers.CharField(source="customer.name", default=None)
    customerPhone = serializers.CharField(source="customer.phone", default=None)
    isEditable = serializers.SerializerMethodField()
    createdBy = serializers.CharField(source="created_by")
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    class Meta:
        model = ManualCashTransaction
        fields = [
            "id",
            "source",
            "date",
            "transactionType",
            "amount",
            "description",
            "customerId",
            "customerName",
            "customerPhone",
            "isEditable",
            "createdBy",
            "createdAt",
            "updatedAt",
        ]

    def get_id(self, obj) -> str:
        return f"manual-{obj.pk}"

    def get_source(self, obj) -> str:
        return "manual"

    def get_isEditable(self, obj) -> bool:
        return True


class ManualTransactionCreateSerializer(serializers.Serializer):
    date = serializers.DateField()
    transactionType = serializers.ChoiceField(source="transaction_type", choices=TransactionType.choices)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = serializers.CharField(max_length=500, trim_whitespace=False)
    customerId = serializers.IntegerField(source="customer_id", required=False, allow_null=True)


class ManualTransactionUpdateSerializer(serializers.Serializer):
    description = serializers.CharField(required=False, max_length=500, trim_whitespace=False)
    amount = serializers.DecimalField(required=False, max_digits=12, decimal_places=2)
    customerId = serializers.IntegerField(source="customer_id", required=False, allow_null=True)


# ============================================================
# SUMMARY / AUDIT
# ============================================================

class DaySummarySerializer(serializers.Serializer):
    date = serializers.DateField()
    openingBalance = serializers.DecimalField(source="opening_balance", max_digits=16, decimal_places=2)
    totalInflows = serializers.DecimalField(source="total_inflows", max_digits=16, decimal_places=2)
    totalOutflows = serializers.DecimalField(source="total_outflows", max_digits=16, decimal_places=2)
    netFlow = serializers.DecimalField(source="net_flow", max_digits=16, decimal_places=2)
    closingBalance = serializers.DecimalField(source="closing_balance", max_digits=16, decimal_places=2)
    transactionCount = serializers.IntegerField(source="transaction_count")
    openingIsOverride = serializers.BooleanField(source="opening_is_override")
    isReconciled = serializers.BooleanField(source="is_reconciled")
    reconciledBy = serializers.CharField(source="reconciled_by", allow_blank=True)
    reconciledAt = serializers.DateTimeField(source="reconciled_at", allow_null=True)
    updatedAt = serializers.DateTimeField(source="updated_at", allow_null=True)


class OpeningBalanceSerializer(serializers.Serializer):
    date = serializers.DateField()
    openingBalance = serializers.DecimalField(source="opening_balance", max_digits=14, decimal_places=2)
    changeReason = serializers.CharField(source="change_reason", required=False, allow_blank=True, max_length=200)
    changedBy = serializers.CharField(source="changed_by", required=False, allow_blank=True, max_length=100)


class ReconcileSerializer(serializers.Serializer):
    isReconciled = serializers.BooleanField(source="is_reconciled")
    reconciledBy = serializers.CharField(source="reconciled_by", required=False, allow_blank=True, max_length=100)


class OpeningBalanceAuditSerializer(serializers.ModelSerializer):
    date = serializers.DateField(source="summary.date")
    oldOpeningBalance = serializers.DecimalField(source="old_opening_balance", max_digits=14, decimal_places=2)
    newOpeningBalance = serializers.DecimalField(source="new_opening_balance", max_digits=14, decimal_places=2)
    difference = serializers.DecimalField(max_digits=14, decimal_places=2)
    changeReason = serializers.CharField(source="change_reason")
    changedBy = serializers.CharField(source="changed_by")
    changeTimestamp = serializers.DateTimeField(source="change_timestamp")

    class Meta:
        model = OpeningBalanceAudit
        fields = [
            "id",
            "date",
            "oldOpeningBalance",
            "newOpeningBalance",
            "difference",
            "changeReason",
            "changedBy",
            "changeTimestamp",
        ]
