# customers/api/serializers.py

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from customers.models import Customer
from ledger.services.ledger_service import balance


class CustomerSerializer(serializers.ModelSerializer):
    fatherName = serializers.CharField(
        source="father_name", required=False, allow_blank=True, max_length=255
    )
    balance = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "fatherName",
            "phone",
            "address",
            "village",
            "balance",
            "createdAt",
            "updatedAt",
        ]
        extra_kwargs = {
            "phone": {"required": False, "allow_blank": True},
            "address": {"required": False, "allow_blank": True},
            "village": {"required": False, "allow_blank": True},
        }

    def get_balance(self, obj) -> Decimal:
        debit = getattr(obj, "total_debit", None)
        credit = getattr(obj, "total_credit", None)
        if debit is None or credit is None:
            return balance(obj)
        return debit - credit

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value
