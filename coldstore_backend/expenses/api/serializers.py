# expenses/api/serializers.py

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from expenses.models import Expense, ExpenseCategory


class ExpenseCategorySerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source="is_active", required=False)
    expenseCount = serializers.IntegerField(read_only=True, required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = ExpenseCategory
        fields = ["id", "name", "description", "isActive", "expenseCount", "createdAt"]
        extra_kwargs = {"description": {"required": False, "allow_blank": True}}


class ExpenseSerializer(serializers.ModelSerializer):
    categoryId = serializers.PrimaryKeyRelatedField(
        source="category",
        queryset=ExpenseCategory.objects.all(),
    )
    categoryName = serializers.CharField(source="category.name", read_only=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Expense
        fields = [
            "id",
            "categoryId",
            "categoryName",
            "amount",
            "date",
            "description",
            "createdAt",
            "updatedAt",
        ]
        extra_kwargs = {
            "date": {"required": False},
            "description": {"required": False, "allow_blank": True},
        }

    def validate_categoryId(self, value):
        if self.instance is None and not value.is_active:
            raise serializers.ValidationError("Expense category is inactive")
        return value
