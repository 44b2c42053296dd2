# inventory/api/serializers.py

"""
ENTRY RECEIPT SERIALIZERS

Input serializers only shape and type-check the payload; reference lookups,
KJ rules and lot guards live in inventory.services.entry_service.
"""

from __future__ import annotations

from decimal import Decimal

from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from inventory.models import EntryItem, EntryReceipt


# ============================================================
# INPUT
# ============================================================

class EntryItemInputSerializer(serializers.Serializer):
    productTypeId = serializers.IntegerField(source="product_type_id")
    productSubTypeId = serializers.IntegerField(
        source="product_sub_type_id", required=False, allow_null=True
    )
    packTypeId = serializers.IntegerField(source="pack_type_id")
    roomId = serializers.IntegerField(source="room_id")
    boxNo = serializers.CharField(source="box_no", required=False, allow_blank=True, max_length=64)
    marka = serializers.CharField(required=False, allow_blank=True, max_length=128)
    quantity = serializers.IntegerField(min_value=1)
    unitPrice = serializers.DecimalField(
        source="unit_price",
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )
    hasKhaliJali = serializers.BooleanField(source="has_khali_jali", required=False, default=False)
    kjQuantity = serializers.IntegerField(source="kj_quantity", min_value=0, required=False, default=0)
    kjUnitPrice = serializers.DecimalField(
        source="kj_unit_price",
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )


class EntryReceiptCreateSerializer(serializers.Serializer):
    customerId = serializers.IntegerField(source="customer_id")
    carNo = serializers.CharField(source="car_no", max_length=64)
    receiptNo = serializers.CharField(source="receipt_no", required=False, allow_blank=True, max_length=64)
    entryDate = serializers.DateTimeField(source="entry_date", required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    items = EntryItemInputSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required")
        return value


class EntryReceiptUpdateSerializer(serializers.Serializer):
    customerId = serializers.IntegerField(source="customer_id", required=False)
    carNo = serializers.CharField(source="car_no", required=False, max_length=64)
    entryDate = serializers.DateTimeField(source="entry_date", required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    items = EntryItemInputSerializer(many=True, required=False)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required")
        return value


# ============================================================
# OUTPUT
# ============================================================

class EntryItemSerializer(serializers.ModelSerializer):
    productTypeId = serializers.IntegerField(source="product_type_id", read_only=True)
    productTypeName = serializers.CharField(source="product_type.name", read_only=True)
    productSubTypeId = serializers.IntegerField(source="product_sub_type_id", read_only=True)
    productSubTypeName = serializers.CharField(
        source="product_sub_type.name", read_only=True, default=None
    )
    packTypeId = serializers.IntegerField(source="pack_type_id", read_only=True)
    packTypeName = serializers.CharField(source="pack_type.name", read_only=True)
    roomId = serializers.IntegerField(source="room_id", read_only=True)
    roomName = serializers.CharField(source="room.name", read_only=True)
    boxNo = serializers.CharField(source="box_no", read_only=True)
    remainingQuantity = serializers.IntegerField(source="remaining_quantity", read_only=True)
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=12, decimal_places=2, read_only=True)
    totalPrice = serializers.DecimalField(source="total_price", max_digits=14, decimal_places=2, read_only=True)
    hasKhaliJali = serializers.BooleanField(source="has_khali_jali", read_only=True)
    kjQuantity = serializers.IntegerField(source="kj_quantity", read_only=True)
    remainingKjQuantity = serializers.IntegerField(source="remaining_kj_quantity", read_only=True)
    kjUnitPrice = serializers.DecimalField(source="kj_unit_price", max_digits=12, decimal_places=2, read_only=True)
    kjTotal = serializers.DecimalField(source="kj_total", max_digits=14, decimal_places=2, read_only=True)
    grandTotal = serializers.DecimalField(source="grand_total", max_digits=14, decimal_places=2, read_only=True)
    isFullyCleared = serializers.BooleanField(source="is_fully_cleared", read_only=True)

    class Meta:
        model = EntryItem
        fields = [
            "id",
            "productTypeId",
            "productTypeName",
            "productSubTypeId",
            "productSubTypeName",
            "packTypeId",
            "packTypeName",
            "roomId",
            "roomName",
            "boxNo",
            "marka",
            "quantity",
            "remainingQuantity",
            "unitPrice",
            "totalPrice",
            "hasKhaliJali",
            "kjQuantity",
            "remainingKjQuantity",
            "kjUnitPrice",
            "kjTotal",
            "grandTotal",
            "isFullyCleared",
        ]


class CustomerBriefSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    fatherName = serializers.CharField(source="father_name")
    phone = serializers.CharField()
    village = serializers.CharField()


class EntryReceiptSerializer(serializers.ModelSerializer):
    receiptNo = serializers.CharField(source="receipt_no", read_only=True)
    customerId = serializers.IntegerField(source="customer_id", read_only=True)
    customer = CustomerBriefSerializer(read_only=True)
    carNo = serializers.CharField(source="car_no", read_only=True)
    entryDate = serializers.DateTimeField(source="entry_date", read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=14, decimal_places=2, read_only=True)
    items = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = EntryReceipt
        fields = [
            "id",
            "receiptNo",
            "customerId",
            "customer",
            "carNo",
            "entryDate",
            "totalAmount",
            "description",
            "items",
            "createdAt",
            "updatedAt",
        ]

    @extend_schema_field(EntryItemSerializer(many=True))
    def get_items(self, obj):
        items = obj.items.all()
        if self.context.get("open_lots_only"):
            items = [item for item in items if not item.is_fully_cleared]
        return EntryItemSerializer(items, many=True).data
