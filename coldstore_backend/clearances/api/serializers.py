# clearances/api/serializers.py

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from clearances.models import ClearanceReceipt, ClearedItem


class ClearanceLineInputSerializer(serializers.Serializer):
    entryItemId = serializers.IntegerField(source="entry_item_id")
    quantityCleared = serializers.IntegerField(source="quantity_cleared", min_value=0, default=0)
    kjQuantityCleared = serializers.IntegerField(source="kj_quantity_cleared", min_value=0, default=0)


class ClearanceCreateSerializer(serializers.Serializer):
    customerId = serializers.IntegerField(source="customer_id")
    entryReceiptNo = serializers.CharField(source="entry_receipt_no", max_length=64)
    carNo = serializers.CharField(source="car_no", required=False, allow_blank=True, default="", max_length=64)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    clearanceDate = serializers.DateTimeField(source="clearance_date", required=False, allow_null=True)
    receiptNo = serializers.CharField(source="clearance_no", required=False, allow_blank=True, max_length=64)
    paymentAmount = serializers.DecimalField(
        source="payment_amount",
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )
    discountAmount = serializers.DecimalField(
        source="discount_amount",
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )
    # Emptiness is a domain error (EMPTY_SELECTION), checked by the allocator.
    items = ClearanceLineInputSerializer(many=True, allow_empty=True, default=list)


class ClearedItemSerializer(serializers.ModelSerializer):
    entryItemId = serializers.IntegerField(source="entry_item_id", read_only=True)
    productTypeName = serializers.CharField(source="entry_item.product_type.name", read_only=True)
    packTypeName = serializers.CharField(source="entry_item.pack_type.name", read_only=True)
    roomName = serializers.CharField(source="entry_item.room.name", read_only=True)
    marka = serializers.CharField(source="entry_item.marka", read_only=True)
    clearQuantity = serializers.IntegerField(source="clear_quantity", read_only=True)
    clearKjQuantity = serializers.IntegerField(source="clear_kj_quantity", read_only=True)
    daysStored = serializers.IntegerField(source="days_stored", read_only=True)
    unitPrice = serializers.DecimalField(source="unit_price", max_digits=12, decimal_places=2, read_only=True)
    kjUnitPrice = serializers.DecimalField(source="kj_unit_price", max_digits=12, decimal_places=2, read_only=True)
    rentAmount = serializers.DecimalField(source="rent_amount", max_digits=14, decimal_places=2, read_only=True)
    kjAmount = serializers.DecimalField(source="kj_amount", max_digits=14, decimal_places=2, read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = ClearedItem
        fields = [
            "id",
            "entryItemId",
            "productTypeName",
            "packTypeName",
            "roomName",
            "marka",
            "clearQuantity",
            "clearKjQuantity",
            "daysStored",
            "unitPrice",
            "kjUnitPrice",
            "rentAmount",
            "kjAmount",
            "totalAmount",
        ]


class ClearanceReceiptSerializer(serializers.ModelSerializer):
    clearanceNo = serializers.CharField(source="clearance_no", read_only=True)
    customerId = serializers.IntegerField(source="customer_id", read_only=True)
    customerName = serializers.CharField(source="customer.name", read_only=True)
    entryReceiptId = serializers.IntegerField(source="entry_receipt_id", read_only=True)
    entryReceiptNo = serializers.CharField(source="entry_receipt.receipt_no", read_only=True)
    carNo = serializers.CharField(source="car_no", read_only=True)
    clearanceDate = serializers.DateTimeField(source="clearance_date", read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=14, decimal_places=2, read_only=True)
    paymentAmount = serializers.DecimalField(source="payment_amount", max_digits=14, decimal_places=2, read_only=True)
    discountAmount = serializers.DecimalField(source="discount_amount", max_digits=14, decimal_places=2, read_only=True)
    balanceDue = serializers.SerializerMethodField()
    clearedItems = ClearedItemSerializer(source="cleared_items", many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = ClearanceReceipt
        fields = [
            "id",
            "clearanceNo",
            "customerId",
            "customerName",
            "entryReceiptId",
            "entryReceiptNo",
            "carNo",
            "clearanceDate",
            "totalAmount",
            "paymentAmount",
            "discountAmount",
            "balanceDue",
            "description",
            "clearedItems",
            "createdAt",
        ]

    def get_balanceDue(self, obj) -> Decimal:
        return obj.total_amount - obj.payment_amount - obj.discount_amount
