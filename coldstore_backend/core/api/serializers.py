# core/api/serializers.py

"""
REFERENCE DATA SERIALIZERS

Wire format is camelCase (frontend contract); model fields stay snake_case.
"""

from __future__ import annotations

from rest_framework import serializers

from core.models import PackType, ProductSubType, ProductType, Room


class ProductTypeSerializer(serializers.ModelSerializer):
    subTypeCount = serializers.IntegerField(read_only=True, required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = ProductType
        fields = ["id", "name", "subTypeCount", "createdAt", "updatedAt"]


class ProductSubTypeSerializer(serializers.ModelSerializer):
    productTypeId = serializers.PrimaryKeyRelatedField(
        source="product_type",
        queryset=ProductType.objects.all(),
    )
    productTypeName = serializers.CharField(source="product_type.name", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = ProductSubType
        fields = ["id", "name", "productTypeId", "productTypeName", "createdAt", "updatedAt"]

    def validate(self, attrs):
        product_type = attrs.get("product_type") or getattr(self.instance, "product_type", None)
        name = (attrs.get("name") or getattr(self.instance, "name", "") or "").strip()

        clash = ProductSubType.objects.filter(product_type=product_type, name=name)
        if self.instance is not None:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError(
                {"name": "Product subtype with this name already exists for this product type"}
            )
        return attrs


class PackTypeSerializer(serializers.ModelSerializer):
    rentPerDay = serializers.DecimalField(
        source="rent_per_day",
        max_digits=12,
        decimal_places=2,
        min_value=0,
        required=False,
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = PackType
        fields = ["id", "name", "rentPerDay", "createdAt", "updatedAt"]


class RoomSerializer(serializers.ModelSerializer):
    type = serializers.ChoiceField(source="room_type", choices=Room.RoomType.choices, required=False)
    isActive = serializers.BooleanField(source="is_active", required=False)
    itemCount = serializers.IntegerField(read_only=True, required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Room
        fields = ["id", "name", "type", "capacity", "isActive", "itemCount", "createdAt", "updatedAt"]

    def to_internal_value(self, data):
        # Accept "Cold" / "Hot" as sent by older clients.
        if hasattr(data, "get") and isinstance(data.get("type"), str):
            data = data.copy()
            data["type"] = data["type"].strip().upper()
        return super().to_internal_value(data)
