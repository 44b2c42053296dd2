# core/reference_data.py

"""
REFERENCE DATA CACHE

Read-through cache over product types, sub-types, pack types and rooms.

RULES:
- Constructed explicitly per unit of work (one request / one service call)
  and passed into services; there is no module-level cache.
- First lookup of a kind loads the whole table once (tables are tiny).
- Unknown ids, inactive rooms and sub-types from another product type raise
  core.exceptions.ValidationError attributed to the offending item field.
"""

from __future__ import annotations

from core.exceptions import ValidationError
from core.models import PackType, ProductSubType, ProductType, Room


class ReferenceDataCache:
    def __init__(self):
        self._tables = {}

    def _table(self, model) -> dict:
        table = self._tables.get(model)
        if table is None:
            table = {obj.pk: obj for obj in model.objects.all()}
            self._tables[model] = table
        return table

    def _lookup(self, model, pk, *, field: str, label: str):
        try:
            pk = int(pk)
        except (TypeError, ValueError):
            raise ValidationError(f"{label} is required", field=field)

        obj = self._table(model).get(pk)
        if obj is None:
            raise ValidationError(f"{label} {pk} not found", field=field)
        return obj

    def product_type(self, pk, *, field: str = "productTypeId") -> ProductType:
        return self._lookup(ProductType, pk, field=field, label="Product type")

    def product_sub_type(self, pk, *, product_type: ProductType | None = None, field: str = "productSubTypeId"):
        if pk in (None, ""):
            return None
        sub_type = self._lookup(ProductSubType, pk, field=field, label="Product subtype")
        if product_type is not None and sub_type.product_type_id != product_type.pk:
            raise ValidationError(
                f"Product subtype {sub_type.pk} does not belong to product type {product_type.pk}",
                field=field,
            )
        return sub_type

    def pack_type(self, pk, *, field: str = "packTypeId") -> PackType:
        return self._lookup(PackType, pk, field=field, label="Pack type")

    def room(self, pk, *, field: str = "roomId") -> Room:
        room = self._lookup(Room, pk, field=field, label="Room")
        if not room.is_active:
            raise ValidationError(f"Room {room.name} is inactive", field=field)
        return room

    def invalidate(self) -> None:
        self._tables.clear()
