# core/api/reference.py

"""
REFERENCE DATA ENDPOINTS

/api/producttype/     product types (+ sub-type count)
/api/productsubtype/  sub-types (?productTypeId= filter)
/api/packtype/        pack types
/api/room/            rooms (+ stored item count, ?active=true filter)

Lists are small and returned whole (no pagination).
Deleting a row still referenced by entry items is refused (409 IN_USE).
"""

from __future__ import annotations

from django.db.models import Count
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import viewsets

from core.api.serializers import (
    PackTypeSerializer,
    ProductSubTypeSerializer,
    ProductTypeSerializer,
    RoomSerializer,
)
from core.api.views import EnvelopeMixin
from core.models import PackType, ProductSubType, ProductType, Room


class _ReferenceViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    pagination_class = None


@extend_schema_view(
    list=extend_schema(tags=["reference-data"]),
    retrieve=extend_schema(tags=["reference-data"]),
    create=extend_schema(tags=["reference-data"]),
    update=extend_schema(tags=["reference-data"]),
    partial_update=extend_schema(tags=["reference-data"]),
    destroy=extend_schema(tags=["reference-data"]),
)
class ProductTypeViewSet(_ReferenceViewSet):
    serializer_class = ProductTypeSerializer

    def get_queryset(self):
        return ProductType.objects.annotate(subTypeCount=Count("sub_types")).order_by("name")


@extend_schema_view(
    list=extend_schema(tags=["reference-data"]),
    retrieve=extend_schema(tags=["reference-data"]),
    create=extend_schema(tags=["reference-data"]),
    update=extend_schema(tags=["reference-data"]),
    partial_update=extend_schema(tags=["reference-data"]),
    destroy=extend_schema(tags=["reference-data"]),
)
class ProductSubTypeViewSet(_ReferenceViewSet):
    serializer_class = ProductSubTypeSerializer

    def get_queryset(self):
        qs = ProductSubType.objects.select_related("product_type").order_by("name")

        product_type_id = (self.request.query_params.get("productTypeId") or "").strip()
        if product_type_id.isdigit():
            qs = qs.filter(product_type_id=int(product_type_id))

        return qs


@extend_schema_view(
    list=extend_schema(tags=["reference-data"]),
    retrieve=extend_schema(tags=["reference-data"]),
    create=extend_schema(tags=["reference-data"]),
    update=extend_schema(tags=["reference-data"]),
    partial_update=extend_schema(tags=["reference-data"]),
    destroy=extend_schema(tags=["reference-data"]),
)
class PackTypeViewSet(_ReferenceViewSet):
    serializer_class = PackTypeSerializer
    queryset = PackType.objects.order_by("name")


@extend_schema_view(
    list=extend_schema(tags=["reference-data"]),
    retrieve=extend_schema(tags=["reference-data"]),
    create=extend_schema(tags=["reference-data"]),
    update=extend_schema(tags=["reference-data"]),
    partial_update=extend_schema(tags=["reference-data"]),
    destroy=extend_schema(tags=["reference-data"]),
)
class RoomViewSet(_ReferenceViewSet):
    serializer_class = RoomSerializer

    def get_queryset(self):
        qs = Room.objects.annotate(itemCount=Count("entry_items")).order_by("name")

        active = (self.request.query_params.get("active") or "").strip().lower()
        if active in ("1", "true", "yes"):
            qs = qs.filter(is_active=True)

        return qs
