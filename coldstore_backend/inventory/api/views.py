# inventory/api/views.py

"""
ENTRY RECEIPT ENDPOINTS

/api/entry/                          list (paginated, ?customerId=, ?search=) + create
/api/entry/<id>/                     retrieve / update (PUT, partial fields) / delete
/api/entry/by-receipt-no/<no>/       receipt + customer + open lots (clearance screen)
"""

from __future__ import annotations

from django.db.models import Prefetch, Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.views import EnvelopeMixin
from core.exceptions import ValidationError
from customers.models import Customer
from inventory.api.serializers import (
    EntryReceiptCreateSerializer,
    EntryReceiptSerializer,
    EntryReceiptUpdateSerializer,
)
from inventory.models import EntryItem, EntryReceipt
from inventory.services import entry_service


def _items_prefetch():
    return Prefetch(
        "items",
        queryset=EntryItem.objects.select_related(
            "product_type", "product_sub_type", "pack_type", "room"
        ).order_by("id"),
    )


class EntryReceiptViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated]
    serializer_class = EntryReceiptSerializer

    def _base_queryset(self):
        return (
            EntryReceipt.objects.select_related("customer")
            .prefetch_related(_items_prefetch())
            .order_by("-entry_date", "-id")
        )

    def get_queryset(self):
        qs = self._base_queryset()

        params = self.request.query_params
        customer_id = (params.get("customerId") or "").strip()
        if customer_id.isdigit():
            qs = qs.filter(customer_id=int(customer_id))

        search = (params.get("search") or "").strip()
        if search:
            qs = qs.filter(
                Q(receipt_no__icontains=search)
                | Q(car_no__icontains=search)
                | Q(customer__name__icontains=search)
            )
        return qs

    def _render(self, receipt_id, *, status_code=status.HTTP_200_OK):
        receipt = self._base_queryset().get(pk=receipt_id)
        return Response(EntryReceiptSerializer(receipt).data, status=status_code)

    @extend_schema(
        tags=["inventory"],
        parameters=[
            OpenApiParameter("customerId", int, required=False),
            OpenApiParameter("search", str, required=False),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(tags=["inventory"])
    def retrieve(self, request, *args, **kwargs):
        return super().retrieve(request, *args, **kwargs)

    @extend_schema(
        tags=["inventory"],
        request=EntryReceiptCreateSerializer,
        responses={201: EntryReceiptSerializer},
    )
    def create(self, request):
        s = EntryReceiptCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            customer = Customer.objects.get(pk=data["customer_id"])
        except Customer.DoesNotExist:
            raise ValidationError("Customer not found", field="customerId")

        receipt = entry_service.create_entry_receipt(
            customer=customer,
            car_no=data["car_no"],
            items=data["items"],
            receipt_no=data.get("receipt_no"),
            entry_date=data.get("entry_date"),
            description=data.get("description", ""),
        )
        return self._render(receipt.pk, status_code=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["inventory"],
        request=EntryReceiptUpdateSerializer,
        responses={200: EntryReceiptSerializer},
    )
    def update(self, request, pk=None):
        receipt = self.get_object()

        s = EntryReceiptUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        customer_id = data.get("customer_id")
        if customer_id is not None and customer_id != receipt.customer_id:
            raise ValidationError(
                "The customer of an entry receipt cannot be changed", field="customerId"
            )

        entry_service.update_entry_receipt(
            receipt.pk,
            car_no=data.get("car_no"),
            description=data.get("description"),
            entry_date=data.get("entry_date"),
            items=data.get("items"),
        )
        return self._render(receipt.pk)

    @extend_schema(tags=["inventory"], responses={204: None})
    def destroy(self, request, pk=None):
        receipt = self.get_object()
        entry_service.delete_entry_receipt(receipt.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["inventory"], responses=EntryReceiptSerializer)
    @action(
        detail=False,
        methods=["get"],
        url_path=r"by-receipt-no/(?P<receipt_no>[^/]+)",
        pagination_class=None,
    )
    def by_receipt_no(self, request, receipt_no=None):
        receipt = entry_service.get_by_receipt_no(receipt_no)
        receipt = self._base_queryset().get(pk=receipt.pk)
        data = EntryReceiptSerializer(receipt, context={"open_lots_only": True}).data
        return Response(data)
