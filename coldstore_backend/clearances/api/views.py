# clearances/api/views.py

"""
CLEARANCE ENDPOINTS

/api/clearance/        list (paginated, ?customerId=, ?entryReceiptNo=) + create
/api/clearance/<id>/   retrieve

Clearances are permanent: no update or delete route exists.
"""

from __future__ import annotations

from django.db.models import Prefetch
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clearances.api.serializers import ClearanceCreateSerializer, ClearanceReceiptSerializer
from clearances.models import ClearanceReceipt, ClearedItem
from clearances.services.clearance_allocator import create_clearance
from core.api.views import EnvelopeMixin


class ClearanceViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated]
    serializer_class = ClearanceReceiptSerializer

    def get_queryset(self):
        qs = (
            ClearanceReceipt.objects.select_related("customer", "entry_receipt")
            .prefetch_related(
                Prefetch(
                    "cleared_items",
                    queryset=ClearedItem.objects.select_related(
                        "entry_item__product_type",
                        "entry_item__pack_type",
                        "entry_item__room",
                    ).order_by("id"),
                )
            )
            .order_by("-clearance_date", "-id")
        )

        params = self.request.query_params
        customer_id = (params.get("customerId") or "").strip()
        if customer_id.isdigit():
            qs = qs.filter(customer_id=int(customer_id))

        entry_receipt_no = (params.get("entryReceiptNo") or "").strip()
        if entry_receipt_no:
            qs = qs.filter(entry_receipt__receipt_no=entry_receipt_no)
        return qs

    @extend_schema(
        tags=["clearances"],
        parameters=[
            OpenApiParameter("customerId", int, required=False),
            OpenApiParameter("entryReceiptNo", str, required=False),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(tags=["clearances"])
    def retrieve(self, request, *args, **kwargs):
        return super().retrieve(request, *args, **kwargs)

    @extend_schema(
        tags=["clearances"],
        request=ClearanceCreateSerializer,
        responses={201: ClearanceReceiptSerializer},
    )
    def create(self, request):
        s = ClearanceCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        clearance = create_clearance(
            customer_id=data["customer_id"],
            entry_receipt_no=data["entry_receipt_no"],
            items=data["items"],
            car_no=data.get("car_no", ""),
            description=data.get("description", ""),
            clearance_date=data.get("clearance_date"),
            clearance_no=data.get("clearance_no"),
            payment_amount=data.get("payment_amount"),
            discount_amount=data.get("discount_amount"),
        )

        clearance = ClearanceReceipt.objects.select_related("customer", "entry_receipt").get(pk=clearance.pk)
        return Response(ClearanceReceiptSerializer(clearance).data, status=status.HTTP_201_CREATED)
