# customers/api/views.py

"""
CUSTOMER ENDPOINTS

/api/customer/        list (?search=, ?village=, paginated) + create
/api/customer/<id>/   retrieve / update / delete

Every row carries its derived ledger balance.
Delete is refused while entry receipts or ledger rows exist.
"""

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from core.api.views import EnvelopeMixin
from customers.api.filters import CustomerFilter
from customers.api.serializers import CustomerSerializer
from customers.models import Customer


@extend_schema_view(
    list=extend_schema(tags=["customers"]),
    retrieve=extend_schema(tags=["customers"]),
    create=extend_schema(tags=["customers"]),
    update=extend_schema(tags=["customers"]),
    partial_update=extend_schema(tags=["customers"]),
    destroy=extend_schema(tags=["customers"]),
)
class CustomerViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = CustomerSerializer
    filterset_class = CustomerFilter

    def get_queryset(self):
        return Customer.objects.with_balance().order_by("-created_at", "-id")
