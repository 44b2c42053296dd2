# ledger/api/views.py

"""
LEDGER ENDPOINTS

GET    /api/ledger/?customerId=   statement (chronological, running balance)
POST   /api/ledger/               direct cash movement {customerId, type: debit|credit, amount, description, date?}
DELETE /api/ledger/<id>/          delete a direct_cash row (receipt-backed rows are protected)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.views import ok
from core.exceptions import ValidationError
from core.money import ZERO
from customers.models import Customer
from ledger.api.serializers import DirectCashCreateSerializer, LedgerEntrySerializer
from ledger.services import ledger_service
from ledger.services.ledger_service import StatementLine


def _get_customer(customer_id):
    try:
        return Customer.objects.get(pk=customer_id)
    except (Customer.DoesNotExist, ValueError, TypeError):
        raise ValidationError("Customer not found", field="customerId")


class LedgerListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = DirectCashCreateSerializer

    @extend_schema(
        tags=["ledger"],
        parameters=[OpenApiParameter("customerId", int, required=True)],
        responses=LedgerEntrySerializer(many=True),
    )
    def get(self, request):
        customer_id = (request.query_params.get("customerId") or "").strip()
        if not customer_id.isdigit():
            raise ValidationError("customerId is required", field="customerId")
        customer = _get_customer(int(customer_id))

        lines = ledger_service.statement(customer)
        total_debit = sum((line.entry.debit_amount for line in lines), ZERO)
        total_credit = sum((line.entry.credit_amount for line in lines), ZERO)

        return ok(
            {
                "customer": {
                    "id": customer.id,
                    "name": customer.name,
                    "phone": customer.phone,
                    "village": customer.village,
                },
                "entries": LedgerEntrySerializer(lines, many=True).data,
                "totals": {
                    "debit": total_debit,
                    "credit": total_credit,
                    "balance": total_debit - total_credit,
                },
            }
        )

    @extend_schema(
        tags=["ledger"],
        request=DirectCashCreateSerializer,
        responses={201: LedgerEntrySerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        customer = _get_customer(data["customer_id"])
        day = data.get("date")

        row = ledger_service.post_direct_cash(
            customer=customer,
            direction=data["type"],
            amount=data["amount"],
            description=data["description"],
            created_at=ledger_service.instant_for(day) if day else None,
        )
        line = StatementLine(entry=row, running_balance=ledger_service.balance(customer))
        return ok(LedgerEntrySerializer(line).data, status=status.HTTP_201_CREATED)


class LedgerDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["ledger"], responses={204: None})
    def delete(self, request, ledger_id: int):
        ledger_service.delete_direct_cash(ledger_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
