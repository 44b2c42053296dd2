# cashbook/api/views.py

"""
CASH BOOK ENDPOINTS

GET    /api/cash-book/                    merged entries (filters, sort, page/limit; default 50)
POST   /api/cash-book/                    create manual transaction
GET    /api/cash-book/<id>/               manual transaction ("manual-12" or "12")
PUT    /api/cash-book/<id>/               update description / amount / customer
PATCH  /api/cash-book/<id>/               same as PUT (partial)
DELETE /api/cash-book/<id>/               delete manual transaction (+ its ledger row)
GET    /api/cash-book/summary/            ?date= (default today) | ?dateFrom&dateTo
POST   /api/cash-book/summary/            set opening balance override
PATCH  /api/cash-book/summary/<date>/     reconciliation toggle
GET    /api/cash-book/reports/            ?from&to
GET    /api/cash-book/audit/              ?date | ?fromDate&toDate

Non-manual ids (clearance-*, ledger-*, expense-*) are read-only: 403 READ_ONLY_ENTRY.
"""

from __future__ import annotations

from datetime import date as date_cls
from datetime import timedelta

from django.utils import timezone
from django.utils.dateparse import parse_date
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from cashbook.api.serializers import (
    CashBookEntrySerializer,
    CashBookQuerySerializer,
    DaySummarySerializer,
    ManualTransactionCreateSerializer,
    ManualTransactionSerializer,
    ManualTransactionUpdateSerializer,
    OpeningBalanceAuditSerializer,
    OpeningBalanceSerializer,
    ReconcileSerializer,
)
from cashbook.services import aggregator, manual_service, report_service, summary_service
from core.api.pagination import CashBookPagination
from core.api.views import ok
from core.exceptions import ValidationError
from core.money import ZERO

MAX_SUMMARY_RANGE_DAYS = 366


def _actor(request, explicit: str | None = None) -> str:
    explicit = (explicit or "").strip()
    if explicit:
        return explicit
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return user.get_username()
    return "System"


def _parse_date(value, field: str) -> date_cls:
    try:
        parsed = parse_date(str(value or "").strip())
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD", field=field)
    return parsed


# ============================================================
# ENTRIES
# ============================================================

class CashBookListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    pagination_class = CashBookPagination
    serializer_class = CashBookEntrySerializer

    @extend_schema(
        tags=["cash-book"],
        parameters=[CashBookQuerySerializer],
        responses=CashBookEntrySerializer(many=True),
    )
    def get(self, request):
        query = CashBookQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        entries = aggregator.list_entries(query.to_filters())

        inflows = sum((e.amount for e in entries if e.signed_amount > 0), ZERO)
        outflows = sum((e.amount for e in entries if e.signed_amount < 0), ZERO)

        page = self.paginate_queryset(entries)
        response = self.get_paginated_response(CashBookEntrySerializer(page, many=True).data)
        response.data["totals"] = {
            "inflows": inflows,
            "outflows": outflows,
            "net": inflows - outflows,
            "count": len(entries),
        }
        return response

    @extend_schema(
        tags=["cash-book"],
        request=ManualTransactionCreateSerializer,
        responses={201: ManualTransactionSerializer},
    )
    def post(self, request):
        s = ManualTransactionCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        txn = manual_service.create_manual_transaction(
            date=data["date"],
            transaction_type=data["transaction_type"],
            amount=data["amount"],
            description=data["description"],
            customer_id=data.get("customer_id"),
            created_by=_actor(request),
        )
        return ok(ManualTransactionSerializer(txn).data, status=status.HTTP_201_CREATED)


class CashBookEntryDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ManualTransactionSerializer

    @extend_schema(tags=["cash-book"], responses=ManualTransactionSerializer)
    def get(self, request, entry_id: str):
        txn = manual_service.get_manual_transaction(entry_id)
        return ok(ManualTransactionSerializer(txn).data)

    @extend_schema(
        tags=["cash-book"],
        request=ManualTransactionUpdateSerializer,
        responses=ManualTransactionSerializer,
    )
    def put(self, request, entry_id: str):
        pk = manual_service.resolve_entry_id(entry_id)

        s = ManualTransactionUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        kwargs = {
            "description": data.get("description"),
            "amount": data.get("amount"),
        }
        if "customer_id" in data:
            kwargs["customer_id"] = data["customer_id"]

        manual_service.update_manual_transaction(pk, **kwargs)
        txn = manual_service.get_manual_transaction(str(pk))
        return ok(ManualTransactionSerializer(txn).data)

    @extend_schema(
        tags=["cash-book"],
        request=ManualTransactionUpdateSerializer,
        responses=ManualTransactionSerializer,
    )
    def patch(self, request, entry_id: str):
        return self.put(request, entry_id)

    @extend_schema(tags=["cash-book"], responses={204: None})
    def delete(self, request, entry_id: str):
        pk = manual_service.resolve_entry_id(entry_id)
        manual_service.delete_manual_transaction(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================================
# SUMMARY
# ============================================================

class CashBookSummaryView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OpeningBalanceSerializer

    @extend_schema(
        tags=["cash-book"],
        parameters=[
            OpenApiParameter("date", str, required=False),
            OpenApiParameter("dateFrom", str, required=False),
            OpenApiParameter("dateTo", str, required=False),
        ],
        responses=DaySummarySerializer,
    )
    def get(self, request):
        params = request.query_params

        if params.get("dateFrom") or params.get("dateTo"):
            start = _parse_date(params.get("dateFrom"), "dateFrom")
            end = _parse_date(params.get("dateTo"), "dateTo")
            if start > end:
                raise ValidationError("dateFrom must be before or equal to dateTo", field="dateFrom")
            if end - start > timedelta(days=MAX_SUMMARY_RANGE_DAYS):
                raise ValidationError(
                    f"Date range cannot exceed {MAX_SUMMARY_RANGE_DAYS} days", field="dateTo"
                )
            days = summary_service.summaries(start, end)
            return ok(DaySummarySerializer(days, many=True).data)

        day = params.get("date")
        day = _parse_date(day, "date") if day else timezone.localdate()
        return ok(DaySummarySerializer(summary_service.summary(day)).data)

    @extend_schema(
        tags=["cash-book"],
        request=OpeningBalanceSerializer,
        responses=DaySummarySerializer,
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        day_summary, audit_created = summary_service.set_opening_balance(
            data["date"],
            data["opening_balance"],
            reason=data.get("change_reason"),
            actor=_actor(request, data.get("changed_by")),
        )
        return ok(DaySummarySerializer(day_summary).data, auditCreated=audit_created)


class CashBookReconcileView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ReconcileSerializer

    @extend_schema(tags=["cash-book"], request=ReconcileSerializer, responses=DaySummarySerializer)
    def patch(self, request, day: str):
        day = _parse_date(day, "date")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        day_summary = summary_service.reconcile(
            day,
            is_reconciled=data["is_reconciled"],
            reconciled_by=_actor(request, data.get("reconciled_by")),
        )
        return ok(DaySummarySerializer(day_summary).data)


# ============================================================
# REPORTS / AUDIT
# ============================================================

class CashBookReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["cash-book"],
        parameters=[
            OpenApiParameter("from", str, required=True),
            OpenApiParameter("to", str, required=True),
        ],
    )
    def get(self, request):
        params = request.query_params
        if not params.get("from") or not params.get("to"):
            raise ValidationError("Both from and to dates are required", field="from")

        report = report_service.build_report(
            _parse_date(params["from"], "from"),
            _parse_date(params["to"], "to"),
        )

        summary = report["summary"]
        return ok(
            {
                "period": report["period"],
                "summary": {
                    "totalInflows": summary["total_inflows"],
                    "totalOutflows": summary["total_outflows"],
                    "netCashFlow": summary["net_cash_flow"],
                    "openingBalance": summary["opening_balance"],
                    "closingBalance": summary["closing_balance"],
                    "transactionCount": summary["transaction_count"],
                },
                "transactionsBySource": report["by_source"],
                "transactionsByDate": report["by_date"],
                "dailySummaries": DaySummarySerializer(report["daily_summaries"], many=True).data,
            }
        )


class OpeningBalanceAuditView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OpeningBalanceAuditSerializer

    @extend_schema(
        tags=["cash-book"],
        parameters=[
            OpenApiParameter("date", str, required=False),
            OpenApiParameter("fromDate", str, required=False),
            OpenApiParameter("toDate", str, required=False),
        ],
        responses=OpeningBalanceAuditSerializer(many=True),
    )
    def get(self, request):
        params = request.query_params

        day = params.get("date")
        date_from = params.get("fromDate")
        date_to = params.get("toDate")

        rows = report_service.audit_trail(
            day=_parse_date(day, "date") if day else None,
            date_from=_parse_date(date_from, "fromDate") if date_from else None,
            date_to=_parse_date(date_to, "toDate") if date_to else None,
        )
        return ok(OpeningBalanceAuditSerializer(rows, many=True).data)
