# reports/api/views.py

"""
REPORT ENDPOINTS (READ-ONLY)

GET /api/dashboard/stats/
GET /api/reports/room-wise/?roomId=&mode=customer|product|both&fromDate=&toDate=
GET /api/reports/customer-wise/?fromDate=&toDate=
"""

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from core.api.views import ok
from core.exceptions import ValidationError
from reports.services import stock_reports


def _date_param(request, name: str, *, required: bool = False):
    raw = (request.query_params.get(name) or "").strip()
    if not raw:
        if required:
            raise ValidationError(f"{name} is required", field=name)
        return None
    try:
        parsed = parse_date(raw)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"Invalid {name}. Use YYYY-MM-DD", field=name)
    return parsed


class DashboardStatsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["reports"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        stats = stock_reports.dashboard_stats()
        return ok(
            {
                "totalCustomers": stats["total_customers"],
                "activeEntries": stats["active_entries"],
                "clearancesToday": stats["clearances_today"],
                "monthlyRevenue": stats["monthly_revenue"],
            }
        )


class RoomWiseReportView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["reports"],
        parameters=[
            OpenApiParameter("roomId", int, required=True),
            OpenApiParameter("mode", str, required=False, enum=list(stock_reports.ROOM_MODES)),
            OpenApiParameter("fromDate", str, required=False),
            OpenApiParameter("toDate", str, required=False),
        ],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        room_id = (request.query_params.get("roomId") or "").strip()
        if not room_id.isdigit():
            raise ValidationError("Room ID is required", field="roomId")

        report = stock_reports.room_wise(
            int(room_id),
            mode=(request.query_params.get("mode") or "customer").strip(),
            date_from=_date_param(request, "fromDate"),
            date_to=_date_param(request, "toDate"),
        )

        data = {"room": report["room"]}
        if "customer_wise" in report:
            data["customerWise"] = [
                {
                    "customerId": row["customer_id"],
                    "customerName": row["customer_name"],
                    "stockEntered": row["stock_entered"],
                    "stockCleared": row["stock_cleared"],
                    "remainingStock": row["remaining_stock"],
                }
                for row in report["customer_wise"]
            ]
        if "product_wise" in report:
            data["productWise"] = [
                {
                    "productType": row["product_type"],
                    "productSubType": row["product_sub_type"],
                    "enteredQuantity": row["entered_quantity"],
                    "clearedQuantity": row["cleared_quantity"],
                    "remainingQuantity": row["remaining_quantity"],
                }
                for row in report["product_wise"]
            ]
        return ok(data)


class CustomerWiseReportView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["reports"],
        parameters=[
            OpenApiParameter("fromDate", str, required=True),
            OpenApiParameter("toDate", str, required=True),
        ],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        report = stock_reports.customer_wise(
            _date_param(request, "fromDate", required=True),
            _date_param(request, "toDate", required=True),
        )
        summary = report["summary"]
        return ok(
            {
                "customers": [
                    {
                        "id": row["id"],
                        "name": row["name"],
                        "entryQuantity": row["entry_quantity"],
                        "clearedQuantity": row["cleared_quantity"],
                        "remainingQuantity": row["remaining_quantity"],
                        "balance": row["balance"],
                    }
                    for row in report["customers"]
                ],
                "summary": {
                    "totalCustomers": summary["total_customers"],
                    "totalEntryQuantity": summary["total_entry_quantity"],
                    "totalClearedQuantity": summary["total_cleared_quantity"],
                    "totalBalance": summary["total_balance"],
                },
                "filters": {
                    "fromDate": report["filters"]["from_date"],
                    "toDate": report["filters"]["to_date"],
                },
            }
        )
