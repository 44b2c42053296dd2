# expenses/api/views.py

"""
EXPENSE ENDPOINTS

/api/expenses/                     list (paginated; ?dateFrom ?dateTo ?categoryId ?search) + create
/api/expenses/<id>/                retrieve / update / delete
/api/expenses/categories/          list (?active=true) + create
/api/expenses/categories/<id>/     retrieve / update / delete (refused while expenses reference it)

Expenses appear in the cash book as read-only outflows.
"""

import logging

from django.db.models import Count
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from core.api.views import EnvelopeMixin
from expenses.api.filters import ExpenseFilter
from expenses.api.serializers import ExpenseCategorySerializer, ExpenseSerializer
from expenses.models import Expense, ExpenseCategory

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(tags=["expenses"]),
    retrieve=extend_schema(tags=["expenses"]),
    create=extend_schema(tags=["expenses"]),
    update=extend_schema(tags=["expenses"]),
    partial_update=extend_schema(tags=["expenses"]),
    destroy=extend_schema(tags=["expenses"]),
)
class ExpenseCategoryViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = ExpenseCategorySerializer
    pagination_class = None

    def get_queryset(self):
        qs = ExpenseCategory.objects.annotate(expenseCount=Count("expenses")).order_by("name")

        active = (self.request.query_params.get("active") or "").strip().lower()
        if active in ("1", "true", "yes"):
            qs = qs.filter(is_active=True)
        return qs


@extend_schema_view(
    list=extend_schema(tags=["expenses"]),
    retrieve=extend_schema(tags=["expenses"]),
    create=extend_schema(tags=["expenses"]),
    update=extend_schema(tags=["expenses"]),
    partial_update=extend_schema(tags=["expenses"]),
    destroy=extend_schema(tags=["expenses"]),
)
class ExpenseViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = ExpenseSerializer
    filterset_class = ExpenseFilter

    def get_queryset(self):
        return Expense.objects.select_related("category").order_by("-date", "-created_at")

    def perform_create(self, serializer):
        expense = serializer.save()
        logger.info(
            "Expense recorded",
            extra={
                "expense_id": expense.id,
                "category": expense.category.name,
                "amount": str(expense.amount),
                "date": expense.date.isoformat(),
            },
        )

    def perform_destroy(self, instance):
        logger.info("Expense deleted", extra={"expense_id": instance.id, "amount": str(instance.amount)})
        instance.delete()
