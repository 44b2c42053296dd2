# expenses/api/filters.py

import django_filters

from expenses.models import Expense


class ExpenseFilter(django_filters.FilterSet):
    dateFrom = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    dateTo = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    categoryId = django_filters.NumberFilter(field_name="category_id")
    search = django_filters.CharFilter(field_name="description", lookup_expr="icontains")

    class Meta:
        model = Expense
        fields = ["dateFrom", "dateTo", "categoryId", "search"]
