# customers/api/filters.py

import django_filters
from django.db.models import Q

from customers.models import Customer


class CustomerFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    village = django_filters.CharFilter(field_name="village", lookup_expr="iexact")

    class Meta:
        model = Customer
        fields = ["search", "village"]

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value)
            | Q(father_name__icontains=value)
            | Q(phone__icontains=value)
            | Q(village__icontains=value)
        )
