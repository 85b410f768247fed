# accounting/api/filters.py

import django_filters
from django.db.models import Q

from accounting.models.account import Account


class AccountFilter(django_filters.FilterSet):
    """
    GET /api/account/?category=ASSET&isSystem=true&q=cash
    """

    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")
    isSystem = django_filters.BooleanFilter(field_name="is_system")
    parentUuid = django_filters.CharFilter(field_name="parent_id")
    q = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Account
        fields = []

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(code__icontains=value) | Q(name__icontains=value))
