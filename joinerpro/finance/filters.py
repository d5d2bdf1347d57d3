import re

import django_filters
from django.db.models import Q
from rest_framework.exceptions import ValidationError
from .models import PayableAccount, ReceivableAccount

MONTH_RE = re.compile(r'^(\d{4})-(\d{2})$')


def parse_month(value):
    """'2024-03' -> (2024, 3). Anything else is a 400."""
    match = MONTH_RE.match((value or '').strip())
    if not match:
        raise ValidationError({'month': 'Use the YYYY-MM format.'})
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError({'month': 'Month must be between 01 and 12.'})
    return year, month


class LedgerAccountFilter(django_filters.FilterSet):
    """
    Filters shared by the payable and receivable lists.

    Supports:
    - search: description contains
    - status: exact status code
    - month: YYYY-MM, entries falling due in that month
    - payment_method: exact method code
    """
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.CharFilter(field_name='status', lookup_expr='exact')
    month = django_filters.CharFilter(method='filter_month', label='Month')
    payment_method = django_filters.CharFilter(field_name='payment_method', lookup_expr='exact')

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(description__icontains=value))

    def filter_month(self, queryset, name, value):
        year, month = parse_month(value)
        return queryset.for_month(year, month)


class PayableAccountFilter(LedgerAccountFilter):
    class Meta:
        model = PayableAccount
        fields = ['search', 'status', 'month', 'payment_method']


class ReceivableAccountFilter(LedgerAccountFilter):
    project = django_filters.NumberFilter(field_name='project_id', lookup_expr='exact')

    class Meta:
        model = ReceivableAccount
        fields = ['search', 'status', 'month', 'payment_method', 'project']
