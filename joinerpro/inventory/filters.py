import django_filters
from django.db.models import Q
from .models import StockItem


class StockItemFilter(django_filters.FilterSet):
    """
    Filters for the stock item list.

    Supports:
    - search: name or description contains
    - category: category id
    - low: 'true' keeps only items at or below their reorder threshold
    - unit: unit of measure code
    """
    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')
    low = django_filters.CharFilter(method='filter_low', label='Low Stock')
    unit = django_filters.CharFilter(field_name='unit', lookup_expr='iexact')

    class Meta:
        model = StockItem
        fields = ['search', 'category', 'low', 'unit']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))

    def filter_low(self, queryset, name, value):
        if value is None or value == '':
            return queryset
        if value.lower() == 'true':
            return queryset.low()
        return queryset
