import django_filters
from django.db.models import Q
from .models import Project


class ProjectFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.ChoiceFilter(choices=Project.STATUS_CHOICES)
    client = django_filters.NumberFilter(field_name='client_id', lookup_expr='exact')

    class Meta:
        model = Project
        fields = ['search', 'status', 'client']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(client__name__icontains=value))
