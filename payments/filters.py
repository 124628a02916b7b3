import django_filters
from django.utils import timezone

from .models import Transaction


class TransactionFilter(django_filters.FilterSet):
    """
    Filters for a user's transaction history.

    ``week`` restricts to the current ISO week when truthy; ``month`` and
    ``year`` take calendar numbers.
    """
    type = django_filters.ChoiceFilter(field_name='kind', choices=Transaction.Kind.choices)
    status = django_filters.ChoiceFilter(choices=Transaction.Status.choices)
    week = django_filters.BooleanFilter(method='filter_current_week')
    month = django_filters.NumberFilter(field_name='created_at', lookup_expr='month')
    year = django_filters.NumberFilter(field_name='created_at', lookup_expr='year')

    class Meta:
        model = Transaction
        fields = ['type', 'status', 'week', 'month', 'year']

    def filter_current_week(self, queryset, name, value):
        if not value:
            return queryset
        today = timezone.localdate()
        iso_year, iso_week, _weekday = today.isocalendar()
        return queryset.filter(created_at__iso_year=iso_year, created_at__week=iso_week)
