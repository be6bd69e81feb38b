import django_filters
from django.db.models import Q

from .models import Docket


class DocketFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model  = Docket
        fields = ["status"]

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(docket_number__icontains=value)
            | Q(sender_name__icontains=value)
            | Q(receiver_name__icontains=value)
        )
