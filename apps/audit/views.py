"""Read-only audit trail API."""

import django_filters
from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import generics, permissions
from rest_framework.pagination import LimitOffsetPagination

from .models import AuditLog
from .serializers import AuditLogSerializer


class AuditLogFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model  = AuditLog
        fields = ["action", "entity_type", "entity_id"]

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(action__icontains=value)
            | Q(username__icontains=value)
            | Q(summary__icontains=value)
        )


class AuditLogPagination(LimitOffsetPagination):
    default_limit = 100
    max_limit     = 500


# ── GET /api/audit-logs/ ──────────────────────────────────────────────────────
@extend_schema(tags=["Audit"], summary="Search the audit trail, newest first")
class AuditLogListView(generics.ListAPIView):
    serializer_class   = AuditLogSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class   = AuditLogPagination
    filter_backends    = [DjangoFilterBackend]
    filterset_class    = AuditLogFilter
    queryset           = AuditLog.objects.order_by("-created_at", "-id")
