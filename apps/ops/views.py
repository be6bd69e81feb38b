"""
Operations views:
  - Deep health check (DB, cache)
  - Dashboard summary (live counts and the trailing 7-day series)
"""

import logging
from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.db import connection
from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from drf_spectacular.utils import extend_schema

from apps.dispatch.models import LoadingSheet
from apps.dockets.models import Docket
from apps.payments.models import Thc
from apps.pods.models import Pod

logger = logging.getLogger("docketflow.ops")


# ── GET /api/health/deep/ ─────────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Deep health check: DB, cache")
class DeepHealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        checks = {}

        # Database
        try:
            with connection.cursor() as cur:
                cur.execute("SELECT 1")
            checks["database"] = "ok"
        except Exception as exc:
            logger.error("Health check: database unavailable: %s", exc)
            checks["database"] = f"error: {exc}"

        # Cache (Redis in production)
        try:
            cache.set("healthcheck", "1", 5)
            checks["cache"] = "ok" if cache.get("healthcheck") == "1" else "miss"
        except Exception as exc:
            logger.error("Health check: cache unavailable: %s", exc)
            checks["cache"] = f"error: {exc}"

        overall = "ok" if all(v == "ok" for v in checks.values()) else "degraded"
        return Response({"status": overall, "checks": checks})


# ── GET /api/dashboard/ ───────────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Control tower: live counts and the last 7 days")
class DashboardSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        today      = timezone.localdate()
        week_start = today - timedelta(days=6)

        stats = {
            "active_dockets":      Docket.objects.exclude(status=Docket.Status.DELIVERED).count(),
            "vehicles_in_transit": (
                LoadingSheet.objects
                .filter(docket_links__docket__status=Docket.Status.IN_TRANSIT)
                .order_by().values("vehicle_number").distinct().count()
            ),
            "pending_pods":        Pod.objects.filter(status=Pod.Status.PENDING_REVIEW).count(),
            "completed_today":     Pod.objects.filter(
                status=Pod.Status.APPROVED, approved_at__date=today,
            ).count(),
        }

        booked = dict(
            Docket.objects.filter(created_at__date__gte=week_start)
            .annotate(day=TruncDate("created_at"))
            .values("day").annotate(c=Count("id"))
            .values_list("day", "c")
        )
        revenue = dict(
            Thc.objects.filter(created_at__date__gte=week_start)
            .annotate(day=TruncDate("created_at"))
            .values("day").annotate(total=Sum("hire_amount"))
            .values_list("day", "total")
        )

        weekly = []
        for offset in range(7):
            day = week_start + timedelta(days=offset)
            weekly.append({
                "date":    day.isoformat(),
                "name":    day.strftime("%a"),
                "dockets": booked.get(day, 0),
                "revenue": str(revenue.get(day) or Decimal("0.00")),
            })

        return Response({"stats": stats, "weekly": weekly})
