"""Docket API views."""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit.recorder import request_origin
from apps.workflow.exceptions import NotFoundError
from apps.workflow.service import workflow

from .filters import DocketFilter
from .models import Docket
from . import serializers as sz

logger = logging.getLogger("docketflow.dockets")


# ── GET/POST /api/dockets/ ────────────────────────────────────────────────────
@extend_schema(tags=["Dockets"], summary="List dockets or book a new one")
class DocketListCreateView(generics.ListCreateAPIView):
    permission_classes = [permissions.IsAuthenticated]
    filter_backends    = [DjangoFilterBackend]
    filterset_class    = DocketFilter
    queryset           = Docket.objects.prefetch_related("items").order_by("-created_at", "-id")

    def get_serializer_class(self):
        if self.request.method == "POST":
            return sz.DocketCreateSerializer
        return sz.DocketSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        docket = workflow.book_docket(
            serializer.validated_data,
            actor=request.user,
            origin=request_origin(request),
        )
        out = sz.DocketDetailSerializer(docket)
        return Response(out.data, status=status.HTTP_201_CREATED)


# ── GET /api/dockets/{id}/ ────────────────────────────────────────────────────
@extend_schema(tags=["Dockets"], summary="Retrieve a docket with its items and latest POD")
class DocketDetailView(generics.RetrieveAPIView):
    serializer_class   = sz.DocketDetailSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        docket = Docket.objects.prefetch_related("items").filter(pk=self.kwargs["pk"]).first()
        if docket is None:
            raise NotFoundError("Docket not found.")
        return docket


# ── PATCH /api/dockets/{id}/status/ ───────────────────────────────────────────
@extend_schema(
    tags=["Dockets"],
    summary="Force a docket status (manual correction, bypasses the lifecycle)",
    request=sz.DocketStatusSerializer,
    responses=sz.DocketSerializer,
)
class DocketStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, pk):
        ser = sz.DocketStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        docket = workflow.force_docket_status(
            pk,
            ser.validated_data["status"],
            reason=ser.validated_data.get("reason", ""),
            actor=request.user,
            origin=request_origin(request),
        )
        return Response(sz.DocketSerializer(docket).data)
