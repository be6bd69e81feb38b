"""THC (Transport Hire Challan) API views."""

from drf_spectacular.utils import extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit.recorder import request_origin
from apps.workflow.exceptions import NotFoundError
from apps.workflow.service import workflow

from .models import Thc
from . import serializers as sz



# ── GET/POST /api/thcs/ ───────────────────────────────────────────────────────
@extend_schema(tags=["THC"], summary="List THCs or issue one against a manifest")
class ThcListCreateView(generics.ListCreateAPIView):
    permission_classes = [permissions.IsAuthenticated]
    queryset = Thc.objects.select_related("manifest").order_by("-created_at", "-id")
    filterset_fields = ["status", "manifest"]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return sz.ThcCreateSerializer
        return sz.ThcSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        thc = workflow.issue_thc(
            serializer.validated_data,
            actor=request.user,
            origin=request_origin(request),
        )
        return Response(sz.ThcSerializer(thc).data, status=status.HTTP_201_CREATED)


# ── GET/PATCH /api/thcs/{id}/ ─────────────────────────────────────────────────
@extend_schema(tags=["THC"], summary="Retrieve or update a THC")
class ThcDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(responses=sz.ThcSerializer)
    def get(self, request, pk):
        thc = Thc.objects.select_related("manifest").filter(pk=pk).first()
        if thc is None:
            raise NotFoundError("THC not found.")
        return Response(sz.ThcSerializer(thc).data)

    @extend_schema(request=sz.ThcUpdateSerializer, responses=sz.ThcSerializer)
    def patch(self, request, pk):
        ser = sz.ThcUpdateSerializer(
            instance=Thc.objects.filter(pk=pk).first(), data=request.data,
        )
        ser.is_valid(raise_exception=True)
        thc = workflow.update_thc(
            pk, ser.validated_data,
            actor=request.user,
            origin=request_origin(request),
        )
        return Response(sz.ThcSerializer(thc).data)
