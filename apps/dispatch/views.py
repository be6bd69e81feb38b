"""Loading sheet and manifest API views."""

from drf_spectacular.utils import extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit.recorder import request_origin
from apps.workflow.exceptions import NotFoundError
from apps.workflow.service import workflow

from .models import LoadingSheet, Manifest
from . import serializers as sz



# ── GET/POST /api/loading-sheets/ ─────────────────────────────────────────────
@extend_schema(tags=["Dispatch"], summary="List loading sheets or assemble dockets into a new one")
class LoadingSheetListCreateView(generics.ListCreateAPIView):
    permission_classes = [permissions.IsAuthenticated]
    queryset = LoadingSheet.objects.select_related("manifest").order_by("-created_at", "-id")

    def get_serializer_class(self):
        if self.request.method == "POST":
            return sz.LoadingSheetCreateSerializer
        return sz.LoadingSheetSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sheet = workflow.assemble_loading_sheet(
            serializer.validated_data,
            actor=request.user,
            origin=request_origin(request),
        )
        return Response(sz.LoadingSheetDetailSerializer(sheet).data, status=status.HTTP_201_CREATED)


# ── GET /api/loading-sheets/{id}/ ─────────────────────────────────────────────
@extend_schema(tags=["Dispatch"], summary="Retrieve a loading sheet with its dockets")
class LoadingSheetDetailView(generics.RetrieveAPIView):
    serializer_class   = sz.LoadingSheetDetailSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        sheet = (
            LoadingSheet.objects.select_related("manifest")
            .prefetch_related("dockets__items")
            .filter(pk=self.kwargs["pk"]).first()
        )
        if sheet is None:
            raise NotFoundError("Loading sheet not found.")
        return sheet


# ── POST /api/loading-sheets/{id}/finalize/ ───────────────────────────────────
@extend_schema(tags=["Dispatch"], summary="Finalize a loading sheet", request=None,
               responses=sz.LoadingSheetSerializer)
class LoadingSheetFinalizeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        sheet = workflow.finalize_loading_sheet(pk, actor=request.user, origin=request_origin(request))
        return Response(sz.LoadingSheetSerializer(sheet).data)


# ── GET/POST /api/manifests/ ──────────────────────────────────────────────────
@extend_schema(tags=["Dispatch"], summary="List manifests or generate one from a loading sheet")
class ManifestListCreateView(generics.ListCreateAPIView):
    permission_classes = [permissions.IsAuthenticated]
    queryset = Manifest.objects.select_related("loading_sheet").order_by("-generated_at", "-id")

    def get_serializer_class(self):
        if self.request.method == "POST":
            return sz.ManifestCreateSerializer
        return sz.ManifestSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        manifest = workflow.generate_manifest(
            serializer.validated_data["loading_sheet_id"],
            actor=request.user,
            origin=request_origin(request),
        )
        return Response(sz.ManifestDetailSerializer(manifest).data, status=status.HTTP_201_CREATED)


# ── GET /api/manifests/{id}/ ──────────────────────────────────────────────────
@extend_schema(tags=["Dispatch"], summary="Retrieve a manifest with its sheet, dockets and THC")
class ManifestDetailView(generics.RetrieveAPIView):
    serializer_class   = sz.ManifestDetailSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        manifest = Manifest.objects.select_related("loading_sheet").filter(pk=self.kwargs["pk"]).first()
        if manifest is None:
            raise NotFoundError("Manifest not found.")
        return manifest
