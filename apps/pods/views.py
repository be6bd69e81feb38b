"""Proof-of-delivery API views."""

import logging
import os
import uuid

from django.core.files.storage import default_storage
from drf_spectacular.utils import extend_schema
from rest_framework import generics, permissions, status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit.recorder import request_origin
from apps.workflow.service import workflow

from .models import Pod
from . import serializers as sz

logger = logging.getLogger("docketflow.pods")


# ── GET/POST /api/pods/ ───────────────────────────────────────────────────────
@extend_schema(tags=["POD"], summary="List PODs or submit one by image reference")
class PodListCreateView(generics.ListCreateAPIView):
    permission_classes = [permissions.IsAuthenticated]
    queryset = Pod.objects.select_related("docket", "approved_by").order_by("-created_at", "-id")
    filterset_fields = ["status", "docket"]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return sz.PodCreateSerializer
        return sz.PodSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        pod = workflow.submit_pod(
            serializer.validated_data["docket_id"],
            serializer.validated_data["image_url"],
            actor=request.user,
            origin=request_origin(request),
        )
        return Response(sz.PodSerializer(pod).data, status=status.HTTP_201_CREATED)


# ── POST /api/pods/upload/ ────────────────────────────────────────────────────
@extend_schema(tags=["POD"], summary="Upload a POD image for a docket",
               request=sz.PodUploadSerializer, responses=sz.PodSerializer)
class PodUploadView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes     = [MultiPartParser, FormParser]

    def post(self, request):
        ser = sz.PodUploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        image = ser.validated_data["image"]

        ext  = os.path.splitext(image.name)[1].lower() or ".jpg"
        name = default_storage.save(f"pods/{uuid.uuid4().hex}{ext}", image)
        try:
            pod = workflow.submit_pod(
                ser.validated_data["docket_id"],
                default_storage.url(name),
                actor=request.user,
                origin=request_origin(request),
                uploaded=True,
            )
        except Exception:
            default_storage.delete(name)
            raise
        logger.info("Stored POD image %s for pod %s", name, pod.pk)
        return Response(sz.PodSerializer(pod).data, status=status.HTTP_201_CREATED)


# ── POST /api/pods/{id}/review/ ───────────────────────────────────────────────
@extend_schema(tags=["POD"], summary="Approve or reject a POD",
               request=sz.PodReviewSerializer, responses=sz.PodSerializer)
class PodReviewView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        ser = sz.PodReviewSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        pod = workflow.review_pod(
            pk,
            ser.validated_data["status"],
            reason=ser.validated_data.get("rejection_reason"),
            actor=request.user,
            origin=request_origin(request),
        )
        return Response(sz.PodSerializer(pod).data)


# ── POST /api/pods/{id}/analyze/ ──────────────────────────────────────────────
@extend_schema(tags=["POD"], summary="Run AI analysis on a POD image", request=None,
               responses=sz.PodSerializer)
class PodAnalyzeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        pod = workflow.analyze_pod(pk, actor=request.user, origin=request_origin(request))
        return Response(sz.PodSerializer(pod).data)
