"""
Docket tracker: milestone timeline plus geofence check.
Each milestone carries a timestamp, or null while it is still pending.
"""

import math

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema

from apps.dispatch.models import LoadingSheet, Manifest
from apps.dockets.models import Docket
from apps.payments.models import Thc
from apps.workflow.exceptions import NotFoundError

EARTH_RADIUS_KM = 6371.0088


def haversine_km(lat1, lng1, lat2, lng2) -> float:
    """Great-circle distance between two points given in decimal degrees."""
    lat1, lng1, lat2, lng2 = (math.radians(float(v)) for v in (lat1, lng1, lat2, lng2))
    a = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def _event(kind, label, at, meta=None):
    return {"type": kind, "label": label, "timestamp": at, "meta": meta or {}}


def build_tracker(docket: Docket) -> dict:
    sheets    = list(LoadingSheet.objects.filter(docket_links__docket=docket).order_by("created_at", "id"))
    manifests = list(Manifest.objects.filter(loading_sheet__in=sheets).order_by("generated_at", "id"))
    thcs      = list(Thc.objects.filter(manifest__in=manifests).order_by("created_at", "id"))
    pod       = docket.latest_pod()

    events = [
        _event("docket_created", "Docket booked", docket.created_at),
        _event(
            "loading_sheet_created", "Loaded on vehicle",
            sheets[0].created_at if sheets else None,
            {"sheet_numbers": [s.sheet_number for s in sheets]},
        ),
        _event(
            "manifest_created", "Manifest generated",
            manifests[0].generated_at if manifests else None,
            {"manifest_numbers": [m.manifest_number for m in manifests]},
        ),
        _event(
            "thc_created", "THC issued",
            thcs[0].created_at if thcs else None,
            {"thc_numbers": [t.thc_number for t in thcs]},
        ),
        _event(
            "pod_uploaded", "Proof of delivery received",
            pod.created_at if pod else None,
            {"status": pod.status, "image_url": pod.image_url} if pod else {},
        ),
    ]

    geofence = None
    if docket.has_geofence:
        geofence = {
            "lat":           float(docket.geofence_lat),
            "lng":           float(docket.geofence_lng),
            "radius_meters": round(float(docket.geofence_radius_km) * 1000),
        }

    current_location = None
    if docket.has_position:
        current_location = {"lat": float(docket.current_lat), "lng": float(docket.current_lng)}

    distance_km = within = None
    if geofence and current_location:
        distance_km = haversine_km(
            docket.current_lat, docket.current_lng, docket.geofence_lat, docket.geofence_lng,
        )
        within = distance_km <= float(docket.geofence_radius_km)
        distance_km = round(distance_km, 3)

    return {
        "docket_id":        docket.pk,
        "docket_number":    docket.docket_number,
        "status":           docket.status,
        "events":           events,
        "geofence":         geofence,
        "current_location": current_location,
        "distance_km":      distance_km,
        "within_geofence":  within,
    }


@extend_schema(tags=["Tracking"], summary="Milestone timeline and geofence status for a docket")
class DocketTrackerView(APIView):
    """GET /api/dockets/{id}/tracker/"""
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        docket = Docket.objects.filter(pk=pk).first()
        if docket is None:
            raise NotFoundError("Docket not found.")
        return Response(build_tracker(docket))
