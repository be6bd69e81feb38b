"""
WorkflowEngine: docket lifecycle orchestration.

Flow:
  book_docket → assemble_loading_sheet → generate_manifest → issue_thc
                                                     ↓
                     submit_pod → analyze_pod → review_pod

Docket status only moves forward: booked → loaded → in_transit → delivered.
force_docket_status is the single manual override that may move it back.
Each cascade runs in one transaction; enrichment and audit failures never fail the caller.
"""

import logging
import time
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.audit.recorder import AuditRecorder, acting_user
from apps.dispatch.models import LoadingSheet, LoadingSheetDocket, Manifest
from apps.dockets.models import Docket, DocketItem
from apps.integrations.connectors import GeocodeResolver, PodAnalyzer
from apps.payments.models import Thc
from apps.pods.models import Pod

from .exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger("docketflow.workflow")

BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(number: int) -> str:
    digits = ""
    while True:
        number, rem = divmod(number, 36)
        digits = BASE36[rem] + digits
        if number == 0:
            return digits


def _generate_manifest_number() -> str:
    return f"MAN-{_base36(int(time.time() * 1000)).upper()}"


def checked_balance(hire: Decimal, advance: Decimal, balance: Decimal = None) -> Decimal:
    """hire − advance, rejecting an advance above hire or a caller balance that disagrees."""
    if advance > hire:
        raise ValidationError({"advance_amount": "Advance cannot exceed the hire amount."})
    expected = hire - advance
    if balance is not None and balance != expected:
        raise ValidationError(
            {"balance_amount": f"Balance must equal hire minus advance ({expected})."}
        )
    return expected


class WorkflowEngine:

    def __init__(self, geocoder=None, pod_analyzer=None, audit=None):
        self.geocoder     = geocoder or GeocodeResolver()
        self.pod_analyzer = pod_analyzer or PodAnalyzer()
        self.audit        = audit or AuditRecorder()

    # ── Dockets ──────────────────────────────────────────────────────────────
    def book_docket(self, validated_data: dict, actor=None, origin=None) -> Docket:
        data  = dict(validated_data)
        items = list(data.pop("items", None) or [])
        if not items:
            raise ValidationError({"items": "A docket needs at least one item."})
        data.pop("status", None)

        with transaction.atomic():
            docket = Docket.objects.create(status=Docket.Status.BOOKED, **data)
            DocketItem.objects.bulk_create(
                [DocketItem(docket=docket, **dict(item)) for item in items]
            )

        enriched = self._enrich_coordinates(docket)
        logger.info("Docket %s booked with %d item(s)", docket.docket_number, len(items))

        self.audit.record(
            "docket.create", "docket", docket.pk,
            summary=f"Docket {docket.docket_number} booked",
            meta={"items": len(items), "geocoded": enriched},
            actor=actor, origin=origin,
        )
        return docket

    def force_docket_status(self, docket_id, status: str, reason: str = "", actor=None, origin=None) -> Docket:
        if status not in Docket.Status.values:
            raise ValidationError({"status": f'"{status}" is not a valid docket status.'})

        with transaction.atomic():
            docket = Docket.objects.select_for_update().filter(pk=docket_id).first()
            if docket is None:
                raise NotFoundError("Docket not found.")
            previous = docket.status
            docket.status = status
            docket.save(update_fields=["status", "updated_at"])

        if Docket.rank(status) < Docket.rank(previous):
            logger.warning(
                "Docket %s moved back from %s to %s by manual override",
                docket.docket_number, previous, status,
            )
        self.audit.record(
            "docket.status_force", "docket", docket.pk,
            summary=f"Docket {docket.docket_number} status forced {previous} → {status}",
            meta={"from": previous, "to": status, "reason": reason or ""},
            actor=actor, origin=origin,
        )
        return docket

    # ── Loading sheets ───────────────────────────────────────────────────────
    def assemble_loading_sheet(self, validated_data: dict, actor=None, origin=None) -> LoadingSheet:
        data = dict(validated_data)
        docket_ids = list(dict.fromkeys(data.pop("docket_ids", None) or []))
        if not docket_ids:
            raise ValidationError({"docket_ids": "Select at least one docket for the loading sheet."})
        if not data.get("status"):
            data.pop("status", None)

        try:
            with transaction.atomic():
                dockets = list(Docket.objects.select_for_update().filter(pk__in=docket_ids))
                missing = sorted(set(docket_ids) - {d.pk for d in dockets})
                if missing:
                    raise NotFoundError(f"Docket(s) not found: {', '.join(map(str, missing))}.")
                unavailable = sorted(d.docket_number for d in dockets if d.status != Docket.Status.BOOKED)
                if unavailable:
                    raise ConflictError(
                        f"Docket(s) already assigned to a load: {', '.join(unavailable)}."
                    )

                sheet = LoadingSheet.objects.create(**data)
                LoadingSheetDocket.objects.bulk_create(
                    [LoadingSheetDocket(loading_sheet=sheet, docket_id=pk) for pk in docket_ids]
                )
                advanced = self._advance(docket_ids, Docket.Status.LOADED)
        except IntegrityError as exc:
            raise ConflictError("A loading sheet with this number already exists.") from exc

        logger.info("Loading sheet %s created with %d docket(s)", sheet.sheet_number, len(docket_ids))
        self.audit.record(
            "loading_sheet.create", "loading_sheet", sheet.pk,
            summary=f"Loading sheet {sheet.sheet_number} created for vehicle {sheet.vehicle_number}",
            meta={"docket_ids": docket_ids, "dockets_loaded": advanced, "status": sheet.status},
            actor=actor, origin=origin,
        )
        return sheet

    def finalize_loading_sheet(self, sheet_id, actor=None, origin=None) -> LoadingSheet:
        with transaction.atomic():
            sheet = LoadingSheet.objects.select_for_update().filter(pk=sheet_id).first()
            if sheet is None:
                raise NotFoundError("Loading sheet not found.")
            previous = sheet.status
            if previous != LoadingSheet.Status.FINALIZED:
                sheet.status = LoadingSheet.Status.FINALIZED
                sheet.save(update_fields=["status", "updated_at"])

        self.audit.record(
            "loading_sheet.finalize", "loading_sheet", sheet.pk,
            summary=f"Loading sheet {sheet.sheet_number} finalized",
            meta={"from": previous},
            actor=actor, origin=origin,
        )
        return sheet

    # ── Manifests ────────────────────────────────────────────────────────────
    def generate_manifest(self, loading_sheet_id, actor=None, origin=None) -> Manifest:
        try:
            with transaction.atomic():
                sheet = LoadingSheet.objects.select_for_update().filter(pk=loading_sheet_id).first()
                if sheet is None:
                    raise NotFoundError("Loading sheet not found.")
                if Manifest.objects.filter(loading_sheet=sheet).exists():
                    raise ConflictError(f"Loading sheet {sheet.sheet_number} already has a manifest.")

                number = _generate_manifest_number()
                while Manifest.objects.filter(manifest_number=number).exists():
                    number = _generate_manifest_number()
                manifest = Manifest.objects.create(manifest_number=number, loading_sheet=sheet)

                if sheet.status != LoadingSheet.Status.FINALIZED:
                    sheet.status = LoadingSheet.Status.FINALIZED
                    sheet.save(update_fields=["status", "updated_at"])

                docket_ids = list(sheet.docket_links.values_list("docket_id", flat=True))
                advanced = self._advance(docket_ids, Docket.Status.IN_TRANSIT)
        except IntegrityError as exc:
            raise ConflictError("This loading sheet already has a manifest.") from exc

        logger.info(
            "Manifest %s generated for sheet %s; %d docket(s) in transit",
            manifest.manifest_number, sheet.sheet_number, advanced,
        )
        self.audit.record(
            "manifest.create", "manifest", manifest.pk,
            summary=f"Manifest {manifest.manifest_number} generated from {sheet.sheet_number}",
            meta={"loading_sheet_id": sheet.pk, "docket_ids": docket_ids, "dockets_in_transit": advanced},
            actor=actor, origin=origin,
        )
        return manifest

    # ── THCs ─────────────────────────────────────────────────────────────────
    def issue_thc(self, validated_data: dict, actor=None, origin=None) -> Thc:
        data = dict(validated_data)
        manifest_id = data.pop("manifest_id")
        manifest = Manifest.objects.select_related("loading_sheet").filter(pk=manifest_id).first()
        if manifest is None:
            raise NotFoundError("Manifest not found.")

        data["balance_amount"] = checked_balance(
            data["hire_amount"], data["advance_amount"], data.get("balance_amount"),
        )
        # Snapshot the trip's crew unless the caller overrides it
        if not data.get("driver_name"):
            data["driver_name"] = manifest.loading_sheet.driver_name
        if not data.get("vehicle_number"):
            data["vehicle_number"] = manifest.loading_sheet.vehicle_number
        if not data.get("status"):
            data.pop("status", None)

        try:
            with transaction.atomic():
                thc = Thc.objects.create(manifest=manifest, **data)
        except IntegrityError as exc:
            raise ConflictError("A THC with this number already exists.") from exc

        logger.info("THC %s issued against %s", thc.thc_number, manifest.manifest_number)
        self.audit.record(
            "thc.create", "thc", thc.pk,
            summary=f"THC {thc.thc_number} issued for manifest {manifest.manifest_number}",
            meta={
                "manifest_id": manifest.pk,
                "hire_amount": str(thc.hire_amount),
                "advance_amount": str(thc.advance_amount),
                "balance_amount": str(thc.balance_amount),
            },
            actor=actor, origin=origin,
        )
        return thc

    def update_thc(self, thc_id, changes: dict, actor=None, origin=None) -> Thc:
        changes = dict(changes)
        try:
            with transaction.atomic():
                thc = Thc.objects.select_for_update().filter(pk=thc_id).first()
                if thc is None:
                    raise NotFoundError("THC not found.")

                manifest_id = changes.pop("manifest_id", None)
                if manifest_id is not None and manifest_id != thc.manifest_id:
                    manifest = Manifest.objects.filter(pk=manifest_id).first()
                    if manifest is None:
                        raise NotFoundError("Manifest not found.")
                    changes["manifest"] = manifest

                if {"hire_amount", "advance_amount", "balance_amount"} & changes.keys():
                    changes["balance_amount"] = checked_balance(
                        changes.get("hire_amount", thc.hire_amount),
                        changes.get("advance_amount", thc.advance_amount),
                        changes.get("balance_amount"),
                    )

                previous_status = thc.status
                for field, value in changes.items():
                    setattr(thc, field, value)
                thc.save()
        except IntegrityError as exc:
            raise ConflictError("A THC with this number already exists.") from exc

        meta = {"fields": sorted(changes)}
        if thc.status != previous_status:
            meta.update({"from": previous_status, "to": thc.status})
        self.audit.record(
            "thc.update", "thc", thc.pk,
            summary=f"THC {thc.thc_number} updated",
            meta=meta,
            actor=actor, origin=origin,
        )
        return thc

    # ── PODs ─────────────────────────────────────────────────────────────────
    def submit_pod(self, docket_id, image_url: str, actor=None, origin=None, uploaded=False) -> Pod:
        with transaction.atomic():
            docket = Docket.objects.select_for_update().filter(pk=docket_id).first()
            if docket is None:
                raise NotFoundError("Docket not found.")
            pod = Pod.objects.create(docket=docket, image_url=image_url)
            self._advance([docket.pk], Docket.Status.DELIVERED)

        logger.info("POD %s submitted for docket %s", pod.pk, docket.docket_number)
        self.audit.record(
            "pod.upload" if uploaded else "pod.create", "pod", pod.pk,
            summary=f"POD submitted for docket {docket.docket_number}",
            meta={"docket_id": docket.pk, "image_url": image_url},
            actor=actor, origin=origin,
        )
        return pod

    def analyze_pod(self, pod_id, actor=None, origin=None) -> Pod:
        pod = Pod.objects.filter(pk=pod_id).first()
        if pod is None:
            raise NotFoundError("POD not found.")

        try:
            analysis = self.pod_analyzer.analyze(pod.image_url)
        except Exception as exc:
            logger.warning("POD %s analysis failed, storing simulated result: %s", pod.pk, exc)
            analysis = self.pod_analyzer.fallback(str(exc))

        pod.ai_analysis = analysis
        pod.save(update_fields=["ai_analysis", "updated_at"])

        self.audit.record(
            "pod.analyze", "pod", pod.pk,
            summary=f"POD {pod.pk} analyzed: {analysis.get('recommended_action')}",
            meta={
                "simulated": bool(analysis.get("simulated")),
                "recommended_action": analysis.get("recommended_action"),
            },
            actor=actor, origin=origin,
        )
        return pod

    def review_pod(self, pod_id, decision: str, reason: str = None, actor=None, origin=None) -> Pod:
        if decision not in (Pod.Status.APPROVED, Pod.Status.REJECTED):
            raise ValidationError({"status": "Review decision must be approved or rejected."})
        reason = (reason or "").strip()
        if decision == Pod.Status.REJECTED and not reason:
            raise ValidationError({"rejection_reason": "A reason is required when rejecting a POD."})

        with transaction.atomic():
            pod = Pod.objects.select_for_update().filter(pk=pod_id).first()
            if pod is None:
                raise NotFoundError("POD not found.")
            pod.status = decision
            if decision == Pod.Status.APPROVED:
                pod.approved_at      = timezone.now()
                pod.approved_by      = acting_user(actor)
                pod.rejection_reason = None
            else:
                pod.approved_at      = None
                pod.approved_by      = None
                pod.rejection_reason = reason
            pod.save(update_fields=["status", "approved_at", "approved_by", "rejection_reason", "updated_at"])

        self.audit.record(
            "pod.review", "pod", pod.pk,
            summary=f"POD {pod.pk} {decision}",
            meta={"decision": decision, "reason": pod.rejection_reason},
            actor=actor, origin=origin,
        )
        return pod

    # ── Internals ────────────────────────────────────────────────────────────
    def _advance(self, docket_ids, target) -> int:
        """Move dockets that are behind `target` up to it; dockets at or past it stay put."""
        return Docket.objects.filter(
            pk__in=docket_ids, status__in=Docket.statuses_before(target),
        ).update(status=target, updated_at=timezone.now())

    def _enrich_coordinates(self, docket: Docket) -> bool:
        """Fill geofence and position from the addresses when the caller left them out."""
        try:
            values = {}
            if docket.geofence_lat is None or docket.geofence_lng is None:
                coords = self.geocoder.resolve(docket.receiver_address)
                if coords:
                    values["geofence_lat"], values["geofence_lng"] = coords
                    if docket.geofence_radius_km is None:
                        values["geofence_radius_km"] = Decimal(str(settings.DEFAULT_GEOFENCE_RADIUS_KM))
            if docket.current_lat is None or docket.current_lng is None:
                coords = self.geocoder.resolve(docket.sender_address)
                if coords:
                    values["current_lat"], values["current_lng"] = coords
            if not values:
                return False
            Docket.objects.filter(pk=docket.pk).update(updated_at=timezone.now(), **values)
        except Exception:
            logger.exception("Coordinate enrichment failed for docket %s", docket.docket_number)
            return False

        for field, value in values.items():
            setattr(docket, field, value)
        return True


# Shared by every view and command so the geocode rate limit holds process-wide.
workflow = WorkflowEngine()
