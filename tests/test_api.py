"""
DocketFlow API Test Suite
==========================
Covers: auth (session + JWT) | dockets CRUD/search | tracker | loading sheets |
        manifests | THCs | POD submit/upload/review/analyze | audit search |
        dashboard | health | full docket lifecycle

Run:
    pytest tests/test_api.py -v
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

User = get_user_model()

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(username="dispatcher", password="secret123", role="staff")


@pytest.fixture
def auth_client(api_client, staff_user):
    api_client.force_authenticate(user=staff_user)
    return api_client


@pytest.fixture
def make_docket(auth_client):
    def _make(number="DKT-1", **overrides):
        payload = {
            "docket_number":    number,
            "sender_name":      "Acme Corp",
            "sender_address":   "123 Industrial Park, NY",
            "receiver_name":    "Global Logistics",
            "receiver_address": "456 Port Rd, NJ",
            "total_weight":     "500.00",
            "total_packages":   10,
            "items": [
                {"description": "Electronics", "weight": "200.00", "quantity": 5, "package_type": "box"},
                {"description": "Cables",      "weight": "300.00", "quantity": 5, "package_type": "pallet"},
            ],
        }
        payload.update(overrides)
        resp = auth_client.post("/api/dockets/", payload, format="json")
        assert resp.status_code == 201, resp.data
        return resp.data
    return _make


@pytest.fixture
def make_sheet(auth_client):
    def _make(docket_ids, number="LS-1", **overrides):
        payload = {
            "sheet_number":   number,
            "vehicle_number": "KA-01-AB-1234",
            "driver_name":    "John Doe",
            "destination":    "NJ Hub",
            "docket_ids":     docket_ids,
        }
        payload.update(overrides)
        return auth_client.post("/api/loading-sheets/", payload, format="json")
    return _make


@pytest.fixture
def manifest(auth_client, make_docket, make_sheet):
    docket = make_docket()
    sheet = make_sheet([docket["id"]]).data
    resp = auth_client.post("/api/manifests/", {"loading_sheet_id": sheet["id"]}, format="json")
    assert resp.status_code == 201, resp.data
    return resp.data


def audit_actions():
    from apps.audit.models import AuditLog
    return list(AuditLog.objects.order_by("id").values_list("action", flat=True))


# ═══════════════════════════════════════════════════════════════════════════════
# AUTH
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestAuth:

    def test_register_starts_session(self, api_client):
        resp = api_client.post("/api/auth/register/", {
            "username": "alice", "password": "secret123", "role": "driver",
        }, format="json")
        assert resp.status_code == 201
        assert resp.data["username"] == "alice"
        assert resp.data["role"] == "driver"
        assert "password" not in resp.data

        me = api_client.get("/api/auth/me/")
        assert me.status_code == 200
        assert me.data["username"] == "alice"
        assert audit_actions() == ["auth.register"]

    def test_register_duplicate_username(self, api_client, staff_user):
        resp = api_client.post("/api/auth/register/", {
            "username": "dispatcher", "password": "secret123",
        }, format="json")
        assert resp.status_code == 400
        assert resp.data == {"message": "A user with that username already exists.", "field": "username"}

    def test_register_short_password(self, api_client):
        resp = api_client.post("/api/auth/register/", {"username": "bob", "password": "123"}, format="json")
        assert resp.status_code == 400
        assert resp.data["field"] == "password"
        assert resp.data["message"] == "Password must be at least 6 characters."

    def test_login_logout_cycle(self, api_client, staff_user):
        resp = api_client.post("/api/auth/login/", {
            "username": "dispatcher", "password": "secret123",
        }, format="json")
        assert resp.status_code == 200
        assert resp.data["role"] == "staff"
        assert api_client.get("/api/auth/me/").status_code == 200

        assert api_client.post("/api/auth/logout/").data == {"ok": True}
        assert api_client.get("/api/auth/me/").status_code == 401
        assert audit_actions() == ["auth.login", "auth.logout"]

    def test_bad_credentials(self, api_client, staff_user):
        resp = api_client.post("/api/auth/login/", {
            "username": "dispatcher", "password": "wrong-password",
        }, format="json")
        assert resp.status_code == 401
        assert resp.data == {"message": "Invalid username or password."}

    def test_logout_without_session_is_harmless(self, api_client, db):
        resp = api_client.post("/api/auth/logout/")
        assert resp.status_code == 200
        assert audit_actions() == []

    def test_jwt_token_authenticates(self, api_client, staff_user):
        resp = api_client.post("/api/auth/token/", {
            "username": "dispatcher", "password": "secret123",
        }, format="json")
        assert resp.status_code == 200
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")
        assert api_client.get("/api/auth/me/").data["username"] == "dispatcher"

    @pytest.mark.parametrize("method,url", [
        ("get",  "/api/dockets/"),
        ("post", "/api/loading-sheets/"),
        ("get",  "/api/manifests/"),
        ("get",  "/api/thcs/"),
        ("get",  "/api/pods/"),
        ("get",  "/api/audit-logs/"),
        ("get",  "/api/dashboard/"),
    ])
    def test_protected_endpoints_need_auth(self, api_client, db, method, url):
        resp = getattr(api_client, method)(url)
        assert resp.status_code == 401
        assert "message" in resp.data


# ═══════════════════════════════════════════════════════════════════════════════
# DOCKETS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDockets:

    def test_create_returns_booked_docket_with_items(self, make_docket):
        docket = make_docket()
        assert docket["status"] == "booked"
        assert docket["total_weight"] == "500.00"
        assert len(docket["items"]) == 2
        assert docket["pod"] is None
        assert audit_actions() == ["docket.create"]

    def test_create_without_items(self, auth_client):
        resp = auth_client.post("/api/dockets/", {
            "docket_number": "DKT-9", "sender_name": "A", "sender_address": "a",
            "receiver_name": "B", "receiver_address": "b",
            "total_weight": "1.00", "total_packages": 1, "items": [],
        }, format="json")
        assert resp.status_code == 400
        assert resp.data["field"] == "items"

    def test_duplicate_docket_number(self, auth_client, make_docket):
        make_docket("DKT-1")
        resp = auth_client.post("/api/dockets/", {
            "docket_number": "DKT-1", "sender_name": "A", "sender_address": "a",
            "receiver_name": "B", "receiver_address": "b",
            "total_weight": "1.00", "total_packages": 1,
            "items": [{"description": "x", "weight": "1.00", "quantity": 1, "package_type": "box"}],
        }, format="json")
        assert resp.status_code == 400
        assert resp.data["field"] == "docket_number"

    def test_list_filter_and_search(self, auth_client, make_docket):
        make_docket("DKT-1")
        make_docket("DKT-2", sender_name="Beta Traders")
        make_docket("DKT-3", receiver_name="Acme Warehouse")

        resp = auth_client.get("/api/dockets/", {"search": "acme"})
        assert {d["docket_number"] for d in resp.data["results"]} == {"DKT-1", "DKT-3"}

        resp = auth_client.get("/api/dockets/", {"search": "dkt-2"})
        assert [d["docket_number"] for d in resp.data["results"]] == ["DKT-2"]

        resp = auth_client.get("/api/dockets/", {"status": "loaded"})
        assert resp.data["count"] == 0

    def test_list_is_newest_first(self, auth_client, make_docket):
        make_docket("DKT-1")
        make_docket("DKT-2")
        resp = auth_client.get("/api/dockets/")
        assert [d["docket_number"] for d in resp.data["results"]] == ["DKT-2", "DKT-1"]

    def test_unknown_docket(self, auth_client):
        resp = auth_client.get("/api/dockets/999/")
        assert resp.status_code == 404
        assert resp.data == {"message": "Docket not found."}

    def test_force_status(self, auth_client, make_docket):
        docket = make_docket()
        resp = auth_client.patch(f"/api/dockets/{docket['id']}/status/", {
            "status": "delivered", "reason": "Confirmed by phone",
        }, format="json")
        assert resp.status_code == 200
        assert resp.data["status"] == "delivered"

        resp = auth_client.patch(f"/api/dockets/{docket['id']}/status/", {"status": "lost"}, format="json")
        assert resp.status_code == 400
        assert resp.data["field"] == "status"


# ═══════════════════════════════════════════════════════════════════════════════
# LOADING SHEETS & MANIFESTS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDispatch:

    def test_sheet_loads_dockets(self, auth_client, make_docket, make_sheet):
        d1, d2 = make_docket("DKT-1"), make_docket("DKT-2")
        resp = make_sheet([d1["id"], d2["id"]])
        assert resp.status_code == 201
        assert resp.data["status"] == "draft"
        assert {d["status"] for d in resp.data["dockets"]} == {"loaded"}

    def test_empty_sheet(self, make_sheet, db):
        from apps.dispatch.models import LoadingSheet
        resp = make_sheet([])
        assert resp.status_code == 400
        assert resp.data["field"] == "docket_ids"
        assert LoadingSheet.objects.count() == 0

    def test_unknown_docket_on_sheet(self, make_docket, make_sheet):
        d1 = make_docket()
        resp = make_sheet([d1["id"], 4040])
        assert resp.status_code == 404

    def test_loaded_docket_cannot_be_reloaded(self, make_docket, make_sheet):
        d1 = make_docket()
        make_sheet([d1["id"]], number="LS-1")
        resp = make_sheet([d1["id"]], number="LS-2")
        assert resp.status_code == 409

    def test_finalize(self, auth_client, make_docket, make_sheet):
        d1 = make_docket()
        sheet = make_sheet([d1["id"]]).data
        resp = auth_client.post(f"/api/loading-sheets/{sheet['id']}/finalize/")
        assert resp.status_code == 200
        assert resp.data["status"] == "finalized"

    def test_manifest_ships_dockets(self, auth_client, manifest):
        assert manifest["manifest_number"].startswith("MAN-")
        assert manifest["status"] == "generated"
        detail = auth_client.get(f"/api/manifests/{manifest['id']}/").data
        assert detail["loading_sheet"]["status"] == "finalized"
        assert [d["status"] for d in detail["dockets"]] == ["in_transit"]
        assert detail["thc"] is None

    def test_second_manifest_conflicts(self, auth_client, manifest):
        sheet_id = manifest["loading_sheet"]["id"]
        resp = auth_client.post("/api/manifests/", {"loading_sheet_id": sheet_id}, format="json")
        assert resp.status_code == 409
        assert "already has a manifest" in resp.data["message"]

    def test_manifest_for_unknown_sheet(self, auth_client, db):
        resp = auth_client.post("/api/manifests/", {"loading_sheet_id": 888}, format="json")
        assert resp.status_code == 404


# ═══════════════════════════════════════════════════════════════════════════════
# THC
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestThcApi:

    def test_issue_and_pay(self, auth_client, manifest):
        resp = auth_client.post("/api/thcs/", {
            "thc_number": "THC-1", "manifest_id": manifest["id"],
            "hire_amount": "5000.00", "advance_amount": "2000.00",
        }, format="json")
        assert resp.status_code == 201
        assert resp.data["balance_amount"] == "3000.00"
        assert resp.data["driver_name"] == "John Doe"

        thc_id = resp.data["id"]
        resp = auth_client.patch(f"/api/thcs/{thc_id}/", {"status": "paid"}, format="json")
        assert resp.status_code == 200
        assert resp.data["status"] == "paid"
        assert resp.data["balance_amount"] == "3000.00"

        detail = auth_client.get(f"/api/manifests/{manifest['id']}/").data
        assert detail["thc"]["thc_number"] == "THC-1"

    def test_balance_mismatch(self, auth_client, manifest):
        resp = auth_client.post("/api/thcs/", {
            "thc_number": "THC-1", "manifest_id": manifest["id"],
            "hire_amount": "5000.00", "advance_amount": "2000.00", "balance_amount": "100.00",
        }, format="json")
        assert resp.status_code == 400
        assert resp.data["field"] == "balance_amount"

    def test_unknown_thc(self, auth_client, db):
        assert auth_client.get("/api/thcs/12345/").status_code == 404


# ═══════════════════════════════════════════════════════════════════════════════
# POD
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestPodApi:

    def upload(self, client, docket_id, name="pod.png", content_type="image/png", body=PNG_BYTES):
        return client.post("/api/pods/upload/", {
            "docket_id": docket_id,
            "image": SimpleUploadedFile(name, body, content_type=content_type),
        }, format="multipart")

    def test_upload_delivers_docket(self, auth_client, make_docket):
        docket = make_docket()
        resp = self.upload(auth_client, docket["id"])
        assert resp.status_code == 201
        assert resp.data["status"] == "pending_review"
        assert resp.data["image_url"].startswith("/media/pods/")

        detail = auth_client.get(f"/api/dockets/{docket['id']}/").data
        assert detail["status"] == "delivered"
        assert detail["pod"]["id"] == resp.data["id"]
        assert audit_actions()[-1] == "pod.upload"

    def test_upload_rejects_non_images(self, auth_client, make_docket):
        docket = make_docket()
        resp = self.upload(auth_client, docket["id"], name="notes.txt", content_type="text/plain", body=b"hi")
        assert resp.status_code == 400
        assert resp.data["field"] == "image"

    def test_upload_for_unknown_docket(self, auth_client, db):
        resp = self.upload(auth_client, 9999)
        assert resp.status_code == 404

    def test_submit_by_reference(self, auth_client, make_docket):
        docket = make_docket()
        resp = auth_client.post("/api/pods/", {
            "docket_id": docket["id"], "image_url": "https://example.com/pod.jpg",
        }, format="json")
        assert resp.status_code == 201
        assert audit_actions()[-1] == "pod.create"

    def test_review_rules(self, auth_client, make_docket, staff_user):
        docket = make_docket()
        pod = self.upload(auth_client, docket["id"]).data

        resp = auth_client.post(f"/api/pods/{pod['id']}/review/", {"status": "rejected"}, format="json")
        assert resp.status_code == 400
        assert resp.data["field"] == "rejection_reason"

        resp = auth_client.post(f"/api/pods/{pod['id']}/review/", {"status": "approved"}, format="json")
        assert resp.status_code == 200
        assert resp.data["approved_by_username"] == "dispatcher"
        assert resp.data["approved_at"] is not None

    def test_analyze_falls_back_when_unconfigured(self, auth_client, make_docket):
        docket = make_docket()
        pod = self.upload(auth_client, docket["id"]).data
        resp = auth_client.post(f"/api/pods/{pod['id']}/analyze/")
        assert resp.status_code == 200
        assert resp.data["ai_analysis"]["simulated"] is True
        assert resp.data["status"] == "pending_review"

    def test_failed_submission_removes_stored_image(self, auth_client, make_docket):
        from django.db import DatabaseError
        docket = make_docket()
        storage = MagicMock()
        storage.save.return_value = "pods/orphan.png"
        with patch("apps.pods.views.default_storage", storage), \
                patch("apps.pods.views.workflow.submit_pod", side_effect=DatabaseError("write failed")):
            resp = self.upload(auth_client, docket["id"])
        assert resp.status_code == 500
        storage.delete.assert_called_once_with("pods/orphan.png")

    def test_review_unknown_pod(self, auth_client, db):
        resp = auth_client.post("/api/pods/321/review/", {"status": "approved"}, format="json")
        assert resp.status_code == 404


# ═══════════════════════════════════════════════════════════════════════════════
# TRACKER, AUDIT, DASHBOARD, HEALTH
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestReadModels:

    def test_tracker_for_fresh_docket(self, auth_client, make_docket):
        docket = make_docket(
            geofence_lat="40.712800", geofence_lng="-74.006000", geofence_radius_km="5.00",
            current_lat="40.730600", current_lng="-73.935200",
        )
        resp = auth_client.get(f"/api/dockets/{docket['id']}/tracker/")
        assert resp.status_code == 200
        events = {e["type"]: e for e in resp.data["events"]}
        assert events["docket_created"]["timestamp"] is not None
        assert events["manifest_created"]["timestamp"] is None
        assert resp.data["geofence"]["radius_meters"] == 5000
        assert resp.data["within_geofence"] is False

    def test_tracker_without_coordinates(self, auth_client, make_docket):
        docket = make_docket()
        resp = auth_client.get(f"/api/dockets/{docket['id']}/tracker/")
        assert resp.data["geofence"] is None
        assert resp.data["within_geofence"] is None

    def test_audit_search_and_limit(self, auth_client, make_docket):
        for n in range(3):
            make_docket(f"DKT-{n}")
        resp = auth_client.get("/api/audit-logs/", {"search": "DKT-1"})
        assert resp.data["count"] == 1
        assert resp.data["results"][0]["action"] == "docket.create"

        resp = auth_client.get("/api/audit-logs/", {"limit": 2})
        assert resp.data["count"] == 3
        assert len(resp.data["results"]) == 2
        assert resp.data["results"][0]["summary"] == "Docket DKT-2 booked"

    def test_dashboard(self, auth_client, manifest, make_docket):
        make_docket("DKT-2")
        resp = auth_client.get("/api/dashboard/")
        assert resp.status_code == 200
        assert resp.data["stats"] == {
            "active_dockets": 2, "vehicles_in_transit": 1,
            "pending_pods": 0, "completed_today": 0,
        }
        assert len(resp.data["weekly"]) == 7
        assert resp.data["weekly"][-1]["dockets"] == 2

    def test_api_docs_page_renders(self, api_client, db):
        resp = api_client.get("/api/docs/")
        assert resp.status_code == 200

    def test_health_is_public(self, api_client, db):
        resp = api_client.get("/api/health/deep/")
        assert resp.status_code == 200
        assert resp.data["status"] == "ok"


# ═══════════════════════════════════════════════════════════════════════════════
# END TO END
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDocketLifecycle:

    def test_booking_to_approved_delivery(self, auth_client, make_docket, make_sheet):
        docket = make_docket()
        sheet = make_sheet([docket["id"]]).data
        manifest = auth_client.post("/api/manifests/", {"loading_sheet_id": sheet["id"]}, format="json").data
        thc = auth_client.post("/api/thcs/", {
            "thc_number": "THC-1", "manifest_id": manifest["id"],
            "hire_amount": "5000.00", "advance_amount": "5000.00",
        }, format="json").data
        assert Decimal(thc["balance_amount"]) == Decimal("0")

        pod = auth_client.post("/api/pods/", {
            "docket_id": docket["id"], "image_url": "https://example.com/pod.jpg",
        }, format="json").data
        auth_client.post(f"/api/pods/{pod['id']}/review/", {"status": "approved"}, format="json")

        tracker = auth_client.get(f"/api/dockets/{docket['id']}/tracker/").data
        assert tracker["status"] == "delivered"
        assert all(e["timestamp"] is not None for e in tracker["events"])

        stats = auth_client.get("/api/dashboard/").data["stats"]
        assert stats["completed_today"] == 1
        assert stats["active_dockets"] == 0

        assert audit_actions() == [
            "docket.create", "loading_sheet.create", "manifest.create",
            "thc.create", "pod.create", "pod.review",
        ]
