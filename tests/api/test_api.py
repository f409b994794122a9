from __future__ import annotations

import io
import json

import pytest
from PIL import Image

from src.inout.inout.core.enums import Role
from src.inout.inout.main import create_app
from src.inout.inout.users.model import User


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {"TENANT_CONFIG_PATH": str(tmp_path / "tenant.bin"), "TESTING": True},
        settings_module="config.testing",
    )
    return app


@pytest.fixture
def container(app):
    return app.extensions["inout"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def office(container):
    return container.locations_repo.create(name="Head Office", latitude=10.776889, longitude=106.700806, radius_meters=100.0)


@pytest.fixture
def people(container, office):
    admin = User(uid="admin-1", name="Alice Admin", email="alice@example.com", phone=None, role=Role.ADMIN, approved=True)
    worker = User(
        uid="emp-1",
        name="Bob Worker",
        email="bob@example.com",
        phone=None,
        role=Role.EMPLOYEE,
        approved=True,
        employee_id="EMP001",
        assigned_location_id=office.location_id,
    )
    container.users_repo.save(admin)
    container.users_repo.save(worker)
    return admin, worker


def login(client, uid: str) -> None:
    with client.session_transaction() as sess:
        sess["uid"] = uid


def _verified(lat: float, lng: float) -> dict:
    return {"biometric": {"outcome": "success"}, "location": {"lat": lat, "lng": lng}}


def test_requires_signed_in_user(client):
    resp = client.get("/api/attendance/status")
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "unauthenticated"


def test_new_profile_waits_for_approval(client):
    login(client, "new-user")
    resp = client.post("/api/me", json={"name": "Eve", "email": "eve@example.com"})
    assert resp.status_code == 201
    assert resp.get_json()["user"]["approved"] is False

    resp = client.post("/api/attendance/check-in", json=_verified(10.776889, 106.700806))
    assert resp.status_code == 400
    assert "approval" in resp.get_json()["message"]


def test_check_in_and_out_flow(client, people, office):
    login(client, "emp-1")

    status = client.get("/api/attendance/status").get_json()
    assert status["state"] == "NOT_STARTED"
    assert status["allowed_actions"] == ["CHECK_IN"]

    resp = client.post("/api/attendance/check-in", json=_verified(office.latitude, office.longitude))
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["action"] == "CHECK_IN"
    assert body["status"]["state"] == "IN_PROGRESS_SAME_SITE"

    again = client.post("/api/attendance/check-in", json=_verified(office.latitude, office.longitude))
    assert again.status_code == 400
    assert again.get_json()["code"] == "action_not_allowed"

    far = client.post("/api/attendance/check-out", json=_verified(office.latitude + 0.01, office.longitude))
    assert far.status_code == 400
    assert far.get_json()["code"] == "out_of_range"
    assert far.get_json()["distance_meters"] > 1000

    done = client.post("/api/attendance/check-out", json=_verified(office.latitude, office.longitude))
    assert done.status_code == 200
    assert done.get_json()["status"]["state"] == "COMPLETED"

    history = client.get("/api/attendance/history").get_json()
    assert len(history["rows"]) == 1
    assert history["rows"][0]["status"] == "Completed"

    csv_resp = client.get("/me/history.csv")
    assert csv_resp.mimetype == "text/csv"
    assert "employee_id" in csv_resp.get_data(as_text=True).splitlines()[0]


def test_failed_biometric_and_gps(client, people, office):
    login(client, "emp-1")

    resp = client.post(
        "/api/attendance/check-in",
        json={"biometric": {"outcome": "failed"}, "location": {"lat": office.latitude, "lng": office.longitude}},
    )
    assert resp.get_json()["code"] == "authentication_failed"

    resp = client.post("/api/attendance/check-in", json={"biometric": {"outcome": "success"}, "location": {"error": "timeout"}})
    assert resp.get_json()["code"] == "location_unavailable"

    resp = client.post("/api/attendance/teleport", json={})
    assert resp.status_code == 400


def test_admin_endpoints_are_admin_only(client, people, office):
    login(client, "emp-1")
    assert client.get("/api/admin/users").status_code == 403

    login(client, "admin-1")
    users = client.get("/api/admin/users").get_json()["users"]
    assert {u["uid"] for u in users} == {"admin-1", "emp-1"}

    created = client.post("/api/admin/locations", json={"name": "Warehouse", "lat": 10.8, "lng": 106.7})
    assert created.status_code == 201
    site_id = created.get_json()["location"]["id"]

    assert client.post("/api/admin/locations", json={"name": "Nowhere"}).status_code == 400

    resp = client.post("/api/admin/users/emp-1/location", json={"location_id": site_id})
    assert resp.status_code == 200

    login(client, "emp-1")
    status = client.get("/api/attendance/status").get_json()
    assert status["location"] == "Warehouse"


def _setup_tenant(client, make_backend_config):
    return client.post(
        "/api/tenant/config",
        json={
            "backend_config": json.loads(make_backend_config()),
            "company_name": "Acme Corp",
            "project_id": "acme-attendance",
        },
    )


def test_tenant_qr_round_trip(client, app, people, make_backend_config):
    assert client.get("/api/tenant").get_json()["configured"] is False

    resp = _setup_tenant(client, make_backend_config)
    assert resp.status_code == 200
    assert resp.get_json()["changed"] is True
    assert app.config["TENANT_PROJECT_ID"] == "acme-attendance"

    # Once configured, changes need an admin.
    assert _setup_tenant(client, make_backend_config).status_code == 401

    login(client, "emp-1")
    assert client.get("/admin/qr/image").status_code == 403

    login(client, "admin-1")
    image = client.get("/admin/qr/image?download=1")
    assert image.mimetype == "image/png"
    assert "company_qr.png" in image.headers["Content-Disposition"]
    assert min(Image.open(io.BytesIO(image.data)).size) >= 512

    token = client.get("/api/admin/qr").get_json()["token"]
    scanned = client.post("/api/tenant/scan", json={"code": token}).get_json()
    assert scanned["success"] is True
    assert scanned["changed"] is False
    assert scanned["company_name"] == "Acme Corp"

    bad = client.post("/api/tenant/scan", json={"code": "not-a-token"})
    assert bad.status_code == 400
    assert bad.get_json()["code"] == "decryption_failed"



def test_scan_cannot_switch_bound_tenant_without_admin(client, app, container, people, make_backend_config):
    _setup_tenant(client, make_backend_config)
    other = container.codec.encode(make_backend_config("other-attendance", "1:456:android:def"), "Other Co", "other-attendance")

    anonymous = client.post("/api/tenant/scan", json={"code": other})
    assert anonymous.status_code == 403
    assert anonymous.get_json()["code"] == "forbidden"

    login(client, "emp-1")
    assert client.post("/api/tenant/scan", json={"code": other}).status_code == 403
    assert container.backend_manager.current_payload.tenant_project_id == "acme-attendance"
    assert app.config["TENANT_PROJECT_ID"] == "acme-attendance"

    login(client, "admin-1")
    switched = client.post("/api/tenant/scan", json={"code": other}).get_json()
    assert switched["changed"] is True
    assert switched["project_id"] == "other-attendance"
    assert app.config["TENANT_PROJECT_ID"] == "other-attendance"


def test_tenant_scan_from_photo(client, people, make_backend_config):
    pytest.importorskip("pyzbar.pyzbar")

    _setup_tenant(client, make_backend_config)
    login(client, "admin-1")
    png = client.get("/admin/qr/image").data

    resp = client.post(
        "/api/tenant/scan/image",
        data={"image": (io.BytesIO(png), "qr.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert resp.get_json()["company_name"] == "Acme Corp"

    missing = client.post("/api/tenant/scan/image", data={}, content_type="multipart/form-data")
    assert missing.status_code == 400
