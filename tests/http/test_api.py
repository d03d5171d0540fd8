from __future__ import annotations

import base64
from datetime import datetime
from types import SimpleNamespace

import pytest
from werkzeug.security import generate_password_hash

from src.freemeal_tracker.freemeal_tracker.claims.service import MealClaimService
from src.freemeal_tracker.freemeal_tracker.core.enums import ClaimStatus
from src.freemeal_tracker.freemeal_tracker.main import create_app
from src.freemeal_tracker.freemeal_tracker.members.model import LookupItem
from src.freemeal_tracker.freemeal_tracker.members.service import MemberService
from src.freemeal_tracker.freemeal_tracker.reports.service import FreemealReportService
from src.freemeal_tracker.freemeal_tracker.reports.weekly import WeeklyReportService
from src.freemeal_tracker.freemeal_tracker.users.model import AdminUser
from src.freemeal_tracker.freemeal_tracker.users.service import AuthService


class OneAdmin:
    def __init__(self):
        self.admin = AdminUser(1, "Admin Demo", "admin", generate_password_hash("admin123"))

    def get_by_identifier(self, identifier):
        return self.admin if identifier == "admin" else None

    def get_by_id(self, admin_id):
        return self.admin if admin_id == 1 else None


class NoMembers:
    def list_members(self, category, filters, *, limit, offset):
        return []

    def count_members(self, category, filters):
        return 0

    def get_member(self, category, member_id):
        return None

    def delete_member(self, category, member_id):
        return False

    def list_departments(self):
        return [LookupItem(1, "Operations")]

    def list_positions(self):
        return [LookupItem(1, "Agent")]


class FakeMailer:
    def __init__(self):
        self.sent = []

    def send(self, **kwargs):
        self.sent.append(kwargs)


@pytest.fixture
def container(claims, people, fixed_now, log_row):
    claims.log_rows = [log_row(1, "E-100", "Juan Dela Cruz", datetime(2024, 5, 28, 8, 0))]
    clock = lambda: fixed_now  # noqa: E731
    reports = FreemealReportService(claims, clock=clock)
    return SimpleNamespace(
        clock=clock,
        auth_service=AuthService(OneAdmin()),
        meal_claim_service=MealClaimService(claims, people, clock=clock),
        member_service=MemberService(NoMembers(), people),
        report_service=reports,
        weekly_report_service=WeeklyReportService(reports, FakeMailer(), recipients="ops@example.com"),
    )


@pytest.fixture
def client(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


@pytest.fixture
def admin_client(client):
    resp = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return client


def test_kiosk_scan_sequence(client):
    bodies = [client.post("/api/attendance/add", json={"rfid_tag": "0004512345"}).get_json() for _ in range(3)]

    assert [b["decision"] for b in bodies] == ["CLAIMED", "CLAIMED_ALREADY", "BLOCKED"]
    assert bodies[0]["logType"] == "CLAIMED"
    assert bodies[0]["employee"]["ashima_id"] == "E-100"
    assert bodies[0]["employee"]["meal_count"] == 2
    assert bodies[0]["attendanceLog"]["date_claimed"] == "2024-06-03"
    assert bodies[1]["attendanceLog"]["log_type"] == ClaimStatus.CLAIMED_ALREADY.value


def test_kiosk_manual_date_override(client):
    resp = client.post("/api/attendance/add", json={"ashima_id": "I-200", "time_claimed": "2024-05-31"})

    assert resp.status_code == 200
    assert resp.get_json()["attendanceLog"]["time_claimed"] == "2024-05-31 08:00:00"


@pytest.mark.parametrize(
    "payload",
    [{}, {"rfid_tag": "  "}, {"rfid_tag": "E-100", "time_claimed": "soon"}, {"rfid_tag": "E-100", "time_claimed": "2024-06-04"}],
)
def test_kiosk_bad_requests(client, payload):
    resp = client.post("/api/attendance/add", json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_kiosk_unknown_card_is_404(client):
    resp = client.post("/api/attendance/add", json={"rfid_tag": "NOPE"})

    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_kiosk_unexpected_failure_is_500(client, container):
    def boom(*args, **kwargs):
        raise RuntimeError("db down")

    container.meal_claim_service.record_claim = boom

    resp = client.post("/api/attendance/add", json={"rfid_tag": "E-100"})

    assert resp.status_code == 500
    assert resp.get_json()["error"]


def test_recent_logs(client):
    resp = client.get("/api/attendance/logs?limit=5")

    assert resp.status_code == 200
    assert [r["ashima_id"] for r in resp.get_json()["logs"]] == ["E-100"]


def test_admin_routes_require_login(client):
    assert client.get("/api/admin/employees").status_code == 401
    assert client.get("/api/admin/freemeal-logs").status_code == 401
    assert client.get("/api/admin/me").status_code == 401


def test_login_failure(client):
    resp = client.post("/api/admin/login", json={"username": "admin", "password": "nope"})
    assert resp.status_code == 401


def test_me_and_logout(admin_client):
    assert admin_client.get("/api/admin/me").get_json()["username"] == "admin"
    admin_client.post("/api/admin/logout")
    assert admin_client.get("/api/admin/me").status_code == 401


def test_members_endpoints(admin_client):
    listing = admin_client.get("/api/admin/interns?page=1").get_json()
    assert listing == {"data": [], "total": 0, "page": 1, "limit": 10, "pages": 0}

    assert admin_client.get("/api/admin/departments").get_json() == [{"id": 1, "name": "Operations"}]
    assert admin_client.get("/api/admin/contractors").status_code == 404
    assert admin_client.get("/api/admin/trainees/99").status_code == 404
    assert admin_client.delete("/api/admin/employees/99").status_code == 404
    assert admin_client.post("/api/admin/employees", json={"name": "No Id"}).status_code == 400


def test_freemeal_logs_and_stats(admin_client):
    page = admin_client.get("/api/admin/freemeal-logs?log_type=ALL&limit=10").get_json()
    assert page["total"] == 1
    assert page["limit"] == 10

    assert admin_client.get("/api/admin/freemeal-logs?start_date=06/01/2024").status_code == 400

    stats = admin_client.get("/api/admin/freemeal-logs/stats").get_json()
    assert stats == {"today_count": 0, "claimed_today": 0, "already_claimed_today": 0, "total_logs": 1}


def test_export_previous_week(admin_client):
    resp = admin_client.get("/api/admin/freemeal-logs/export?start_date=previous_week")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert 'filename="freemeal_logs_2024-05-27_to_2024-06-02.csv"' in resp.headers["Content-Disposition"]
    assert b"E-100" in resp.data


def test_send_previous_week_requires_cron_secret(client, container):
    assert client.post("/api/reports/send-previous-week").status_code == 401
    assert client.post("/api/reports/send-previous-week", headers={"Authorization": "Bearer wrong"}).status_code == 401
    assert client.post("/api/reports/send-previous-week", headers={"Authorization": "Bearer caf\u00e9"}).status_code == 401

    resp = client.post("/api/reports/send-previous-week", headers={"Authorization": "Bearer test-cron-secret"})

    assert resp.status_code == 200
    assert resp.get_json()["success"] is True
    assert resp.get_json()["rows"] == 1
