from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

import pytest

from src.leave_portal.leave_portal.core.enums import Role
from src.leave_portal.leave_portal.core.exceptions import ConflictError
from src.leave_portal.leave_portal.main import create_app

SETTINGS = SimpleNamespace(SECRET_KEY="test-secret", DEBUG=False, LOG_LEVEL="WARNING")


@pytest.fixture()
def client(world):
    app = create_app(SETTINGS, container=world.container)
    return app.test_client()


def _auth(world, employee):
    return {"Authorization": f"Bearer {world.auth.issue(employee.employee_id, employee.role)}"}


def _submit(client, world, employee=None, **body):
    payload = {"type": "ANNUAL_PAID", "startDate": "2025-07-01", "endDate": "2025-07-03", "reason": "trip"}
    payload.update(body)
    return client.post("/api/leave-requests", json=payload, headers=_auth(world, employee or world.ops_employee))


def test_missing_token_is_401(client):
    resp = client.get("/api/leave-requests/my")
    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "UNAUTHENTICATED"


def test_garbage_and_expired_tokens(client, world):
    resp = client.get("/api/leave-requests/my", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "INVALID_TOKEN"

    expired = world.auth.issue(8, Role.EMPLOYEE, expires_in=timedelta(seconds=-1))
    resp = client.get("/api/leave-requests/my", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "TOKEN_EXPIRED"


def test_submit_returns_created_request(client, world):
    resp = _submit(client, world)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "SUBMITTED"
    assert body["statusLabel"] == "Submitted"
    assert body["days"] == 3
    assert body["currentAssigneeId"] == world.ops_service_head.employee_id
    assert body["startDate"] == "2025-07-01"


def test_submit_validation_errors_are_400(client, world):
    resp = _submit(client, world, startDate="2025-07-05", endDate="2025-07-01")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "INVALID_RANGE"

    resp = _submit(client, world, startDate="2025-07-01", endDate="2025-08-30")
    err = resp.get_json()["error"]
    assert resp.status_code == 400
    assert err["code"] == "INSUFFICIENT_BALANCE"
    assert err["details"]["remainingDays"] == 26
    assert err["retryable"] is False


def test_ceo_request_is_refused(client, world):
    resp = _submit(client, world, employee=world.ceo)
    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "CEO_REQUEST_UNSUPPORTED"


def test_decision_flow_over_http(client, world):
    rid = _submit(client, world).get_json()["id"]

    resp = client.post(f"/api/leave-requests/{rid}/approve", json={}, headers=_auth(world, world.ops_head))
    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "NOT_ASSIGNEE"

    pending = client.get("/api/leave-requests/pending", headers=_auth(world, world.ops_service_head)).get_json()
    assert [r["id"] for r in pending["items"]] == [rid]

    resp = client.post(
        f"/api/leave-requests/{rid}/escalate",
        json={"comment": "needs director"},
        headers=_auth(world, world.ops_service_head),
    )
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "PENDING"
    assert resp.get_json()["statusLabel"] == "Escalated"

    resp = client.post(f"/api/leave-requests/{rid}/approve", json={"comment": "ok"}, headers=_auth(world, world.ops_head))
    assert resp.get_json()["status"] == "APPROVED"

    resp = client.post(f"/api/leave-requests/{rid}/cancel", headers=_auth(world, world.ops_employee))
    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "TERMINAL_STATE"

    detail = client.get(f"/api/leave-requests/{rid}", headers=_auth(world, world.ops_employee)).get_json()
    assert [d["type"] for d in detail["history"]] == ["SUBMIT", "ESCALATE", "APPROVE"]
    assert detail["history"][1]["targetRole"] == "DEPT_HEAD"


def test_unknown_request_is_404(client, world):
    resp = client.get("/api/leave-requests/999", headers=_auth(world, world.ceo))
    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "REQUEST_NOT_FOUND"


def test_take_is_clamped(client, world):
    body = client.get("/api/leave-requests/my?take=5000&page=0", headers=_auth(world, world.ops_employee)).get_json()
    assert body["take"] == 300
    assert body["page"] == 1


def test_history_all_scope_is_ceo_only(client, world):
    _submit(client, world)
    resp = client.get("/api/leave-requests/history?scope=all", headers=_auth(world, world.ops_head))
    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "CEO_ONLY"

    body = client.get("/api/leave-requests/history?scope=all", headers=_auth(world, world.ceo)).get_json()
    assert [d["type"] for d in body["items"]] == ["SUBMIT"]


def test_leave_types_and_balance(client, world):
    codes = [o["code"] for o in client.get("/api/leave-types", headers=_auth(world, world.ops_employee)).get_json()]
    assert "ANNUAL_PAID" in codes
    assert "MENSTRUAL" not in codes

    _submit(client, world)
    body = client.get(
        f"/api/employees/{world.ops_employee.employee_id}/leave-balance?year=2025",
        headers=_auth(world, world.accountant),
    ).get_json()
    assert body["employeeId"] == world.ops_employee.employee_id
    assert body["totalAnnualAllowance"] == 26
    assert body["consumedDays"] == 3
    assert body["remainingDays"] == 23

    resp = client.get(
        f"/api/employees/{world.ops_employee.employee_id}/leave-balance", headers=_auth(world, world.dsi_head)
    )
    assert resp.status_code == 403


def test_blackout_crud_and_calendar(client, world):
    ceo = _auth(world, world.ceo)
    resp = client.post(
        "/api/leave-blackouts",
        json={"title": "Ops peak", "startDate": "2025-07-10", "endDate": "2025-07-20", "departmentId": 4},
        headers=ceo,
    )
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["scope"] == "DEPARTMENT"

    resp = client.post(
        "/api/leave-blackouts",
        json={"title": "x", "startDate": "2025-07-10", "endDate": "2025-07-20"},
        headers=_auth(world, world.ops_head),
    )
    assert resp.status_code == 403

    resp = _submit(client, world, startDate="2025-07-15", endDate="2025-07-16")
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "BLACKOUT_CONFLICT"

    cal = client.get(
        "/api/leave-requests/calendar?start=2025-07-01&end=2025-07-31", headers=_auth(world, world.dsi_employee)
    ).get_json()
    assert cal["blackouts"] == []
    cal = client.get(
        "/api/leave-requests/calendar?start=2025-07-01&end=2025-07-31", headers=_auth(world, world.ops_employee)
    ).get_json()
    assert [b["id"] for b in cal["blackouts"]] == [created["id"]]

    assert [b["id"] for b in client.get("/api/leave-blackouts", headers=ceo).get_json()] == [created["id"]]
    assert client.delete(f"/api/leave-blackouts/{created['id']}", headers=ceo).status_code == 204
    assert client.delete(f"/api/leave-blackouts/{created['id']}", headers=ceo).status_code == 404


def test_calendar_requires_dates(client, world):
    resp = client.get("/api/leave-requests/calendar", headers=_auth(world, world.ceo))
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "INVALID_DATE"


def test_conflict_is_409_and_retryable(client, world, monkeypatch):
    rid = _submit(client, world).get_json()["id"]
    monkeypatch.setattr(world.leaves, "compare_and_set", lambda *a, **kw: False)

    resp = client.post(f"/api/leave-requests/{rid}/approve", headers=_auth(world, world.ops_service_head))
    assert resp.status_code == 409
    err = resp.get_json()["error"]
    assert err["code"] == "CONFLICT"
    assert err["retryable"] is True


def test_unexpected_errors_are_500(client, world, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("db exploded")

    monkeypatch.setattr(world.leaves, "list_mine", boom)
    resp = client.get("/api/leave-requests/my", headers=_auth(world, world.ops_employee))
    assert resp.status_code == 500
    assert resp.get_json()["error"]["code"] == "INTERNAL_ERROR"
    assert "exploded" not in resp.get_data(as_text=True)


def test_unknown_route_uses_json_error(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "NOT_FOUND"


def test_non_object_body_is_rejected(client, world):
    resp = client.post("/api/leave-requests", json=["x"], headers=_auth(world, world.ops_employee))
    assert resp.status_code == 400


def test_ceo_reports_over_http(client, world):
    rid = _submit(client, world, employee=world.accountant, startDate="2025-07-01", endDate="2025-07-01").get_json()["id"]

    for path in ("/api/leave-requests/vacation-counts", "/api/leave-requests/ceo-metrics"):
        resp = client.get(path, headers=_auth(world, world.ops_head))
        assert resp.status_code == 403
        assert resp.get_json()["error"]["code"] == "CEO_ONLY"

    counts = client.get("/api/leave-requests/vacation-counts", headers=_auth(world, world.ceo)).get_json()["counts"]
    assert counts[1] == {"departmentId": 2, "departmentType": "DAF", "departmentName": "Finance & Administration", "count": 0}
    assert len(counts) == 4

    metrics = client.get("/api/leave-requests/ceo-metrics", headers=_auth(world, world.ceo)).get_json()
    assert metrics == {"escalatedPending": 1, "decisionsThisMonth": 0, "avgDecisionDelayDays": None}

    client.post(f"/api/leave-requests/{rid}/approve", json={}, headers=_auth(world, world.ceo))
    metrics = client.get("/api/leave-requests/ceo-metrics", headers=_auth(world, world.ceo)).get_json()
    assert metrics["escalatedPending"] == 0
    assert metrics["decisionsThisMonth"] == 1
    assert metrics["avgDecisionDelayDays"] >= 0


def test_oversize_text_is_400_not_500(client, world):
    resp = _submit(client, world, reason="x" * 501)
    assert resp.status_code == 400
    err = resp.get_json()["error"]
    assert err["code"] == "TOO_LONG"
    assert err["details"]["maxLength"] == 500

    rid = _submit(client, world).get_json()["id"]
    resp = client.post(
        f"/api/leave-requests/{rid}/approve",
        json={"comment": "y" * 1001},
        headers=_auth(world, world.ops_service_head),
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "TOO_LONG"

    resp = client.post(
        "/api/leave-blackouts",
        json={"title": "t" * 201, "startDate": "2025-07-10", "endDate": "2025-07-20"},
        headers=_auth(world, world.ceo),
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "TOO_LONG"
