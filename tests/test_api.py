"""
End-to-end HTTP flow: owner signs up, builds a gym, members self-register
through the branch link and check in with their QR code.
"""
import inspect
from decimal import Decimal

from fastapi.routing import APIRoute


def _register_and_login(client, username="alice"):
    resp = client.post("/api/auth/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": "password123",
        "name": username.title(),
    })
    assert resp.status_code == 200, resp.text

    resp = client.post("/api/auth/login", data={"username": username, "password": "password123"})
    assert resp.status_code == 200, resp.text
    token = resp.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def _create_branch(client, headers):
    gym = client.post("/api/gyms", json={"name": "Iron Paradise"}, headers=headers).json()
    resp = client.post("/api/branches", json={"name": "Downtown", "gym_id": gym["id"]}, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


def _register_member(client, branch_id, name="Asha Rao"):
    resp = client.post("/api/members", json={
        "name": name,
        "phone": "9876543210",
        "branch_id": branch_id,
        "membership_plan": "quarterly",
    })
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_full_owner_flow(client):
    headers = _register_and_login(client)
    branch = _create_branch(client, headers)
    assert branch["qr_code_url"].startswith("data:image/png;base64,")

    member = _register_member(client, branch["id"])
    assert member["status"] == "active"

    members = client.get("/api/members", headers=headers).json()
    assert [m["id"] for m in members] == [member["id"]]

    resp = client.post("/api/attendance/checkin", json={"qr_code_id": member["qr_code_id"]})
    assert resp.status_code == 200
    assert resp.json()["member"]["id"] == member["id"]

    today = client.get("/api/attendance/today", headers=headers).json()
    assert len(today) == 1

    resp = client.post("/api/payments", json={"member_id": member["id"], "amount": "2500.00"}, headers=headers)
    assert resp.status_code == 200, resp.text
    payment = resp.json()

    metrics = client.get("/api/analytics", headers=headers).json()
    assert metrics["total_members"] == 1
    assert metrics["active_members"] == 1
    assert Decimal(str(metrics["pending_fees"])) == Decimal("2500.00")

    resp = client.patch(f"/api/payments/{payment['id']}/status", json={"status": "paid"}, headers=headers)
    assert resp.json()["paid_at"] is not None
    metrics = client.get(f"/api/branches/{branch['id']}/analytics", headers=headers).json()
    assert Decimal(str(metrics["monthly_revenue"])) == Decimal("2500.00")
    assert Decimal(str(metrics["pending_fees"])) == Decimal("0")


def test_owner_routes_require_token(client):
    for path in ("/api/members", "/api/gyms", "/api/analytics", "/api/attendance/today"):
        resp = client.get(path)
        assert resp.status_code == 401
        assert resp.json()["kind"] == "unauthorized"


def test_garbage_token_rejected(client):
    resp = client.get("/api/members", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_wrong_password(client):
    _register_and_login(client)
    resp = client.post("/api/auth/login", data={"username": "alice", "password": "wrong"})
    assert resp.status_code == 401


def test_duplicate_owner_conflict(client):
    _register_and_login(client)
    resp = client.post("/api/auth/register", json={
        "username": "alice", "email": "alice@example.com", "password": "password123", "name": "Alice"
    })
    assert resp.status_code == 409
    assert resp.json()["kind"] == "conflict"


def test_unknown_qr_code_is_404(client):
    resp = client.post("/api/attendance/checkin", json={"qr_code_id": "QR_0_nothere"})
    assert resp.status_code == 404
    assert resp.json()["kind"] == "not_found"


def test_client_cannot_set_membership_end(client):
    headers = _register_and_login(client)
    branch = _create_branch(client, headers)
    resp = client.post("/api/members", json={
        "name": "Asha Rao",
        "phone": "9876543210",
        "branch_id": branch["id"],
        "membership_plan": "monthly",
        "membership_end": "2099-01-01T00:00:00",
    })
    assert resp.status_code == 422
    assert resp.json()["kind"] == "validation_error"


def test_other_owner_sees_404(client):
    alice = _register_and_login(client, "alice")
    branch = _create_branch(client, alice)
    member = _register_member(client, branch["id"])

    bob = _register_and_login(client, "bob")
    assert client.get("/api/members", headers=bob).json() == []
    resp = client.get(f"/api/members/{member['id']}", headers=bob)
    assert resp.status_code == 404
    resp = client.post(f"/api/qr/generate/{branch['id']}", headers=bob)
    assert resp.status_code == 404


def test_regenerate_qr_over_http(client):
    headers = _register_and_login(client)
    branch = _create_branch(client, headers)
    resp = client.post(
        f"/api/qr/generate/{branch['id']}",
        params={"base_url": "https://join.example.com"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["registration_url"] == f"https://join.example.com/register?branchId={branch['id']}"


def test_payment_intent_without_stripe_is_502(client, monkeypatch):
    import stripe

    monkeypatch.setattr(stripe, "api_key", None)
    headers = _register_and_login(client)
    branch = _create_branch(client, headers)
    member = _register_member(client, branch["id"])

    resp = client.post("/api/payments/intent", json={"member_id": member["id"], "amount": "100.00"}, headers=headers)
    assert resp.status_code == 502
    assert resp.json()["kind"] == "upstream_error"


def test_huge_expiring_window_is_422(client):
    headers = _register_and_login(client)
    resp = client.get("/api/members/expiring/999999999", headers=headers)
    assert resp.status_code == 422
    assert resp.json()["kind"] == "validation_error"


def test_membership_start_past_year_9999_is_422(client):
    headers = _register_and_login(client)
    branch = _create_branch(client, headers)
    resp = client.post("/api/members", json={
        "name": "Asha Rao",
        "phone": "9876543210",
        "branch_id": branch["id"],
        "membership_plan": "yearly",
        "membership_start": "9999-12-01T00:00:00",
    })
    assert resp.status_code == 422
    assert resp.json()["kind"] == "validation_error"
    assert client.get("/api/members", headers=headers).json() == []


def test_member_email_without_at_is_422(client):
    headers = _register_and_login(client)
    branch = _create_branch(client, headers)
    resp = client.post("/api/members", json={
        "name": "Asha Rao",
        "phone": "9876543210",
        "email": "asha.example.com",
        "branch_id": branch["id"],
        "membership_plan": "monthly",
    })
    assert resp.status_code == 422
    assert resp.json()["kind"] == "validation_error"


def test_blocking_handlers_run_in_threadpool():
    from auth import get_current_owner
    from main import app

    assert not inspect.iscoroutinefunction(get_current_owner)
    for route in app.routes:
        if not isinstance(route, APIRoute) or route.path in ("/api/payments/webhook", "/api/health"):
            continue
        assert not inspect.iscoroutinefunction(route.endpoint), route.path
