import uuid

import pytest

from app.models.user import User

from conftest import API, auth_headers, order_body


def test_pending_user_sees_own_profile(client, make_user):
    pending = make_user(account_status="pending")

    resp = client.get(f"{API}/users/me", headers=auth_headers(pending))

    assert resp.status_code == 200
    assert resp.json()["account_status"] == "pending"


def test_update_me(client, customer):
    resp = client.patch(
        f"{API}/users/me",
        json={"name": "  Jane  ", "phone_number": "555-0199"},
        headers=auth_headers(customer),
    )

    assert resp.status_code == 200
    assert resp.json()["name"] == "Jane"
    assert resp.json()["phone_number"] == "555-0199"


def test_update_me_cannot_change_role(client, customer):
    resp = client.patch(
        f"{API}/users/me", json={"role": "admin"}, headers=auth_headers(customer)
    )
    assert resp.status_code == 422


def test_approve_user(client, session, admin, make_user, sent_emails):
    pending = make_user(account_status="pending")

    resp = client.post(f"{API}/users/{pending.id}/approve", headers=auth_headers(admin))

    assert resp.status_code == 200
    assert resp.json()["account_status"] == "approved"
    assert resp.json()["approved_at"] is not None
    stored = session.get(User, pending.id)
    assert stored.approved_by == admin.id
    assert sent_emails[-1]["to"] == pending.email
    assert "approved" in sent_emails[-1]["subject"]

    again = client.post(f"{API}/users/{pending.id}/approve", headers=auth_headers(admin))
    assert again.status_code == 409


def test_reject_user(client, admin, make_user, sent_emails):
    pending = make_user(account_status="pending")

    resp = client.post(
        f"{API}/users/{pending.id}/reject",
        json={"reason": "Incomplete profile"},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 200
    assert resp.json()["account_status"] == "rejected"
    assert resp.json()["rejection_reason"] == "Incomplete profile"
    assert "Incomplete profile" in sent_emails[-1]["body"]


def test_reject_requires_reason(client, admin, make_user):
    pending = make_user(account_status="pending")
    resp = client.post(
        f"{API}/users/{pending.id}/reject", json={"reason": " "}, headers=auth_headers(admin)
    )
    assert resp.status_code == 422


def test_approval_endpoints_require_admin(client, customer, make_user):
    pending = make_user(account_status="pending")
    resp = client.post(f"{API}/users/{pending.id}/approve", headers=auth_headers(customer))
    assert resp.status_code == 403


def test_pending_list_and_stats(client, admin, customer, make_user):
    make_user(account_status="pending")
    make_user(account_status="pending")
    make_user(account_status="rejected")
    headers = auth_headers(admin)

    pending = client.get(f"{API}/users/pending", headers=headers).json()
    stats = client.get(f"{API}/users/stats", headers=headers).json()

    assert len(pending) == 2
    assert stats == {"total": 4, "pending": 2, "approved": 1, "rejected": 1}


def test_promote_to_admin_approves(client, admin, make_user):
    pending = make_user(account_status="pending")

    resp = client.patch(
        f"{API}/users/{pending.id}/role", json={"role": "admin"}, headers=auth_headers(admin)
    )

    assert resp.status_code == 200
    assert resp.json()["role"] == "admin"
    assert resp.json()["account_status"] == "approved"


def test_approved_user_can_then_order(client, admin, make_user, make_product):
    pending = make_user(account_status="pending")
    product = make_product()
    body = order_body([(product, 1)])

    blocked = client.post(f"{API}/orders", json=body, headers=auth_headers(pending))
    client.post(f"{API}/users/{pending.id}/approve", headers=auth_headers(admin))
    allowed = client.post(f"{API}/orders", json=body, headers=auth_headers(pending))

    assert blocked.status_code == 403
    assert allowed.status_code == 201


@pytest.fixture
def auth_calls(monkeypatch):
    """Record Supabase Auth admin calls instead of hitting the API."""
    calls: dict[str, list] = {"create": [], "update": [], "delete": []}

    def fake_create(email, password):
        calls["create"].append(email)
        return uuid.uuid4()

    monkeypatch.setattr("app.services.user_service.create_auth_user", fake_create)
    monkeypatch.setattr(
        "app.services.user_service.update_auth_user",
        lambda user_id, attributes: calls["update"].append((user_id, attributes)),
    )
    monkeypatch.setattr(
        "app.services.user_service.delete_auth_user",
        lambda user_id: calls["delete"].append(user_id),
    )
    return calls


def new_admin_body(email="ops@example.com"):
    return {"email": email, "password": "s3cret-pass", "name": "Ops", "phone_number": "555-0142"}


def test_create_admin(client, session, admin, auth_calls, sent_emails):
    resp = client.post(f"{API}/admin/admins", json=new_admin_body(), headers=auth_headers(admin))

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["role"] == "admin"
    assert body["account_status"] == "approved"
    assert auth_calls["create"] == ["ops@example.com"]
    assert session.get(User, uuid.UUID(body["id"])).approved_by == admin.id
    assert sent_emails[-1]["to"] == "ops@example.com"
    assert "s3cret-pass" not in sent_emails[-1]["body"]


def test_create_admin_duplicate_email(client, admin, customer, auth_calls):
    resp = client.post(
        f"{API}/admin/admins",
        json=new_admin_body(email=customer.email),
        headers=auth_headers(admin),
    )

    assert resp.status_code == 409
    assert auth_calls["create"] == []


def test_create_admin_short_password(client, admin, auth_calls):
    body = new_admin_body()
    body["password"] = "short"
    resp = client.post(f"{API}/admin/admins", json=body, headers=auth_headers(admin))
    assert resp.status_code == 422


def test_list_admins(client, admin, make_user, customer):
    second = make_user(role="admin")

    resp = client.get(f"{API}/admin/admins", headers=auth_headers(admin))

    assert {u["id"] for u in resp.json()} == {str(admin.id), str(second.id)}


def test_update_admin(client, admin, make_user, auth_calls):
    other = make_user(role="admin")

    resp = client.patch(
        f"{API}/admin/admins/{other.id}",
        json={"name": "Night Shift", "email": "night@example.com", "password": "another-pass"},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 200
    assert resp.json()["name"] == "Night Shift"
    assert resp.json()["email"] == "night@example.com"
    assert auth_calls["update"] == [
        (other.id, {"email": "night@example.com", "password": "another-pass"})
    ]


def test_update_admin_rejects_customer_target(client, admin, customer, auth_calls):
    resp = client.patch(
        f"{API}/admin/admins/{customer.id}", json={"name": "X"}, headers=auth_headers(admin)
    )
    assert resp.status_code == 404


def test_delete_admin(client, session, admin, make_user, auth_calls):
    other = make_user(role="admin")
    other_id = other.id

    resp = client.delete(f"{API}/admin/admins/{other_id}", headers=auth_headers(admin))

    assert resp.status_code == 204
    assert session.get(User, other_id) is None
    assert auth_calls["delete"] == [other_id]


def test_admin_cannot_delete_self(client, admin, make_user, auth_calls):
    make_user(role="admin")

    resp = client.delete(f"{API}/admin/admins/{admin.id}", headers=auth_headers(admin))

    assert resp.status_code == 400
    assert auth_calls["delete"] == []


def test_admin_management_requires_admin(client, customer, auth_calls):
    resp = client.post(
        f"{API}/admin/admins", json=new_admin_body(), headers=auth_headers(customer)
    )
    assert resp.status_code == 403
