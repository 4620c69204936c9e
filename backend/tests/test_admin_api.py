"""HTTP-level tests for the admin router and its auth gate."""

from __future__ import annotations

from datetime import timedelta

from app.services.token_service import AdminIdentity, TokenService

from conftest import OWNER_EMAIL, OWNER_PASSWORD


def _signup(client, headers, email="new@example.com", password="secret1", name="New"):
    return client.post(
        "/api/admin/signup",
        json={"email": email, "password": password, "name": name},
        headers=headers,
    )


def _assert_no_hash(payload) -> None:
    text = str(payload)
    assert "passwordHash" not in text
    assert "password_hash" not in text
    assert "$2b$" not in text


# ============================================================================
# Auth gate
# ============================================================================


def test_protected_route_without_token(client, owner):
    resp = client.get("/api/admin/me")
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_protected_route_with_garbage_token(client, owner):
    resp = client.get("/api/admin/me", headers={"Authorization": "Bearer nonsense"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


def test_protected_route_with_expired_token(client, owner):
    expired = TokenService("test-secret", ttl=timedelta(seconds=-5)).issue(owner)
    resp = client.get("/api/admin/me", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401


def test_signup_requires_auth(client, owner):
    resp = _signup(client, headers={})
    assert resp.status_code == 401


# ============================================================================
# Signup / login
# ============================================================================


def test_signup_then_login(client, auth_headers):
    resp = _signup(client, auth_headers, email="Fresh@Example.com")
    assert resp.status_code == 201
    body = resp.json()
    assert body["token"]
    assert body["admin"]["email"] == "fresh@example.com"
    assert body["admin"]["name"] == "New"
    _assert_no_hash(body)

    login = client.post(
        "/api/admin/login", json={"email": "fresh@example.com", "password": "secret1"}
    )
    assert login.status_code == 200
    assert login.json()["admin"]["id"] == body["admin"]["id"]
    _assert_no_hash(login.json())


def test_signup_short_password(client, auth_headers):
    resp = _signup(client, auth_headers, password="abc12")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Password must be at least 6 characters"


def test_signup_invalid_email(client, auth_headers):
    resp = _signup(client, auth_headers, email="not-an-email")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid email"


def test_signup_missing_fields(client, auth_headers):
    resp = client.post("/api/admin/signup", json={"email": "x@y.com"}, headers=auth_headers)
    assert resp.status_code == 400


def test_signup_duplicate_email(client, auth_headers):
    resp = _signup(client, auth_headers, email=OWNER_EMAIL.upper())
    assert resp.status_code == 409


def test_login_wrong_password(client, owner):
    resp = client.post(
        "/api/admin/login", json={"email": OWNER_EMAIL, "password": "wrong-pass"}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


def test_login_unknown_email_is_indistinguishable(client, owner):
    resp = client.post(
        "/api/admin/login", json={"email": "nobody@example.com", "password": OWNER_PASSWORD}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


def test_login_token_passes_auth_gate(client, owner):
    token = client.post(
        "/api/admin/login", json={"email": OWNER_EMAIL, "password": OWNER_PASSWORD}
    ).json()["token"]
    resp = client.get("/api/admin/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


# ============================================================================
# me / list
# ============================================================================


def test_me(client, owner, auth_headers):
    resp = client.get("/api/admin/me", headers=auth_headers)
    assert resp.status_code == 200
    admin = resp.json()["admin"]
    assert admin["id"] == owner.id
    assert admin["email"] == OWNER_EMAIL
    assert "createdAt" in admin
    _assert_no_hash(resp.json())


def test_me_for_deleted_identity(client, owner):
    token = client.app.state.token_service.issue(
        AdminIdentity(id="0" * 32, email="gone@example.com")
    )
    resp = client.get("/api/admin/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 404


def test_list_admins_newest_first(client, auth_headers):
    _signup(client, auth_headers, email="second@example.com")
    resp = client.get("/api/admin", headers=auth_headers)
    assert resp.status_code == 200
    emails = [a["email"] for a in resp.json()]
    assert emails == ["second@example.com", OWNER_EMAIL]
    _assert_no_hash(resp.json())


# ============================================================================
# update
# ============================================================================


def test_update_admin(client, owner, auth_headers):
    resp = client.put(
        f"/api/admin/{owner.id}", json={"name": "Renamed"}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json()["admin"]["name"] == "Renamed"
    assert resp.json()["admin"]["email"] == OWNER_EMAIL


def test_update_admin_invalid_id(client, auth_headers):
    resp = client.put("/api/admin/123", json={"name": "x"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid admin id"


def test_update_admin_email_in_use(client, owner, auth_headers):
    other = _signup(client, auth_headers, email="other@example.com").json()["admin"]
    resp = client.put(
        f"/api/admin/{other['id']}", json={"email": OWNER_EMAIL}, headers=auth_headers
    )
    assert resp.status_code == 409


def test_update_admin_short_password(client, owner, auth_headers):
    resp = client.put(
        f"/api/admin/{owner.id}", json={"password": "123"}, headers=auth_headers
    )
    assert resp.status_code == 400


def test_update_admin_not_found(client, auth_headers):
    resp = client.put(f"/api/admin/{'0' * 32}", json={"name": "x"}, headers=auth_headers)
    assert resp.status_code == 404


# ============================================================================
# delete
# ============================================================================


def test_delete_last_admin(client, owner, auth_headers):
    # Only the owner exists, so any delete is refused before lookup.
    resp = client.delete(f"/api/admin/{'0' * 32}", headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cannot delete the last admin account"


def test_delete_self(client, owner, auth_headers):
    _signup(client, auth_headers, email="other@example.com")
    resp = client.delete(f"/api/admin/{owner.id}", headers=auth_headers)
    assert resp.status_code == 403


def test_delete_other_admin(client, auth_headers):
    other = _signup(client, auth_headers, email="other@example.com").json()["admin"]

    resp = client.delete(f"/api/admin/{other['id']}", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    remaining = client.get("/api/admin", headers=auth_headers).json()
    assert [a["email"] for a in remaining] == [OWNER_EMAIL]


def test_delete_invalid_id(client, auth_headers):
    resp = client.delete("/api/admin/xyz", headers=auth_headers)
    assert resp.status_code == 400
