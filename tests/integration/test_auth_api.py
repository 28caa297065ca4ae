from datetime import datetime, timedelta, timezone

import jwt

from storefront.db import models
from storefront.utils.settings import get_settings, refresh_settings_cache


def _register(client, **overrides):
    body = {"email": "new@example.com", "password": "secret123", "name": "New User"}
    body.update(overrides)
    return client.post("/api/auth/register", json=body)


def test_register_returns_token_and_public_user(client):
    r = _register(client, phone="010-0000-0000")
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    user = body["data"]["user"]
    assert user["email"] == "new@example.com"
    assert user["phone"] == "010-0000-0000"
    assert "passwordHash" not in user and "password" not in user
    assert body["data"]["token"]


def test_register_validation_messages(client):
    cases = [
        ({"email": "bad"}, "Invalid email format"),
        ({"password": "123"}, "Password must be at least 6 characters"),
        ({"name": ""}, "Name is required"),
    ]
    for override, message in cases:
        r = _register(client, **override)
        assert r.status_code == 400
        assert r.json()["error"] == message


def test_register_rejects_values_longer_than_columns(client):
    cases = [
        ({"name": "n" * 101}, "Name must be at most 100 characters"),
        ({"email": "a" * 250 + "@example.com"}, "Invalid email format"),
        ({"phone": "0" * 33}, None),
    ]
    for override, message in cases:
        r = _register(client, **override)
        assert r.status_code == 400, override
        if message:
            assert r.json()["error"] == message
    assert _register(client, name="n" * 100, phone="0" * 32).status_code == 201


def test_register_duplicate_email_is_case_insensitive(client):
    assert _register(client).status_code == 201
    r = _register(client, email="NEW@example.com")
    assert r.status_code == 409
    assert r.json() == {"success": False, "error": "Email already registered"}


def test_register_promotes_listed_admin(client, monkeypatch):
    monkeypatch.setenv("ADMIN_EMAILS", "boss@example.com")
    refresh_settings_cache()
    r = _register(client, email="boss@example.com")
    token = r.json()["data"]["token"]
    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["data"]["isAdmin"] is True


def test_login_success_and_failures(client, user):
    ok = client.post("/api/auth/login", json={"email": "Shopper@Example.com", "password": "password123"})
    assert ok.status_code == 200
    assert ok.json()["message"] == "Login successful"
    assert ok.json()["data"]["user"]["id"] == str(user.id)

    wrong = client.post("/api/auth/login", json={"email": "shopper@example.com", "password": "nope-nope"})
    unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "password123"})
    for r in (wrong, unknown):
        assert r.status_code == 401
        assert r.json()["error"] == "Invalid email or password"

    empty = client.post("/api/auth/login", json={"email": "shopper@example.com", "password": ""})
    assert empty.status_code == 400
    assert empty.json()["error"] == "Password is required"


def test_login_promotes_listed_admin(client, user, db_session, monkeypatch):
    monkeypatch.setenv("ADMIN_EMAILS", "shopper@example.com")
    refresh_settings_cache()
    r = client.post("/api/auth/login", json={"email": "shopper@example.com", "password": "password123"})
    assert r.status_code == 200
    db_session.expire_all()
    assert db_session.get(models.User, user.id).is_admin is True


def test_me_and_profile_update(client, user, auth_headers):
    r = client.get("/api/auth/me", headers=auth_headers(user))
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["email"] == "shopper@example.com"
    assert data["isAdmin"] is False
    assert "createdAt" in data

    r = client.patch("/api/auth/me", json={"name": "Renamed", "phone": "123"}, headers=auth_headers(user))
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Renamed"
    assert r.json()["data"]["phone"] == "123"

    for body in ({"phone": "1" * 33}, {"name": "n" * 101}):
        r = client.patch("/api/auth/me", json=body, headers=auth_headers(user))
        assert r.status_code == 400, body


def test_auth_chain_errors(client, user, db_session):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["error"] == "Access token required"

    r = client.get("/api/auth/me", headers={"Authorization": "Token abc"})
    assert r.json()["error"] == "Access token required"

    r = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid or expired token"

    s = get_settings()
    expired = jwt.encode(
        {"userId": str(user.id), "email": user.email, "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        s.jwt_secret,
        algorithm=s.jwt_algorithm,
    )
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.json()["error"] == "Invalid or expired token"


def test_token_for_deleted_user(client, user, auth_headers, db_session):
    headers = auth_headers(user)
    db_session.delete(user)
    db_session.commit()
    r = client.get("/api/auth/me", headers=headers)
    assert r.status_code == 401
    assert r.json()["error"] == "User not found"


def test_logout(client, user, auth_headers):
    r = client.post("/api/auth/logout", headers=auth_headers(user))
    assert r.status_code == 200
    assert r.json() == {"success": True, "data": None, "message": "Logged out successfully"}
    assert client.post("/api/auth/logout").status_code == 401
