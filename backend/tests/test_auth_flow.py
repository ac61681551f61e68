from __future__ import annotations

from fastapi.testclient import TestClient

from interview_tracker.core import config as app_config
from interview_tracker.models.user import User


def test_register_login_and_me(app, db_session):
    email = "NewUser@Example.com"
    password = "Password_12345"

    with TestClient(app) as c:
        res = c.post("/auth/register", json={"email": email, "password": password, "name": "New User"})
        assert res.status_code == 200

        u = db_session.query(User).filter(User.email == "newuser@example.com").first()
        assert u is not None
        assert u.password_hash != password

        res2 = c.post("/auth/login", json={"email": email, "password": password})
        assert res2.status_code == 200
        token = res2.json()["access_token"]
        assert isinstance(token, str) and token
        assert res2.json()["token_type"] == "bearer"

        res3 = c.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert res3.status_code == 200
        assert res3.json()["email"] == "newuser@example.com"
        assert res3.json()["name"] == "New User"


def test_register_duplicate_email_is_409(client, users):
    user_a, _ = users
    res = client.post(
        "/auth/register",
        json={"email": user_a.email, "password": "Password_12345", "name": "Dup"},
    )
    assert res.status_code == 409
    assert res.json()["error"] == "CONFLICT"


def test_register_short_password_is_rejected(client):
    app_config.settings.PASSWORD_MIN_LENGTH = 8
    res = client.post("/auth/register", json={"email": "short@example.com", "password": "abc", "name": "Short"})
    assert res.status_code == 400
    assert "at least 8" in res.json()["message"]


def test_login_wrong_password_is_401(client, users):
    user_a, _ = users
    res = client.post("/auth/login", json={"email": user_a.email, "password": "nope_nope_nope"})
    assert res.status_code == 401
    assert res.json()["error"] == "UNAUTHORIZED"


def test_login_inactive_user_is_401(client, users, db_session):
    user_a, _ = users
    user_a.is_active = False
    db_session.commit()

    res = client.post("/auth/login", json={"email": user_a.email, "password": "test_password_123"})
    assert res.status_code == 401


def test_protected_route_requires_bearer_token(app, users):
    with TestClient(app) as c:
        res = c.get("/interviews")
        assert res.status_code == 401
        assert res.json() == {"error": "UNAUTHORIZED", "message": "Missing Authorization header"}

        res2 = c.get("/interviews", headers={"Authorization": "Bearer not-a-jwt"})
        assert res2.status_code == 401
