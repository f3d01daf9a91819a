"""
/auth endpoints over HTTP.
"""

import pytest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, bearer, login, register
from core.security import TokenService


def test_register_returns_token_and_public_user(client):
    response = client.post(
        "/auth/register",
        json={"name": "Ana", "email": "ana@x.com", "password": "secret1"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["email"] == "ana@x.com"
    assert body["user"]["name"] == "Ana"
    assert body["user"]["role"] == "user"
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]


def test_register_duplicate_email(client):
    register(client, "Ana", "ana@x.com")

    response = client.post(
        "/auth/register",
        json={"name": "Other", "email": "ana@x.com", "password": "secret2"},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "User already exists"}


def test_register_validation_errors(client):
    response = client.post(
        "/auth/register",
        json={"name": "Ana", "email": "not-an-email", "password": "123"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert {e["field"] for e in body["errors"]} == {"email", "password"}


def test_register_cannot_choose_role(client):
    response = client.post(
        "/auth/register",
        json={"name": "Eve", "email": "eve@x.com", "password": "secret1", "role": "admin"},
    )

    assert response.status_code == 201
    assert response.json()["user"]["role"] == "user"


def test_login(client):
    _, user = register(client, "Ana", "ana@x.com")

    response = client.post("/auth/login", json={"email": "ana@x.com", "password": "secret1"})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == user["id"]
    assert body["token"]


def test_login_failures_are_indistinguishable(client):
    register(client, "Ana", "ana@x.com")

    unknown = client.post("/auth/login", json={"email": "bob@x.com", "password": "secret1"})
    wrong = client.post("/auth/login", json={"email": "ana@x.com", "password": "wrong-one"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"success": False, "message": "Invalid credentials"}


def test_login_with_malformed_body(client):
    response = client.post("/auth/login", json={"email": "ana"})
    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_seeded_admin_can_log_in(client):
    response = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"


def test_me(client):
    token, user = register(client, "Ana", "ana@x.com")

    response = client.get("/auth/me", headers=bearer(token))

    assert response.status_code == 200
    assert response.json()["user"] == user


def test_me_without_token(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "No token, authorization denied"}


def test_me_with_wrong_scheme(client):
    token, _ = register(client, "Ana", "ana@x.com")

    response = client.get("/auth/me", headers={"Authorization": f"Token {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "No token, authorization denied"


def test_me_with_forged_token(client):
    response = client.get("/auth/me", headers=bearer("not.a.token"))

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid token"}


def test_expired_token_is_reported_as_invalid(app, client, settings, clock):
    app.state.container.tokens = TokenService(
        secret=settings.secret_key,
        lifetime=settings.token_lifetime,
        clock=clock,
    )
    token = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    assert client.get("/auth/me", headers=bearer(token)).status_code == 200

    clock.advance(hours=1, seconds=1)
    response = client.get("/auth/me", headers=bearer(token))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_token_for_deleted_user(app, client):
    token, user = register(client, "Ana", "ana@x.com")
    app.state.container.credentials._users.delete(user["id"])

    response = client.get("/auth/me", headers=bearer(token))

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


@pytest.mark.parametrize("header", ["Basic dXNlcjpwdw==", "Token abc", "Bearer", "abc"])
def test_unparseable_header_is_a_missing_token(client, header):
    response = client.get("/auth/me", headers={"Authorization": header})

    assert response.status_code == 401
    assert response.json()["message"] == "No token, authorization denied"


@pytest.mark.parametrize("scheme", ["bearer", "BEARER", "Bearer"])
def test_scheme_is_case_insensitive(client, scheme):
    token, _ = register(client, "Ana", "ana@x.com")

    response = client.get("/auth/me", headers={"Authorization": f"{scheme} {token}"})

    assert response.status_code == 200


def test_openapi_declares_bearer_scheme(app):
    schema = app.openapi()

    schemes = schema["components"]["securitySchemes"]
    assert any(s["type"] == "oauth2" for s in schemes.values())
    assert schema["paths"]["/auth/me"]["get"]["security"]
    assert "security" not in schema["paths"]["/auth/login"]["post"]
