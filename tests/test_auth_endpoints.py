"""Tests for auth endpoints."""

import httpx
from fastapi.testclient import TestClient

from weight_tracker.api.app import create_app
from weight_tracker.domain.auth import AuthApiError


def test_signup_endpoint(container, auth_client) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/signup",
        json={
            "email": "new@example.com",
            "password": "secret123",
            "username": "newbie",
            "include_demo_data": False,
        },
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["access_token"] is None
    assert "new@example.com" in auth_client.accounts


def test_signup_validation_failure(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/signup",
        json={"email": "new@example.com", "password": "123", "username": "newbie"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Password must be at least 6 characters"


def test_login_endpoint(container, auth_client) -> None:
    user = auth_client.add_user("ana@example.com", "secret123")
    client = TestClient(create_app(container))

    ok = client.post(
        "/auth/login", json={"email": "ana@example.com", "password": "secret123"}
    )
    bad = client.post(
        "/auth/login", json={"email": "ana@example.com", "password": "wrong-one"}
    )

    assert ok.status_code == 200
    assert ok.json()["user_id"] == str(user.id)
    assert ok.json()["access_token"] in auth_client.tokens
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid email or password"


def test_login_then_use_token(container, auth_client) -> None:
    auth_client.add_user("ana@example.com", "secret123")
    client = TestClient(create_app(container))
    token = client.post(
        "/auth/login", json={"email": "ana@example.com", "password": "secret123"}
    ).json()["access_token"]

    response = client.get("/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["username"] == "ana"


def test_logout_endpoint(container, signed_in, auth_client) -> None:
    _, headers = signed_in
    client = TestClient(create_app(container))

    response = client.post("/auth/logout", headers=headers)
    after = client.get("/weights", headers=headers)

    assert response.json() == {"status": "ok"}
    assert len(auth_client.signed_out) == 1
    assert after.status_code == 401


def test_password_update_endpoint(container, signed_in, auth_client) -> None:
    _, headers = signed_in
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/password",
        json={"current_password": "secret123", "new_password": "evenbetter"},
        headers=headers,
    )

    assert response.status_code == 200
    assert auth_client.password_updates == [("ana@example.com", "evenbetter")]


def test_password_reset_endpoint(container, auth_client) -> None:
    client = TestClient(create_app(container))

    response = client.post("/auth/password-reset", json={"email": "ana@example.com"})

    assert response.json()["message"] == "Password reset email sent successfully"
    assert auth_client.resets == ["ana@example.com"]


def test_provider_outage_returns_bad_gateway(container, auth_client) -> None:
    auth_client.fail_with = httpx.ConnectError("boom")  # type: ignore[assignment]
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/login", json={"email": "ana@example.com", "password": "secret123"}
    )

    assert response.status_code == 502
    assert response.json()["detail"].startswith("Authentication service is unavailable")
    assert "debug" not in response.json()["detail"]


def test_provider_rejection_maps_message(container, auth_client) -> None:
    auth_client.fail_with = AuthApiError("email_not_confirmed", "Email not confirmed")
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/login", json={"email": "ana@example.com", "password": "secret123"}
    )

    assert response.status_code == 401
    assert response.json()["detail"].startswith("Please verify your email")
