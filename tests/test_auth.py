"""Tests for registration, login and the current-user endpoints."""

from unittest.mock import MagicMock

import pytest
from httpx import AsyncClient

from app.core.security import create_user_token, decode_access_token


@pytest.mark.asyncio
async def test_register_returns_token(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/register",
        json={"email": "New.User@Example.com", "password": "s3cret-pass", "role": "doctor"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User registered successfully"
    assert data["user"]["email"] == "new.user@example.com"
    assert data["user"]["role"] == "doctor"
    assert data["user"]["isActive"] is True
    assert "passwordHash" not in data["user"]
    assert "password_hash" not in data["user"]

    payload = decode_access_token(data["token"])
    assert payload["sub"] == data["user"]["id"]
    assert payload["role"] == "doctor"


@pytest.mark.asyncio
async def test_register_defaults_to_patient_role(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/register",
        json={"email": "someone@example.com", "password": "long-enough"},
    )
    assert response.json()["user"]["role"] == "patient"


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user: dict) -> None:
    """Emails are unique regardless of case."""
    response = await client.post(
        "/api/auth/register",
        json={"email": "STAFF@example.com", "password": "another-pass"},
    )
    assert response.status_code == 409
    assert response.json()["message"] == "Email already exists"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"email": "not-an-email", "password": "long-enough"},
        {"email": "short@example.com", "password": "short"},
        {"email": "missing@example.com"},
        {"email": "bad-role@example.com", "password": "long-enough", "role": "superuser"},
    ],
)
async def test_register_invalid_body(client: AsyncClient, body: dict) -> None:
    response = await client.post("/api/auth/register", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


@pytest.mark.asyncio
async def test_login(client: AsyncClient, test_user: dict) -> None:
    response = await client.post(
        "/api/auth/login",
        json={"email": "staff@example.com", "password": "correct-horse"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Login successful"
    assert data["user"]["id"] == test_user["id"]
    assert data["tokenType"] == "bearer"

    me = await client.get(
        "/api/users/me",
        headers={"Authorization": f"Bearer {data['token']}"},
    )
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "staff@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("email", "password"),
    [("staff@example.com", "wrong-horse"), ("nobody@example.com", "correct-horse")],
)
async def test_login_bad_credentials(
    client: AsyncClient,
    test_user: dict,
    email: str,
    password: str,
) -> None:
    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_inactive_account(
    client: AsyncClient,
    test_user: dict,
    auth_headers: dict,
) -> None:
    response = await client.delete("/api/users/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["user"]["isActive"] is False

    response = await client.post(
        "/api/auth/login",
        json={"email": "staff@example.com", "password": "correct-horse"},
    )
    assert response.status_code == 400

    # The old token no longer grants access either
    response = await client.get("/api/users/me", headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_login_rate_limited(
    client: AsyncClient,
    test_user: dict,
    rate_limiter: MagicMock,
) -> None:
    rate_limiter.check_rate_limit.return_value = False

    response = await client.post(
        "/api/auth/login",
        json={"email": "staff@example.com", "password": "correct-horse"},
    )
    assert response.status_code == 429
    key, limit = rate_limiter.check_rate_limit.call_args.args
    assert key.startswith("login:")
    assert limit == 60


@pytest.mark.asyncio
async def test_update_own_email_and_password(
    client: AsyncClient,
    test_user: dict,
    auth_headers: dict,
) -> None:
    response = await client.patch(
        "/api/users/me",
        json={"email": "Desk@Example.com", "password": "brand-new-pass"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "desk@example.com"

    response = await client.post(
        "/api/auth/login",
        json={"email": "desk@example.com", "password": "brand-new-pass"},
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_update_own_email_to_taken_one(
    client: AsyncClient,
    test_user: dict,
    auth_headers: dict,
) -> None:
    await client.post(
        "/api/auth/register",
        json={"email": "taken@example.com", "password": "long-enough"},
    )

    response = await client.patch(
        "/api/users/me",
        json={"email": "taken@example.com"},
        headers=auth_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_own_account_empty_patch(client: AsyncClient, auth_headers: dict) -> None:
    response = await client.patch("/api/users/me", json={}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_token_for_unknown_user(client: AsyncClient) -> None:
    token = create_user_token({"id": "0b7c1f5e-1111-4d2a-9c3b-222222222222", "role": "patient"})
    response = await client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_garbage_token(client: AsyncClient) -> None:
    response = await client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"] == "HTTPException"
