"""Integration tests for registration and sign-in endpoints."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from httpx import AsyncClient

from tests.factories import UserFactory


def registration(**overrides: str) -> dict[str, str]:
    payload = {
        "firstName": "Lin",
        "lastName": "Chen",
        "email": "lin@example.com",
        "password": "secret1",
        "confirmPassword": "secret1",
        "userType": "jobseeker",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_register_then_fetch_current_user(client: AsyncClient) -> None:
    registered = await client.post("/api/v1/auth/register", json=registration())

    assert registered.status_code == 201
    body = registered.json()
    assert body["idToken"] == "token-lin"
    assert body["user"]["uid"] == "lin"
    assert body["user"]["role"] == "jobseeker"

    me = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {body['idToken']}"}
    )
    assert me.status_code == 200
    assert me.json()["firstName"] == "Lin"


@pytest.mark.asyncio
async def test_register_reports_form_errors(app, client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/register",
        json=registration(confirmPassword="different", userType="admin"),
    )

    assert response.status_code == 422
    assert response.json()["errors"] == {
        "confirmPassword": "Passwords do not match",
        "userType": "Account type must be jobseeker or employer",
    }
    record = app.state.error_hub.history[0]
    assert record.kind.value == "form"
    assert record.message == "Please fill in all required fields correctly"


@pytest.mark.asyncio
async def test_login_returns_tokens_and_profile(
    client: AsyncClient, user_factory: UserFactory
) -> None:
    await user_factory.create(uid="ada", user_type="employer")

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "ada@example.com", "password": "secret1"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["refreshToken"] == "refresh"
    assert body["expiresIn"] == 3600
    assert body["user"]["role"] == "employer"


@pytest.mark.asyncio
async def test_login_without_profile_is_unauthorized(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "ghost@example.com", "password": "secret1"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "User profile not found."


@pytest.mark.asyncio
async def test_admin_flag_grants_admin_role(
    client: AsyncClient,
    user_factory: UserFactory,
    bearer: Callable[[str], dict[str, str]],
) -> None:
    await user_factory.create(uid="boss", user_type="employer", is_admin=True)

    response = await client.get("/api/v1/auth/me", headers=bearer("boss"))

    assert response.json()["role"] == "admin"
    assert response.json()["isAdmin"] is True
