"""Integration tests for error responses, hub reporting and forced navigation."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from jobconnect.api.errors import install_error_hub
from jobconnect.core.errors import ErrorKind
from tests.factories import UserFactory

AuthHeaders = Callable[[str], dict[str, str]]


@pytest.mark.asyncio
async def test_missing_token_redirects_to_login_and_remembers_path(
    app: FastAPI, client: AsyncClient
) -> None:
    response = await client.get(
        "/api/v1/auth/me", headers={"X-Client-Path": "/my-applications"}
    )

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.headers["X-Redirect-To"] == "/login"
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("redirect_path=")
    assert "/my-applications" in set_cookie
    assert response.json()["kind"] == "auth"
    assert app.state.error_hub.history[0].context["path"] == "/my-applications"


@pytest.mark.asyncio
async def test_rejected_token_is_reported_once_as_auth_failure(
    app: FastAPI, client: AsyncClient
) -> None:
    response = await client.get(
        "/api/v1/auth/me", headers={"Authorization": "Bearer expired"}
    )

    assert response.status_code == 401
    history = app.state.error_hub.history
    assert [record.kind for record in history] == [ErrorKind.AUTH]
    assert history[0].context["endpoint"] == "GET /api/v1/auth/me"


@pytest.mark.asyncio
async def test_permission_denied_redirects_without_return_path(
    client: AsyncClient, user_factory: UserFactory, bearer: AuthHeaders
) -> None:
    await user_factory.create(uid="seeker-1")

    response = await client.get("/api/v1/users", headers=bearer("seeker-1"))

    assert response.status_code == 403
    assert response.headers["X-Redirect-To"] == "/unauthorized"
    assert "set-cookie" not in response.headers
    assert response.json()["kind"] == "permission"


@pytest.mark.asyncio
async def test_request_validation_error(app: FastAPI, client: AsyncClient) -> None:
    response = await client.get("/api/v1/jobs/not-a-number")

    assert response.status_code == 422
    body = response.json()
    assert body["kind"] == "validation"
    assert body["errors"][0]["loc"] == ["path", "job_id"]
    assert app.state.error_hub.history[0].kind is ErrorKind.VALIDATION
    assert "X-Redirect-To" not in response.headers


@pytest.mark.asyncio
async def test_unexpected_exception_returns_reload_hint(
    app: FastAPI, client: AsyncClient
) -> None:
    async def explode() -> None:
        raise RuntimeError("kaboom")

    app.add_api_route("/api/v1/explode", explode)

    response = await client.get("/api/v1/explode")

    assert response.status_code == 500
    body = response.json()
    assert body["detail"] == "Something went wrong"
    assert body["hint"] == "Please reload the page and try again."
    assert body["kind"] == "system"
    record = app.state.error_hub.history[0]
    assert record.kind is ErrorKind.SYSTEM
    assert record.context["detail"] == "RuntimeError: kaboom"


@pytest.mark.asyncio
async def test_notifications_show_once_and_admin_dismisses(
    client: AsyncClient, user_factory: UserFactory, bearer: AuthHeaders
) -> None:
    await user_factory.create(uid="admin-1", is_admin=True)
    await user_factory.create(uid="seeker-1")
    await client.get("/api/v1/jobs/404")
    await client.get("/api/v1/jobs/405")

    listed = await client.get("/api/v1/notifications", headers=bearer("seeker-1"))

    notifications = listed.json()
    assert [item["message"] for item in notifications] == [
        "The requested resource was not found."
    ]
    assert notifications[0]["kind"] == "api"

    url = f"/api/v1/notifications/{notifications[0]['id']}"
    denied = await client.delete(url, headers=bearer("seeker-1"))
    dismissed = await client.delete(url, headers=bearer("admin-1"))

    assert denied.status_code == 403
    assert dismissed.status_code == 204
    remaining = await client.get("/api/v1/notifications", headers=bearer("admin-1"))
    assert "The requested resource was not found." not in [
        item["message"] for item in remaining.json()
    ]


@pytest.mark.asyncio
async def test_notifications_require_sign_in(app: FastAPI, client: AsyncClient) -> None:
    await client.get("/api/v1/jobs/404")
    notification_id = app.state.notifications.active()[0].id

    listed = await client.get("/api/v1/notifications")
    dismissed = await client.delete(f"/api/v1/notifications/{notification_id}")

    assert listed.status_code == 401
    assert dismissed.status_code == 401
    assert notification_id in [item.id for item in app.state.notifications.active()]


@pytest.mark.asyncio
async def test_error_history_is_admin_only(
    client: AsyncClient, user_factory: UserFactory, bearer: AuthHeaders
) -> None:
    await user_factory.create(uid="admin-1", is_admin=True)
    await user_factory.create(uid="seeker-1")
    await client.get("/api/v1/jobs/404")

    url = "/api/v1/notifications/history"
    denied = await client.get(url, headers=bearer("seeker-1"))
    history = await client.get(url, headers=bearer("admin-1"))

    assert denied.status_code == 403
    assert history.status_code == 200
    kinds = [item["kind"] for item in history.json()]
    assert kinds == ["permission", "api"]


@pytest.mark.asyncio
async def test_install_error_hub_is_idempotent(app: FastAPI) -> None:
    hub = app.state.error_hub

    assert install_error_hub(app) is hub
