"""Fixtures wiring a fresh application to the test database and fake providers."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from jobconnect.api.deps import get_db_session, get_health_service
from jobconnect.api.errors import close_error_hub
from jobconnect.clients.identity import build_identity_client
from jobconnect.clients.storage import StorageClient
from jobconnect.clients.transport import build_http_client
from jobconnect.core.health import HealthService
from jobconnect.main import create_app

TOKEN_PREFIX = "token-"
WRONG_PASSWORD = "wrong-password"


def identity_provider(request: httpx.Request) -> httpx.Response:
    """Fake identity REST API where ``token-<uid>`` identifies account ``uid``."""
    body = json.loads(request.content or b"{}")
    if request.url.path.endswith("accounts:lookup"):
        token = body.get("idToken", "")
        if not token.startswith(TOKEN_PREFIX):
            return httpx.Response(400, json={"error": {"message": "INVALID_ID_TOKEN"}})
        uid = token[len(TOKEN_PREFIX) :]
        return httpx.Response(
            200, json={"users": [{"localId": uid, "email": f"{uid}@example.com"}]}
        )

    if body.get("password") == WRONG_PASSWORD:
        return httpx.Response(
            400, json={"error": {"message": "INVALID_LOGIN_CREDENTIALS"}}
        )

    uid = body.get("email", "").split("@")[0]
    return httpx.Response(
        200,
        json={
            "localId": uid,
            "email": body.get("email", ""),
            "idToken": f"{TOKEN_PREFIX}{uid}",
            "refreshToken": "refresh",
            "expiresIn": "3600",
        },
    )


def object_store(request: httpx.Request) -> httpx.Response:
    if request.method == "POST":
        return httpx.Response(200, json={"name": request.url.params["name"]})
    return httpx.Response(200, json={"downloadTokens": "tok-1"})


def healthy_identity(request: httpx.Request) -> httpx.Response:
    return httpx.Response(404)


@pytest_asyncio.fixture
async def app(
    db_session: AsyncSession, test_engine: AsyncEngine
) -> AsyncGenerator[FastAPI, None]:
    """Application with debouncing off so every request reaches the hub."""
    application = create_app()
    hub = application.state.error_hub
    hub.debounce_seconds = 0

    for name in ("identity_client", "storage_client"):
        await getattr(application.state, name).aclose()
    application.state.identity_client = build_identity_client(
        "https://identity.test/v1",
        hub,
        "test-key",
        transport=httpx.MockTransport(identity_provider),
    )
    application.state.storage_client = StorageClient(
        build_http_client(
            "https://storage.test/v0",
            hub,
            transport=httpx.MockTransport(object_store),
        ),
        bucket="files",
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    def override_health_service() -> HealthService:
        return HealthService(
            engine=test_engine,
            http_client=httpx.AsyncClient(
                transport=httpx.MockTransport(healthy_identity)
            ),
        )

    application.dependency_overrides[get_db_session] = override_get_db
    application.dependency_overrides[get_health_service] = override_health_service

    yield application

    application.dependency_overrides.clear()
    await close_error_hub(application)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as api_client:
        yield api_client


@pytest.fixture
def bearer() -> Callable[[str], dict[str, str]]:
    """Build the Authorization header the fake provider accepts for a uid."""

    def build(uid: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {TOKEN_PREFIX}{uid}"}

    return build
