"""Integration tests for health endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_liveness(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


@pytest.mark.asyncio
async def test_health_reports_each_dependency(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert set(body["services"]) == {"database", "identity"}
    assert body["services"]["identity"]["status"] == "healthy"


@pytest.mark.asyncio
async def test_api_root(client: AsyncClient) -> None:
    response = await client.get("/api/v1/")

    assert response.json() == {"status": "ok", "message": "JobConnect API"}
