"""Infrastructure health checks for core dependencies."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from time import perf_counter
from typing import Any, Literal

import httpx
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from jobconnect.core.config import settings

ServiceStatus = Literal["healthy", "unhealthy"]


class HealthService:
    """Run health checks for the database and the identity provider."""

    def __init__(
        self,
        engine: AsyncEngine | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 2.0,
    ) -> None:
        """Initialize health service dependencies.

        Args:
            engine: Engine to ping. Defaults to the application engine.
            http_client: Unmonitored client used to reach the identity provider.
            timeout_seconds: Max time to wait for each dependency check.
        """
        if engine is None:
            from jobconnect.db.session import engine as default_engine

            engine = default_engine

        self.engine = engine
        self.http_client = http_client
        self.timeout_seconds = timeout_seconds

    async def get_health_payload(self) -> dict[str, Any]:
        """Build aggregated health status for API responses.

        Returns:
            Dictionary containing overall status, timestamp, and per-service details.
        """
        database_status, identity_status = await asyncio.gather(
            self._timed_check("database", self._ping_database),
            self._timed_check("identity", self._ping_identity_provider),
        )
        overall_status: ServiceStatus = (
            "healthy"
            if database_status["status"] == "healthy"
            and identity_status["status"] == "healthy"
            else "unhealthy"
        )

        return {
            "status": overall_status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.VERSION,
            "services": {
                "database": database_status,
                "identity": identity_status,
            },
        }

    async def is_reachable(self) -> bool:
        """Connectivity probe used by the background monitor."""
        payload = await self.get_health_payload()
        return payload["status"] == "healthy"

    async def _timed_check(
        self,
        name: str,
        check: Callable[[], Awaitable[None]],
    ) -> dict[str, Any]:
        started_at = perf_counter()

        try:
            await asyncio.wait_for(check(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            response_time_ms = round((perf_counter() - started_at) * 1000, 2)
            logger.error(
                "Health check timed out",
                dependency=name,
                timeout_seconds=self.timeout_seconds,
                response_time_ms=response_time_ms,
            )
            return {
                "status": "unhealthy",
                "response_time_ms": response_time_ms,
                "error": f"timeout after {self.timeout_seconds}s",
            }
        except (SQLAlchemyError, httpx.HTTPError, OSError) as exc:
            response_time_ms = round((perf_counter() - started_at) * 1000, 2)
            logger.error(
                "Health check failed",
                dependency=name,
                response_time_ms=response_time_ms,
                error=str(exc),
            )
            return {
                "status": "unhealthy",
                "response_time_ms": response_time_ms,
                "error": str(exc),
            }

        return {
            "status": "healthy",
            "response_time_ms": round((perf_counter() - started_at) * 1000, 2),
        }

    async def _ping_database(self) -> None:
        async with self.engine.connect() as connection:
            await connection.execute(text("SELECT 1"))

    async def _ping_identity_provider(self) -> None:
        """Any HTTP response counts as reachable; only transport failures do not."""
        if self.http_client is not None:
            await self.http_client.get(settings.IDENTITY_BASE_URL)
            return

        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            await client.get(settings.IDENTITY_BASE_URL)


__all__ = ["HealthService", "ServiceStatus"]
