"""Liveness and dependency health endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response, status
from loguru import logger

from jobconnect.api.deps import get_health_service
from jobconnect.core.health import HealthService

router = APIRouter()


@router.get("")
async def health_check(
    response: Response,
    health_service: Annotated[HealthService, Depends(get_health_service)],
) -> dict[str, Any]:
    """Report database and identity provider health.

    Responds with 503 when any dependency is unhealthy.
    """
    try:
        payload = await health_service.get_health_payload()
    except Exception as exc:
        logger.bind(error=str(exc)).error("Health endpoint failed")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "unhealthy",
            "services": {},
            "timestamp": "",
            "error": "health check execution failed",
        }

    if payload["status"] == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return payload


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Process liveness only; no dependency is contacted."""
    return {"status": "alive"}
