"""API router aggregation for all versioned endpoints."""

from fastapi import APIRouter

from jobconnect.api.v1 import (
    applications_router,
    auth_router,
    health_router,
    jobs_router,
    notifications_router,
    users_router,
)

v1_router = APIRouter()
v1_router.include_router(health_router, prefix="/health", tags=["health"])
v1_router.include_router(auth_router, prefix="/auth", tags=["auth"])
v1_router.include_router(jobs_router, prefix="/jobs", tags=["jobs"])
v1_router.include_router(
    applications_router, prefix="/applications", tags=["applications"]
)
v1_router.include_router(users_router, prefix="/users", tags=["users"])
v1_router.include_router(
    notifications_router, prefix="/notifications", tags=["notifications"]
)

api_router = APIRouter()


@api_router.get("/", tags=["root"])
async def api_root() -> dict[str, str]:
    """Return API root metadata for the mounted version."""
    return {"status": "ok", "message": "JobConnect API"}


api_router.include_router(v1_router)

__all__ = ["api_router", "v1_router"]
