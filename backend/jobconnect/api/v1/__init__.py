"""Version 1 endpoint routers."""

from jobconnect.api.v1.applications import router as applications_router
from jobconnect.api.v1.auth import router as auth_router
from jobconnect.api.v1.health import router as health_router
from jobconnect.api.v1.jobs import router as jobs_router
from jobconnect.api.v1.notifications import router as notifications_router
from jobconnect.api.v1.users import router as users_router

__all__ = [
    "applications_router",
    "auth_router",
    "health_router",
    "jobs_router",
    "notifications_router",
    "users_router",
]
