"""Shared FastAPI dependency helpers for API routes."""

from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from jobconnect.clients.identity import IdentityClient
from jobconnect.clients.storage import StorageClient
from jobconnect.core.errors import ErrorHub
from jobconnect.core.exceptions import (
    AuthenticationError,
    BusinessLogicError,
    FormValidationError,
    NotFoundError,
    PermissionDeniedError,
)
from jobconnect.core.health import HealthService
from jobconnect.core.notifications import NotificationCenter
from jobconnect.db.session import get_session
from jobconnect.models.user import User
from jobconnect.repositories.application import ApplicationRepository
from jobconnect.repositories.job import JobRepository
from jobconnect.repositories.user import UserRepository
from jobconnect.services.application_service import ApplicationService
from jobconnect.services.auth_service import AuthService
from jobconnect.services.job_service import JobService
from jobconnect.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session dependency.

    Returns:
        Async generator yielding one database session.
    """
    async for session in get_session():
        yield session


def get_request_id(request: Request) -> str:
    """Get request id from request context.

    Args:
        request: Incoming FastAPI request object.

    Returns:
        Request id string when available, otherwise ``"unknown"``.
    """
    request_id = getattr(request.state, "request_id", None)
    if isinstance(request_id, str) and request_id:
        return request_id
    return "unknown"


def get_error_hub(request: Request) -> ErrorHub:
    return request.app.state.error_hub


def get_notification_center(request: Request) -> NotificationCenter:
    return request.app.state.notifications


def get_identity_client(request: Request) -> IdentityClient:
    return request.app.state.identity_client


def get_storage_client(request: Request) -> StorageClient:
    return request.app.state.storage_client


def get_health_service(request: Request) -> HealthService:
    return request.app.state.health_service


DBSessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_job_service(db: DBSessionDep) -> JobService:
    return JobService(JobRepository(db))


def get_application_service(db: DBSessionDep) -> ApplicationService:
    return ApplicationService(
        applications=ApplicationRepository(db),
        jobs=JobRepository(db),
        users=UserRepository(db),
    )


def get_user_service(
    db: DBSessionDep,
    identity: Annotated[IdentityClient, Depends(get_identity_client)],
    storage: Annotated[StorageClient, Depends(get_storage_client)],
) -> UserService:
    return UserService(UserRepository(db), identity=identity, storage=storage)


def get_auth_service(
    db: DBSessionDep,
    identity: Annotated[IdentityClient, Depends(get_identity_client)],
) -> AuthService:
    return AuthService(identity, UserRepository(db))


async def get_bearer_token(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> str | None:
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


async def get_optional_user(
    token: Annotated[str | None, Depends(get_bearer_token)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> User | None:
    """Resolve the signed-in user, or ``None`` for anonymous requests.

    Raises:
        AuthenticationError: If a token is present but not valid.
    """
    if token is None:
        return None
    return await auth_service.authenticate(token)


def require_role(
    required_role: str | None = None,
) -> Callable[..., Awaitable[User]]:
    """Build a route guard for signed-in users.

    Admins pass every guard. Without ``required_role`` any signed-in user passes.

    Args:
        required_role: Effective role the caller must have.

    Returns:
        Dependency callable yielding the signed-in ``User``.
    """

    async def guard(
        user: Annotated[User | None, Depends(get_optional_user)],
    ) -> User:
        if user is None:
            raise AuthenticationError("Authentication required.")
        if user.role == "admin" or required_role is None:
            return user
        if user.role != required_role:
            raise PermissionDeniedError(
                f"This action requires the {required_role} role."
            )
        return user

    return guard


get_current_user = require_role()

CurrentUser = Annotated[User, Depends(get_current_user)]
EmployerUser = Annotated[User, Depends(require_role("employer"))]
JobSeekerUser = Annotated[User, Depends(require_role("jobseeker"))]
AdminUser = Annotated[User, Depends(require_role("admin"))]


@contextmanager
def service_errors() -> Iterator[None]:
    """Map service failures that carry no status of their own.

    Raises:
        HTTPException: 404 for missing records, 400 for broken business rules.
    """
    try:
        yield
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except FormValidationError:
        raise
    except BusinessLogicError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc


__all__ = [
    "AdminUser",
    "CurrentUser",
    "DBSessionDep",
    "EmployerUser",
    "JobSeekerUser",
    "get_application_service",
    "get_auth_service",
    "get_bearer_token",
    "get_current_user",
    "get_db_session",
    "get_error_hub",
    "get_health_service",
    "get_identity_client",
    "get_job_service",
    "get_notification_center",
    "get_optional_user",
    "get_request_id",
    "get_storage_client",
    "get_user_service",
    "require_role",
    "service_errors",
]
