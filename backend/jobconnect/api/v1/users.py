"""Profile and user moderation endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status

from jobconnect.api.deps import (
    AdminUser,
    CurrentUser,
    get_bearer_token,
    get_user_service,
    service_errors,
)
from jobconnect.schemas.user import AdminUserUpdate, UserProfileUpdate, UserResponse
from jobconnect.services.user_service import UserService

router = APIRouter()

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.get("/me", response_model=UserResponse)
async def my_profile(user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(user)


@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    payload: UserProfileUpdate,
    user: CurrentUser,
    token: Annotated[str | None, Depends(get_bearer_token)],
    service: UserServiceDep,
) -> UserResponse:
    """Edit the caller's profile; email and password changes need the session token."""
    with service_errors():
        return await service.update_profile(user, payload, id_token=token or "")


async def read_upload(request: Request, service: UserService) -> bytes:
    """Read the request body, stopping once it passes the upload limit.

    A declared ``Content-Length`` over the limit is rejected before reading.

    Raises:
        UploadError: If the body is larger than ``service.max_upload_bytes``.
    """
    limit = service.max_upload_bytes
    declared_size = request.headers.get("content-length", "")
    if declared_size.isdecimal() and int(declared_size) > limit:
        raise service.size_limit_error()

    buffer = bytearray()
    async for chunk in request.stream():
        buffer.extend(chunk)
        if len(buffer) > limit:
            raise service.size_limit_error()
    return bytes(buffer)


@router.post("/me/cv", response_model=UserResponse)
async def upload_my_cv(
    request: Request,
    user: CurrentUser,
    service: UserServiceDep,
    filename: Annotated[str, Query(min_length=1, max_length=255)],
) -> UserResponse:
    """Upload a CV sent as the raw request body."""
    content = await read_upload(request, service)
    content_type = request.headers.get("content-type", "application/octet-stream")
    with service_errors():
        return await service.upload_cv(user, filename, content, content_type)


@router.get("", response_model=list[UserResponse])
async def list_users(user: AdminUser, service: UserServiceDep) -> list[UserResponse]:
    with service_errors():
        return await service.list_users()


@router.patch("/{uid}", response_model=UserResponse)
async def moderate_user(
    uid: str,
    payload: AdminUserUpdate,
    user: AdminUser,
    service: UserServiceDep,
) -> UserResponse:
    """Edit another user's profile, including admin rights."""
    with service_errors():
        return await service.admin_update(uid, payload)


@router.delete("/{uid}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(uid: str, user: AdminUser, service: UserServiceDep) -> Response:
    with service_errors():
        await service.delete_user(uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
