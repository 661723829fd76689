"""Registration and sign-in endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from jobconnect.api.deps import CurrentUser, get_auth_service, service_errors
from jobconnect.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from jobconnect.schemas.user import UserResponse
from jobconnect.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    payload: RegisterRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Create an account as a job seeker or an employer."""
    with service_errors():
        return await service.register(payload)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    with service_errors():
        return await service.login(payload)


@router.get("/me", response_model=UserResponse)
async def me(user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(user)
