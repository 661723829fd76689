"""Pydantic schemas for registration and sign-in."""

from __future__ import annotations

from jobconnect.schemas.base import WireModel
from jobconnect.schemas.user import UserResponse


class RegisterRequest(WireModel):
    """Registration form; completeness is checked by the auth service."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""
    phone: str | None = None
    user_type: str = "jobseeker"


class LoginRequest(WireModel):
    email: str
    password: str


class AuthResponse(WireModel):
    id_token: str
    refresh_token: str
    expires_in: int
    user: UserResponse


__all__ = ["AuthResponse", "LoginRequest", "RegisterRequest"]
