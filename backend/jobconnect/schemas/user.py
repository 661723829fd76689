"""Pydantic schemas for user profiles."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field

from jobconnect.schemas.base import WireModel


class UserResponse(WireModel):
    """Profile returned to clients."""

    uid: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    user_type: str
    is_admin: bool = False
    role: str
    company_name: str | None = None
    position: str | None = None
    bio: str | None = None
    skills: str | None = None
    location: str | None = None
    qualifications: str | None = None
    experience: str | None = None
    cover_letter: str | None = None
    cv_url: str | None = None
    created_at: datetime
    updated_at: datetime


class UserProfileUpdate(WireModel):
    """Self-service profile edit.

    Only the fields belonging to the caller's role are applied.
    """

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=255)
    new_password: str | None = None
    confirm_password: str | None = None

    company_name: str | None = Field(default=None, max_length=255)
    position: str | None = Field(default=None, max_length=255)

    bio: str | None = None
    skills: str | None = None
    location: str | None = Field(default=None, max_length=255)
    qualifications: str | None = None
    experience: str | None = None
    cover_letter: str | None = None
    cv_url: str | None = None

    model_config = ConfigDict(extra="forbid")


class AdminUserUpdate(WireModel):
    """Moderation edit; the only way to grant or revoke admin rights."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    user_type: str | None = None
    is_admin: bool | None = None

    model_config = ConfigDict(extra="forbid")


__all__ = ["AdminUserUpdate", "UserProfileUpdate", "UserResponse"]
