"""Business logic service for user profiles."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any

from loguru import logger

from jobconnect.clients.identity import IdentityClient
from jobconnect.clients.storage import StorageClient
from jobconnect.core.config import settings
from jobconnect.core.exceptions import (
    BusinessLogicError,
    FormValidationError,
    NotFoundError,
    UploadError,
)
from jobconnect.models.user import USER_TYPES, User
from jobconnect.repositories.user import UserRepository
from jobconnect.schemas.user import AdminUserUpdate, UserProfileUpdate, UserResponse
from jobconnect.services.common import repository_errors

COMMON_PROFILE_FIELDS = ("first_name", "last_name", "phone")
ROLE_PROFILE_FIELDS: dict[str, tuple[str, ...]] = {
    "employer": ("company_name", "position"),
    "jobseeker": (
        "bio",
        "skills",
        "location",
        "qualifications",
        "experience",
        "cover_letter",
        "cv_url",
    ),
}


class UserService:
    """Profile reads and edits, CV uploads and user moderation."""

    def __init__(
        self,
        users: UserRepository,
        identity: IdentityClient | None = None,
        storage: StorageClient | None = None,
        max_upload_bytes: int = settings.MAX_UPLOAD_BYTES,
    ):
        self.users = users
        self.identity = identity
        self.storage = storage
        self.max_upload_bytes = max_upload_bytes

    def size_limit_error(self) -> UploadError:
        limit_mb = self.max_upload_bytes // (1024 * 1024)
        return UploadError(f"File size exceeds {limit_mb}MB limit")

    async def get_profile(self, uid: str) -> UserResponse:
        log = logger.bind(service=self.__class__.__name__, operation="get_profile", uid=uid)
        user = await self._get_user(uid, log)
        return UserResponse.model_validate(user)

    async def update_profile(
        self, user: User, payload: UserProfileUpdate, id_token: str
    ) -> UserResponse:
        """Apply a self-service profile edit.

        Credential changes go to the identity provider before the profile is
        written, so a rejected email or password leaves the profile untouched.

        Raises:
            FormValidationError: If the new password confirmation does not match.
            AuthenticationError: If the identity provider rejects the session.
            IdentityProviderError: If the identity provider rejects the change.
        """
        log = logger.bind(
            service=self.__class__.__name__, operation="update_profile", uid=user.uid
        )
        log.info("Updating profile")

        submitted = payload.model_dump(exclude_unset=True)
        new_password = submitted.pop("new_password", None)
        confirm_password = submitted.pop("confirm_password", None)
        new_email = submitted.pop("email", None)

        if new_password:
            if new_password != confirm_password:
                raise FormValidationError({"confirmPassword": "Passwords do not match"})
            if len(new_password) < 6:
                raise FormValidationError(
                    {"newPassword": "Password must be at least 6 characters"}
                )

        allowed = COMMON_PROFILE_FIELDS + ROLE_PROFILE_FIELDS.get(user.user_type, ())
        updates: dict[str, Any] = {
            key: value for key, value in submitted.items() if key in allowed
        }
        for name in ("first_name", "last_name"):
            if name in updates and not (updates[name] or "").strip():
                label = "First name" if name == "first_name" else "Last name"
                raise FormValidationError({_camel(name): f"{label} is required"})

        if new_email and new_email != user.email:
            identity = self._require_identity()
            account = await identity.update_email(id_token, new_email)
            updates["email"] = account.email
            log.info("Updated account email")

        if new_password:
            await self._require_identity().update_password(id_token, new_password)
            log.info("Updated account password")

        if not updates:
            return UserResponse.model_validate(user)

        with repository_errors(log, "Failed to update profile."):
            updated = await self.users.apply_update(user, updates)

        log.info("Updated profile")
        return UserResponse.model_validate(updated)

    async def upload_cv(
        self,
        user: User,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> UserResponse:
        """Store a CV file and link it from the profile.

        Raises:
            UploadError: If the file is empty, too large or cannot be stored.
        """
        log = logger.bind(
            service=self.__class__.__name__,
            operation="upload_cv",
            uid=user.uid,
            size=len(content),
        )
        log.info("Uploading CV")

        if len(content) > self.max_upload_bytes:
            raise self.size_limit_error()
        if not content:
            raise UploadError("Uploaded file is empty", status_code=400)

        safe_name = PurePosixPath(filename or "").name
        if not safe_name:
            raise UploadError("A file name is required", status_code=400)

        storage = self.storage
        if storage is None:
            raise UploadError("File storage is not configured", status_code=503)

        path = f"cvs/{user.uid}/{safe_name}"
        await storage.upload(path, content, content_type)
        cv_url = await storage.download_url(path)

        with repository_errors(log, "Failed to save CV link."):
            updated = await self.users.apply_update(user, {"cv_url": cv_url})

        log.info("Uploaded CV")
        return UserResponse.model_validate(updated)

    async def list_users(self) -> list[UserResponse]:
        log = logger.bind(service=self.__class__.__name__, operation="list_users")
        with repository_errors(log, "Failed to load users."):
            users = await self.users.list_all()
        return [UserResponse.model_validate(user) for user in users]

    async def admin_update(self, uid: str, payload: AdminUserUpdate) -> UserResponse:
        """Moderate a profile, including granting or revoking admin rights."""
        log = logger.bind(service=self.__class__.__name__, operation="admin_update", uid=uid)
        log.info("Moderating user")

        updates = payload.model_dump(exclude_unset=True)
        if "user_type" in updates and updates["user_type"] not in USER_TYPES:
            allowed = ", ".join(USER_TYPES)
            raise BusinessLogicError(
                f"Invalid user type '{updates['user_type']}'. Allowed values: {allowed}."
            )
        if updates.get("is_admin") is None:
            updates.pop("is_admin", None)

        user = await self._get_user(uid, log)
        if not updates:
            return UserResponse.model_validate(user)

        with repository_errors(log, "Failed to update user."):
            updated = await self.users.apply_update(user, updates)

        log.bind(role=updated.role).info("Moderated user")
        return UserResponse.model_validate(updated)

    async def delete_user(self, uid: str) -> bool:
        log = logger.bind(service=self.__class__.__name__, operation="delete_user", uid=uid)
        user = await self._get_user(uid, log)

        with repository_errors(log, "Failed to delete user."):
            await self.users.delete_entity(user)

        log.info("Deleted user profile")
        return True

    async def _get_user(self, uid: str, log: Any) -> User:
        with repository_errors(log, "Failed to load user."):
            user = await self.users.get_by_uid(uid)
        if user is None:
            log.warning("User not found")
            raise NotFoundError(f"User {uid} not found.")
        return user

    def _require_identity(self) -> IdentityClient:
        if self.identity is None:
            raise BusinessLogicError("Account changes are not available.")
        return self.identity


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)
