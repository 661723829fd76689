"""User profile ORM model."""

from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, validates

from jobconnect.models.base import BaseModel

USER_TYPES: tuple[str, ...] = ("jobseeker", "employer", "admin")
SELF_SERVICE_USER_TYPES: tuple[str, ...] = ("jobseeker", "employer")


class User(BaseModel):
    """Profile stored alongside an identity-provider account.

    ``uid`` is the identity provider's account id and is what every owner
    reference in other tables points at.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "user_type IN ('jobseeker', 'employer', 'admin')",
            name="user_type_valid",
        ),
    )

    uid: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    user_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="jobseeker"
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    # Employer profile
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    position: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Job seeker profile
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    skills: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    qualifications: Mapped[str | None] = mapped_column(Text, nullable=True)
    experience: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_letter: Mapped[str | None] = mapped_column(Text, nullable=True)
    cv_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def role(self) -> str:
        """Effective role used by route guards."""
        if self.is_admin or self.user_type == "admin":
            return "admin"
        return self.user_type

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @validates("user_type")
    def validate_user_type(self, key: str, value: str) -> str:
        if value not in USER_TYPES:
            allowed = ", ".join(USER_TYPES)
            raise ValueError(f"Invalid user type '{value}'. Allowed values: {allowed}.")
        return value


__all__ = ["SELF_SERVICE_USER_TYPES", "USER_TYPES", "User"]
