"""Job application ORM model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, validates

from jobconnect.models.base import BaseModel

APPLICATION_STATUSES: tuple[str, ...] = (
    "pending",
    "reviewing",
    "decision made",
    "offer sent",
    "declined",
    "accepted",
)
OFFER_RESPONSES: tuple[str, ...] = ("accepted", "declined")


class Application(BaseModel):
    """A job seeker's application to one posting."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "user_id", name="uq_applications_job_id_user_id"),
        CheckConstraint(
            "status IN ('pending', 'reviewing', 'decision made', "
            "'offer sent', 'declined', 'accepted')",
            name="status_valid",
        ),
        Index("ix_applications_user_id", "user_id"),
        Index("ix_applications_employer_id", "employer_id"),
    )

    job_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    job_title: Mapped[str] = mapped_column(String(500), nullable=False)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    employer_id: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    applied_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    applicant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    applicant_email: Mapped[str] = mapped_column(String(255), nullable=False)
    applicant_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    salary: Mapped[int | None] = mapped_column(Integer, nullable=True)
    response_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_by: Mapped[str | None] = mapped_column(String(128), nullable=True)

    @validates("status")
    def validate_status(self, key: str, value: str) -> str:
        if value not in APPLICATION_STATUSES:
            allowed = ", ".join(APPLICATION_STATUSES)
            raise ValueError(
                f"Invalid application status '{value}'. Allowed values: {allowed}."
            )
        return value


__all__ = ["APPLICATION_STATUSES", "Application", "OFFER_RESPONSES"]
