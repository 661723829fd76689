"""Job posting ORM model."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Boolean, Date, Index, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, validates

from jobconnect.models.base import BaseModel

JOB_STATUS_ACTIVE = "active"


class Job(BaseModel):
    """A posting created by an employer."""

    __tablename__ = "jobs"
    __table_args__ = (
        Index("ix_jobs_owner_id", "owner_id"),
        Index("ix_jobs_category", "category"),
    )

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    job_type: Mapped[str | None] = mapped_column("type", String(50), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    salary: Mapped[int | None] = mapped_column(Integer, nullable=True)
    skills: Mapped[str | None] = mapped_column(Text, nullable=True)
    experience: Mapped[str | None] = mapped_column(String(100), nullable=True)
    education: Mapped[str | None] = mapped_column(String(100), nullable=True)
    benefits: Mapped[str | None] = mapped_column(Text, nullable=True)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    remote: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=JOB_STATUS_ACTIVE
    )

    @validates("salary")
    def validate_salary(self, key: str, value: int | None) -> int | None:
        if value is not None and value < 0:
            raise ValueError("Salary cannot be negative.")
        return value


__all__ = ["JOB_STATUS_ACTIVE", "Job"]
