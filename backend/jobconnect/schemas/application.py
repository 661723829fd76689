"""Pydantic schemas for job applications."""

from __future__ import annotations

from datetime import datetime

from jobconnect.schemas.base import WireModel
from jobconnect.schemas.job import JobResponse
from jobconnect.schemas.user import UserResponse


class ApplicationResponse(WireModel):
    id: int
    job_id: int
    job_title: str
    user_id: str
    employer_id: str
    status: str
    applied_on: datetime
    applicant_name: str
    applicant_email: str
    applicant_phone: str | None
    company: str | None
    salary: int | None
    response_date: datetime | None
    updated_by: str | None


class ApplicationDetails(WireModel):
    """Application with its posting and applicant profile.

    Either side may be missing if it was deleted after the application.
    """

    application: ApplicationResponse
    job: JobResponse | None = None
    applicant: UserResponse | None = None


class ApplicationStatusUpdate(WireModel):
    status: str


class OfferResponseRequest(WireModel):
    response: str


__all__ = [
    "ApplicationDetails",
    "ApplicationResponse",
    "ApplicationStatusUpdate",
    "OfferResponseRequest",
]
