"""Pydantic schemas for job postings and job search."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict, Field

from jobconnect.schemas.base import WireModel

WILDCARD = "all"
ExperienceFilter = Literal["all", "", "entry", "1-2", "3-5", "5+"]


class JobCreate(WireModel):
    """Posting form as submitted; required fields are checked by the service."""

    title: str | None = None
    description: str | None = None
    company: str | None = None
    location: str | None = None
    job_type: str | None = Field(default=None, alias="type")
    category: str | None = None
    salary: int | str | None = None
    skills: str | None = None
    experience: str | None = None
    education: str | None = None
    benefits: str | None = None
    deadline: str | None = None
    remote: bool = False

    model_config = ConfigDict(extra="forbid")


class JobUpdate(JobCreate):
    """Partial posting edit."""

    remote: bool | None = None


class JobResponse(WireModel):
    """Schema returned for persisted job records."""

    id: int
    title: str
    description: str | None
    company: str
    location: str | None
    job_type: str | None = Field(alias="type")
    category: str | None
    salary: int | None
    skills: str | None
    experience: str | None
    education: str | None
    benefits: str | None
    deadline: date | None
    remote: bool
    owner_id: str
    status: str
    created_at: datetime
    updated_at: datetime


class JobFilterCriteria(WireModel):
    """One job search request.

    ``"all"`` is the wildcard for the structured filters. Salary bounds are
    kept as raw strings; non-numeric bounds impose no constraint.
    """

    search: str = ""
    category: str = WILDCARD
    job_type: str = Field(default=WILDCARD, alias="type")
    location: str = WILDCARD
    skill: str = WILDCARD
    education: str = WILDCARD
    experience: ExperienceFilter = WILDCARD
    salary_min: str = ""
    salary_max: str = ""
    remote_only: bool = False

    @property
    def active_filters(self) -> list[str]:
        """Names of the criteria that currently constrain results."""
        active: list[str] = []
        if self.search.strip():
            active.append("search")
        for name in (
            "category",
            "job_type",
            "location",
            "skill",
            "education",
            "experience",
        ):
            value = getattr(self, name)
            if value and value != WILDCARD:
                active.append(name)
        if self.salary_min.strip():
            active.append("salary_min")
        if self.salary_max.strip():
            active.append("salary_max")
        if self.remote_only:
            active.append("remote_only")
        return active


class JobFacets(WireModel):
    locations: list[str]
    skills: list[str]


class ApplicationStatusResponse(WireModel):
    """Whether the caller already applied to a posting."""

    has_applied: bool
    application_id: int | None = None
    status: str | None = None


__all__ = [
    "ApplicationStatusResponse",
    "JobCreate",
    "JobFacets",
    "JobFilterCriteria",
    "JobResponse",
    "JobUpdate",
    "WILDCARD",
]
