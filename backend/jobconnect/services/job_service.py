"""Business logic service for job postings."""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from loguru import logger

from jobconnect.core.exceptions import FormValidationError, NotFoundError
from jobconnect.core.metrics import increment_jobs_created
from jobconnect.models.job import JOB_STATUS_ACTIVE
from jobconnect.models.user import User
from jobconnect.repositories.job import JobRepository
from jobconnect.schemas.job import (
    JobCreate,
    JobFacets,
    JobFilterCriteria,
    JobResponse,
    JobUpdate,
)
from jobconnect.services.common import ensure_owner_or_admin, repository_errors
from jobconnect.services.job_filter import filter_jobs, job_facets

# Wire name, attribute name, label.
REQUIRED_JOB_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("title", "title", "Title"),
    ("description", "description", "Description"),
    ("category", "category", "Category"),
    ("salary", "salary", "Salary"),
    ("deadline", "deadline", "Deadline"),
    ("type", "job_type", "Job type"),
    ("company", "company", "Company"),
    ("location", "location", "Location"),
)


# ASCII digits only; the column is a 32-bit signed integer.
SALARY_PATTERN = re.compile(r"[0-9]+")
MAX_SALARY = 2**31 - 1


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def normalize_job_form(data: dict[str, Any], *, partial: bool) -> dict[str, Any]:
    """Validate a posting form and coerce its values for storage.

    Args:
        data: Submitted fields keyed by attribute name.
        partial: Only check the fields present in ``data``.

    Returns:
        Cleaned field mapping with ``salary`` as ``int`` and ``deadline`` as ``date``.

    Raises:
        FormValidationError: With one message per offending field.
    """
    errors: dict[str, str] = {}
    cleaned = {
        key: value.strip() if isinstance(value, str) else value
        for key, value in data.items()
    }
    if "remote" in cleaned and cleaned["remote"] is None:
        del cleaned["remote"]

    for wire_name, attribute, label in REQUIRED_JOB_FIELDS:
        if partial and attribute not in cleaned:
            continue
        if _is_blank(cleaned.get(attribute)):
            errors[wire_name] = f"{label} is required"

    salary = cleaned.get("salary")
    if "salary" not in errors and not _is_blank(salary):
        if isinstance(salary, bool) or not SALARY_PATTERN.fullmatch(str(salary)):
            errors["salary"] = "Salary must be a valid number"
        elif int(salary) > MAX_SALARY:
            errors["salary"] = "Salary is too large"
        else:
            cleaned["salary"] = int(salary)

    deadline = cleaned.get("deadline")
    if "deadline" not in errors and not _is_blank(deadline):
        try:
            cleaned["deadline"] = date.fromisoformat(str(deadline))
        except ValueError:
            errors["deadline"] = "Deadline must be a valid date (YYYY-MM-DD)"

    if errors:
        raise FormValidationError(errors)
    return cleaned


class JobService:
    """Service layer for posting rules, search and repository orchestration."""

    def __init__(self, repo: JobRepository):
        """Initialize JobService.

        Args:
            repo: Repository used for job persistence operations.
        """
        self.repo = repo

    async def search_jobs(self, criteria: JobFilterCriteria) -> list[JobResponse]:
        """Return postings matching ``criteria``, newest first."""
        log = logger.bind(
            service=self.__class__.__name__,
            operation="search_jobs",
            active_filters=criteria.active_filters,
        )
        log.info("Searching jobs")

        with repository_errors(log, "Failed to load jobs."):
            jobs = await self.repo.list_all()

        matched = filter_jobs(jobs, criteria)
        log.bind(total=len(jobs), count=len(matched)).info("Searched jobs")
        return [JobResponse.model_validate(job) for job in matched]

    async def get_facets(self) -> JobFacets:
        log = logger.bind(service=self.__class__.__name__, operation="get_facets")

        with repository_errors(log, "Failed to load jobs."):
            jobs = await self.repo.list_all()

        return JobFacets(**job_facets(jobs))

    async def get_job(self, job_id: int) -> JobResponse:
        """Get one job by identifier.

        Raises:
            NotFoundError: If the job does not exist.
            DatabaseError: If repository access fails.
        """
        log = logger.bind(
            service=self.__class__.__name__, operation="get_job", job_id=job_id
        )
        log.info("Fetching job")

        with repository_errors(log, "Failed to fetch job."):
            job = await self.repo.get_by_id(job_id)

        if job is None:
            log.warning("Job not found")
            raise NotFoundError(f"Job {job_id} not found.")

        return JobResponse.model_validate(job)

    async def list_owner_jobs(self, owner: User) -> list[JobResponse]:
        log = logger.bind(
            service=self.__class__.__name__,
            operation="list_owner_jobs",
            owner_id=owner.uid,
        )

        with repository_errors(log, "Failed to load your jobs."):
            jobs = await self.repo.list_by_owner(owner.uid)

        log.bind(count=len(jobs)).info("Listed owner jobs")
        return [JobResponse.model_validate(job) for job in jobs]

    async def create_job(self, payload: JobCreate, owner: User) -> JobResponse:
        """Validate and store a new posting owned by ``owner``.

        Raises:
            FormValidationError: If required fields are missing or malformed.
            DatabaseError: If the posting cannot be stored.
        """
        log = logger.bind(
            service=self.__class__.__name__,
            operation="create_job",
            owner_id=owner.uid,
        )
        log.info("Creating job")

        job_data = normalize_job_form(payload.model_dump(), partial=False)
        job_data["owner_id"] = owner.uid
        job_data["status"] = JOB_STATUS_ACTIVE

        with repository_errors(log, "Failed to create job."):
            job = await self.repo.create(job_data)

        try:
            increment_jobs_created(category=job.category or "uncategorized")
        except ValueError as exc:
            log.bind(error=str(exc)).warning("Skipped jobs_created_total metric")

        log.bind(job_id=job.id).info("Created job")
        return JobResponse.model_validate(job)

    async def update_job(
        self, job_id: int, payload: JobUpdate, actor: User
    ) -> JobResponse:
        """Apply a partial edit by the posting's owner or an admin.

        Raises:
            NotFoundError: If the job does not exist.
            PermissionDeniedError: If ``actor`` may not edit the posting.
            FormValidationError: If a provided field is blank or malformed.
        """
        log = logger.bind(
            service=self.__class__.__name__, operation="update_job", job_id=job_id
        )
        log.info("Updating job")

        with repository_errors(log, "Failed to update job."):
            existing = await self.repo.get_by_id(job_id)
        if existing is None:
            log.warning("Job not found for update")
            raise NotFoundError(f"Job {job_id} not found.")

        ensure_owner_or_admin(
            actor, existing.owner_id, "You can only edit your own job postings."
        )

        update_data = normalize_job_form(
            payload.model_dump(exclude_unset=True), partial=True
        )
        if not update_data:
            log.info("No fields provided; returning existing job")
            return JobResponse.model_validate(existing)

        with repository_errors(log, "Failed to update job."):
            updated = await self.repo.apply_update(existing, update_data)

        log.info("Updated job")
        return JobResponse.model_validate(updated)

    async def delete_job(self, job_id: int, actor: User) -> bool:
        """Permanently delete a posting.

        Raises:
            NotFoundError: If the job does not exist.
            PermissionDeniedError: If ``actor`` may not delete the posting.
        """
        log = logger.bind(
            service=self.__class__.__name__, operation="delete_job", job_id=job_id
        )
        log.info("Deleting job")

        with repository_errors(log, "Failed to delete job."):
            existing = await self.repo.get_by_id(job_id)
        if existing is None:
            log.warning("Job not found for delete")
            raise NotFoundError(f"Job {job_id} not found.")

        ensure_owner_or_admin(
            actor, existing.owner_id, "You can only delete your own job postings."
        )

        with repository_errors(log, "Failed to delete job."):
            await self.repo.delete_entity(existing)

        log.info("Deleted job")
        return True
