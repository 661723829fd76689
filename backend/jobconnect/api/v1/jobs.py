"""Job posting, search and apply endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from jobconnect.api.deps import (
    EmployerUser,
    JobSeekerUser,
    get_application_service,
    get_job_service,
    service_errors,
)
from jobconnect.schemas.application import ApplicationResponse
from jobconnect.schemas.job import (
    WILDCARD,
    ApplicationStatusResponse,
    ExperienceFilter,
    JobCreate,
    JobFacets,
    JobFilterCriteria,
    JobResponse,
    JobUpdate,
)
from jobconnect.services.application_service import ApplicationService
from jobconnect.services.job_service import JobService

router = APIRouter()


def get_filter_criteria(
    search: str = "",
    category: str = WILDCARD,
    job_type: Annotated[str, Query(alias="type")] = WILDCARD,
    location: str = WILDCARD,
    skill: str = WILDCARD,
    education: str = WILDCARD,
    experience: ExperienceFilter = WILDCARD,
    salary_min: Annotated[str, Query(alias="salaryMin")] = "",
    salary_max: Annotated[str, Query(alias="salaryMax")] = "",
    remote_only: Annotated[bool, Query(alias="remoteOnly")] = False,
) -> JobFilterCriteria:
    """Read search criteria from camelCase query parameters."""
    return JobFilterCriteria(
        search=search,
        category=category,
        job_type=job_type,
        location=location,
        skill=skill,
        education=education,
        experience=experience,
        salary_min=salary_min,
        salary_max=salary_max,
        remote_only=remote_only,
    )


@router.get("", response_model=list[JobResponse])
async def search_jobs(
    criteria: Annotated[JobFilterCriteria, Depends(get_filter_criteria)],
    service: Annotated[JobService, Depends(get_job_service)],
) -> list[JobResponse]:
    """Search postings. Every active criterion must match."""
    with service_errors():
        return await service.search_jobs(criteria)


@router.get("/facets", response_model=JobFacets)
async def job_filter_options(
    service: Annotated[JobService, Depends(get_job_service)],
) -> JobFacets:
    """Locations and skills offered as filter options."""
    with service_errors():
        return await service.get_facets()


@router.get("/mine", response_model=list[JobResponse])
async def my_jobs(
    user: EmployerUser,
    service: Annotated[JobService, Depends(get_job_service)],
) -> list[JobResponse]:
    with service_errors():
        return await service.list_owner_jobs(user)


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: int,
    service: Annotated[JobService, Depends(get_job_service)],
) -> JobResponse:
    with service_errors():
        return await service.get_job(job_id)


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: JobCreate,
    user: EmployerUser,
    service: Annotated[JobService, Depends(get_job_service)],
) -> JobResponse:
    """Publish a posting owned by the calling employer."""
    with service_errors():
        return await service.create_job(payload, owner=user)


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    payload: JobUpdate,
    user: EmployerUser,
    service: Annotated[JobService, Depends(get_job_service)],
) -> JobResponse:
    with service_errors():
        return await service.update_job(job_id, payload, actor=user)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: int,
    user: EmployerUser,
    service: Annotated[JobService, Depends(get_job_service)],
) -> Response:
    """Permanently delete a posting."""
    with service_errors():
        await service.delete_job(job_id, actor=user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{job_id}/application-status", response_model=ApplicationStatusResponse)
async def application_status(
    job_id: int,
    user: JobSeekerUser,
    service: Annotated[ApplicationService, Depends(get_application_service)],
) -> ApplicationStatusResponse:
    with service_errors():
        return await service.application_status(job_id, user)


@router.post(
    "/{job_id}/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply_to_job(
    job_id: int,
    user: JobSeekerUser,
    service: Annotated[ApplicationService, Depends(get_application_service)],
) -> ApplicationResponse:
    with service_errors():
        return await service.apply(job_id, user)
