"""Application review endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from jobconnect.api.deps import (
    AdminUser,
    CurrentUser,
    EmployerUser,
    JobSeekerUser,
    get_application_service,
    service_errors,
)
from jobconnect.schemas.application import (
    ApplicationDetails,
    ApplicationResponse,
    ApplicationStatusUpdate,
    OfferResponseRequest,
)
from jobconnect.services.application_service import ApplicationService

router = APIRouter()

ApplicationServiceDep = Annotated[
    ApplicationService, Depends(get_application_service)
]


@router.get("/mine", response_model=list[ApplicationResponse])
async def my_applications(
    user: JobSeekerUser, service: ApplicationServiceDep
) -> list[ApplicationResponse]:
    with service_errors():
        return await service.list_for_applicant(user)


@router.get("/received", response_model=list[ApplicationResponse])
async def received_applications(
    user: EmployerUser, service: ApplicationServiceDep
) -> list[ApplicationResponse]:
    """Applications to the calling employer's postings."""
    with service_errors():
        return await service.list_for_employer(user)


@router.get("", response_model=list[ApplicationResponse])
async def all_applications(
    user: AdminUser, service: ApplicationServiceDep
) -> list[ApplicationResponse]:
    with service_errors():
        return await service.list_all()


@router.get("/{application_id}", response_model=ApplicationDetails)
async def application_details(
    application_id: int, user: CurrentUser, service: ApplicationServiceDep
) -> ApplicationDetails:
    with service_errors():
        return await service.get_details(application_id, actor=user)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: int,
    payload: ApplicationStatusUpdate,
    user: EmployerUser,
    service: ApplicationServiceDep,
) -> ApplicationResponse:
    with service_errors():
        return await service.update_status(application_id, payload.status, actor=user)


@router.post("/{application_id}/offer-response", response_model=ApplicationResponse)
async def respond_to_offer(
    application_id: int,
    payload: OfferResponseRequest,
    user: CurrentUser,
    service: ApplicationServiceDep,
) -> ApplicationResponse:
    """Accept or decline an offer; only the applicant may answer."""
    with service_errors():
        return await service.respond_to_offer(
            application_id, payload.response, actor=user
        )


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: int, user: AdminUser, service: ApplicationServiceDep
) -> Response:
    with service_errors():
        await service.delete(application_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
