"""Service tests for applying to jobs and reviewing applications."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from jobconnect.core.exceptions import (
    BusinessLogicError,
    NotFoundError,
    PermissionDeniedError,
)
from jobconnect.repositories.application import ApplicationRepository
from jobconnect.repositories.job import JobRepository
from jobconnect.repositories.user import UserRepository
from jobconnect.services.application_service import ApplicationService
from tests.factories import ApplicationFactory, JobFactory, UserFactory


@pytest.fixture
def service(db_session: AsyncSession) -> ApplicationService:
    return ApplicationService(
        ApplicationRepository(db_session),
        JobRepository(db_session),
        UserRepository(db_session),
    )


@pytest.mark.asyncio
async def test_apply_snapshots_job_and_applicant(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
) -> None:
    applicant = await user_factory.create(uid="seeker-1", phone="0400 000 000")
    job = await job_factory.create(title="Backend Engineer", salary=95000)

    application = await service.apply(job.id, applicant)

    assert application.status == "pending"
    assert application.job_title == "Backend Engineer"
    assert application.employer_id == "employer-1"
    assert application.applicant_name == "Ada Lovelace"
    assert application.applicant_phone == "0400 000 000"
    assert application.salary == 95000


@pytest.mark.asyncio
async def test_apply_twice_is_rejected(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
) -> None:
    applicant = await user_factory.create()
    job = await job_factory.create()
    await service.apply(job.id, applicant)

    with pytest.raises(BusinessLogicError, match="already applied"):
        await service.apply(job.id, applicant)


@pytest.mark.asyncio
async def test_apply_to_missing_job(
    service: ApplicationService, user_factory: UserFactory
) -> None:
    applicant = await user_factory.create()

    with pytest.raises(NotFoundError):
        await service.apply(999, applicant)


@pytest.mark.asyncio
async def test_apply_requires_complete_profile(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
) -> None:
    applicant = await user_factory.create(first_name=" ")
    job = await job_factory.create()

    with pytest.raises(
        BusinessLogicError, match="Please complete your profile before applying"
    ):
        await service.apply(job.id, applicant)


@pytest.mark.asyncio
async def test_application_status_reflects_existing_application(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
) -> None:
    applicant = await user_factory.create()
    job = await job_factory.create()

    before = await service.application_status(job.id, applicant)
    submitted = await service.apply(job.id, applicant)
    after = await service.application_status(job.id, applicant)

    assert before.has_applied is False
    assert after.has_applied is True
    assert after.application_id == submitted.id
    assert after.status == "pending"


@pytest.mark.asyncio
async def test_employer_moves_application_through_review(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
    application_factory: ApplicationFactory,
) -> None:
    employer = await user_factory.create(uid="employer-1", user_type="employer")
    applicant = await user_factory.create()
    job = await job_factory.create(owner_id=employer.uid)
    application = await application_factory.create(job, applicant)

    updated = await service.update_status(application.id, "reviewing", employer)

    assert updated.status == "reviewing"
    assert updated.updated_by == "employer-1"


@pytest.mark.asyncio
async def test_other_employer_cannot_update_status(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
    application_factory: ApplicationFactory,
) -> None:
    outsider = await user_factory.create(uid="employer-2", user_type="employer")
    applicant = await user_factory.create()
    job = await job_factory.create(owner_id="employer-1")
    application = await application_factory.create(job, applicant)

    with pytest.raises(PermissionDeniedError):
        await service.update_status(application.id, "reviewing", outsider)


@pytest.mark.asyncio
async def test_unknown_status_is_rejected(
    service: ApplicationService, user_factory: UserFactory
) -> None:
    admin = await user_factory.create(uid="admin-1", is_admin=True)

    with pytest.raises(BusinessLogicError, match="Invalid application status"):
        await service.update_status(1, "hired", admin)


@pytest.mark.asyncio
async def test_applicant_accepts_pending_offer(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
    application_factory: ApplicationFactory,
) -> None:
    applicant = await user_factory.create()
    job = await job_factory.create()
    application = await application_factory.create(job, applicant, status="offer sent")

    answered = await service.respond_to_offer(application.id, "accepted", applicant)

    assert answered.status == "accepted"
    assert answered.response_date is not None
    assert answered.updated_by == applicant.uid


@pytest.mark.asyncio
async def test_offer_response_requires_pending_offer(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
    application_factory: ApplicationFactory,
) -> None:
    applicant = await user_factory.create()
    job = await job_factory.create()
    application = await application_factory.create(job, applicant)

    with pytest.raises(BusinessLogicError, match="no pending offer"):
        await service.respond_to_offer(application.id, "declined", applicant)


@pytest.mark.asyncio
async def test_only_applicant_may_answer_offer(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
    application_factory: ApplicationFactory,
) -> None:
    applicant = await user_factory.create()
    employer = await user_factory.create(uid="employer-1", user_type="employer")
    job = await job_factory.create()
    application = await application_factory.create(job, applicant, status="offer sent")

    with pytest.raises(PermissionDeniedError):
        await service.respond_to_offer(application.id, "accepted", employer)


@pytest.mark.asyncio
async def test_details_visible_to_employer_but_not_strangers(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
    application_factory: ApplicationFactory,
) -> None:
    applicant = await user_factory.create()
    employer = await user_factory.create(uid="employer-1", user_type="employer")
    stranger = await user_factory.create(uid="seeker-x")
    job = await job_factory.create()
    application = await application_factory.create(job, applicant)

    details = await service.get_details(application.id, employer)

    assert details.job is not None
    assert details.job.id == job.id
    assert details.applicant is not None
    assert details.applicant.uid == applicant.uid
    with pytest.raises(PermissionDeniedError):
        await service.get_details(application.id, stranger)


@pytest.mark.asyncio
async def test_lists_are_scoped_to_caller(
    service: ApplicationService,
    user_factory: UserFactory,
    job_factory: JobFactory,
    application_factory: ApplicationFactory,
) -> None:
    first = await user_factory.create()
    second = await user_factory.create()
    employer = await user_factory.create(uid="employer-1", user_type="employer")
    own_job = await job_factory.create(owner_id="employer-1")
    other_job = await job_factory.create(owner_id="employer-2")
    await application_factory.create(own_job, first)
    await application_factory.create(other_job, first)
    await application_factory.create(own_job, second)

    assert len(await service.list_for_applicant(first)) == 2
    assert len(await service.list_for_employer(employer)) == 2
    assert len(await service.list_all()) == 3


@pytest.mark.asyncio
async def test_delete_missing_application(service: ApplicationService) -> None:
    with pytest.raises(NotFoundError):
        await service.delete(12345)
