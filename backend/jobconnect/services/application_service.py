"""Business logic service for job applications."""

from __future__ import annotations

from datetime import datetime, timezone

from loguru import logger

from jobconnect.core.exceptions import (
    BusinessLogicError,
    NotFoundError,
    PermissionDeniedError,
)
from jobconnect.models.application import (
    APPLICATION_STATUSES,
    OFFER_RESPONSES,
    Application,
)
from jobconnect.models.user import User
from jobconnect.repositories.application import ApplicationRepository
from jobconnect.repositories.job import JobRepository
from jobconnect.repositories.user import UserRepository
from jobconnect.schemas.application import ApplicationDetails, ApplicationResponse
from jobconnect.schemas.job import ApplicationStatusResponse, JobResponse
from jobconnect.schemas.user import UserResponse
from jobconnect.services.common import ensure_owner_or_admin, repository_errors

OFFER_SENT = "offer sent"


class ApplicationService:
    """Applying to postings and moving applications through review."""

    def __init__(
        self,
        applications: ApplicationRepository,
        jobs: JobRepository,
        users: UserRepository,
    ):
        self.applications = applications
        self.jobs = jobs
        self.users = users

    async def apply(self, job_id: int, applicant: User) -> ApplicationResponse:
        """Submit ``applicant``'s application to a posting.

        Raises:
            NotFoundError: If the job does not exist.
            BusinessLogicError: If the profile is incomplete or the user already applied.
        """
        log = logger.bind(
            service=self.__class__.__name__,
            operation="apply",
            job_id=job_id,
            user_id=applicant.uid,
        )
        log.info("Submitting application")

        with repository_errors(log, "Failed to submit application."):
            job = await self.jobs.get_by_id(job_id)
        if job is None:
            raise NotFoundError(f"Job {job_id} not found.")

        if not (applicant.first_name or "").strip() or not (
            applicant.last_name or ""
        ).strip():
            raise BusinessLogicError("Please complete your profile before applying")

        with repository_errors(log, "Failed to submit application."):
            existing = await self.applications.get_for_job_and_user(
                job_id, applicant.uid
            )
            if existing is not None:
                raise BusinessLogicError("You have already applied for this job.")

            application = await self.applications.create(
                {
                    "job_id": job.id,
                    "job_title": job.title,
                    "user_id": applicant.uid,
                    "employer_id": job.owner_id,
                    "status": "pending",
                    "applicant_name": applicant.full_name,
                    "applicant_email": applicant.email,
                    "applicant_phone": applicant.phone,
                    "company": job.company,
                    "salary": job.salary,
                }
            )

        log.bind(application_id=application.id).info("Submitted application")
        return ApplicationResponse.model_validate(application)

    async def application_status(
        self, job_id: int, user: User
    ) -> ApplicationStatusResponse:
        log = logger.bind(
            service=self.__class__.__name__,
            operation="application_status",
            job_id=job_id,
        )

        with repository_errors(log, "Failed to check application status."):
            existing = await self.applications.get_for_job_and_user(job_id, user.uid)

        if existing is None:
            return ApplicationStatusResponse(has_applied=False)
        return ApplicationStatusResponse(
            has_applied=True,
            application_id=existing.id,
            status=existing.status,
        )

    async def list_for_applicant(self, user: User) -> list[ApplicationResponse]:
        log = logger.bind(service=self.__class__.__name__, operation="list_for_applicant")
        with repository_errors(log, "Failed to load applications."):
            items = await self.applications.list_by_user(user.uid)
        return [ApplicationResponse.model_validate(item) for item in items]

    async def list_for_employer(self, user: User) -> list[ApplicationResponse]:
        log = logger.bind(service=self.__class__.__name__, operation="list_for_employer")
        with repository_errors(log, "Failed to load applications."):
            items = await self.applications.list_by_employer(user.uid)
        return [ApplicationResponse.model_validate(item) for item in items]

    async def list_all(self) -> list[ApplicationResponse]:
        log = logger.bind(service=self.__class__.__name__, operation="list_all")
        with repository_errors(log, "Failed to load applications."):
            items = await self.applications.list_all()
        return [ApplicationResponse.model_validate(item) for item in items]

    async def get_details(self, application_id: int, actor: User) -> ApplicationDetails:
        """Load an application together with its posting and applicant.

        Raises:
            NotFoundError: If the application does not exist.
            PermissionDeniedError: Unless ``actor`` is the applicant, the employer or an admin.
        """
        log = logger.bind(
            service=self.__class__.__name__,
            operation="get_details",
            application_id=application_id,
        )

        application = await self._get_application(application_id, log)
        if actor.role != "admin" and actor.uid not in (
            application.user_id,
            application.employer_id,
        ):
            raise PermissionDeniedError("You cannot view this application.")

        with repository_errors(log, "Failed to load application details."):
            job = await self.jobs.get_by_id(application.job_id)
            applicant = await self.users.get_by_uid(application.user_id)

        return ApplicationDetails(
            application=ApplicationResponse.model_validate(application),
            job=JobResponse.model_validate(job) if job is not None else None,
            applicant=(
                UserResponse.model_validate(applicant)
                if applicant is not None
                else None
            ),
        )

    async def update_status(
        self, application_id: int, status: str, actor: User
    ) -> ApplicationResponse:
        """Move an application to another review status.

        Raises:
            BusinessLogicError: If ``status`` is not a known status.
            PermissionDeniedError: Unless ``actor`` is the employer of record or an admin.
        """
        log = logger.bind(
            service=self.__class__.__name__,
            operation="update_status",
            application_id=application_id,
            status=status,
        )
        log.info("Updating application status")

        if status not in APPLICATION_STATUSES:
            allowed = ", ".join(APPLICATION_STATUSES)
            raise BusinessLogicError(
                f"Invalid application status '{status}'. Allowed values: {allowed}."
            )

        application = await self._get_application(application_id, log)
        ensure_owner_or_admin(
            actor,
            application.employer_id,
            "Only the employer can update this application.",
        )

        with repository_errors(log, "Failed to update application."):
            updated = await self.applications.apply_update(
                application, {"status": status, "updated_by": actor.uid}
            )

        log.info("Updated application status")
        return ApplicationResponse.model_validate(updated)

    async def respond_to_offer(
        self, application_id: int, response: str, actor: User
    ) -> ApplicationResponse:
        """Record the applicant's answer to an offer.

        Raises:
            PermissionDeniedError: If ``actor`` is not the applicant.
            BusinessLogicError: If the answer is invalid or no offer is pending.
        """
        log = logger.bind(
            service=self.__class__.__name__,
            operation="respond_to_offer",
            application_id=application_id,
            response=response,
        )
        log.info("Recording offer response")

        if response not in OFFER_RESPONSES:
            raise BusinessLogicError("Offer response must be 'accepted' or 'declined'.")

        application = await self._get_application(application_id, log)
        if application.user_id != actor.uid:
            raise PermissionDeniedError("Only the applicant can respond to this offer.")
        if application.status != OFFER_SENT:
            raise BusinessLogicError("There is no pending offer for this application.")

        with repository_errors(log, "Failed to record offer response."):
            updated = await self.applications.apply_update(
                application,
                {
                    "status": response,
                    "response_date": datetime.now(timezone.utc),
                    "updated_by": actor.uid,
                },
            )

        log.info("Recorded offer response")
        return ApplicationResponse.model_validate(updated)

    async def delete(self, application_id: int) -> bool:
        log = logger.bind(
            service=self.__class__.__name__,
            operation="delete",
            application_id=application_id,
        )

        with repository_errors(log, "Failed to delete application."):
            deleted = await self.applications.delete(application_id)
        if not deleted:
            raise NotFoundError(f"Application {application_id} not found.")

        log.info("Deleted application")
        return True

    async def _get_application(self, application_id: int, log) -> Application:
        with repository_errors(log, "Failed to load application."):
            application = await self.applications.get_by_id(application_id)
        if application is None:
            log.warning("Application not found")
            raise NotFoundError(f"Application {application_id} not found.")
        return application
