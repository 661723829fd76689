"""Data access repository for job applications."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobconnect.core.exceptions import DuplicateApplicationError
from jobconnect.models.application import Application
from jobconnect.repositories.base import BaseRepository


class ApplicationRepository(BaseRepository[Application]):
    """Repository for ``applications``; one row per job and applicant."""

    unique_constraint = "uq_applications_job_id_user_id"
    unique_columns = ("job_id", "user_id")
    duplicate_error = DuplicateApplicationError
    duplicate_message = "You have already applied for this job."

    def __init__(self, db: AsyncSession):
        super().__init__(db=db, model_type=Application)

    async def get_for_job_and_user(
        self, job_id: int, user_id: str
    ) -> Application | None:
        return await self._scalar_one_or_none(
            select(Application).where(
                Application.job_id == job_id,
                Application.user_id == user_id,
            ),
            operation="get_for_job_and_user",
            job_id=job_id,
            user_id=user_id,
        )

    async def list_by_user(self, user_id: str) -> list[Application]:
        return await self._scalars(
            select(Application)
            .where(Application.user_id == user_id)
            .order_by(Application.applied_on.desc(), Application.id.desc()),
            operation="list_by_user",
            user_id=user_id,
        )

    async def list_by_employer(self, employer_id: str) -> list[Application]:
        return await self._scalars(
            select(Application)
            .where(Application.employer_id == employer_id)
            .order_by(Application.applied_on.desc(), Application.id.desc()),
            operation="list_by_employer",
            employer_id=employer_id,
        )

    async def list_all(self) -> list[Application]:
        return await self._scalars(
            select(Application).order_by(
                Application.applied_on.desc(), Application.id.desc()
            ),
            operation="list_all",
        )
