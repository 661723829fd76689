"""Data access repository for Job entities."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobconnect.models.job import Job
from jobconnect.repositories.base import BaseRepository


class JobRepository(BaseRepository[Job]):
    """Repository responsible for job table persistence operations."""

    def __init__(self, db: AsyncSession):
        """Initialize JobRepository.

        Args:
            db: Active asynchronous SQLAlchemy session.
        """
        super().__init__(db=db, model_type=Job)

    async def list_all(self) -> list[Job]:
        """Fetch every posting, newest first.

        Search runs in memory over this collection, so no filtering happens here.

        Raises:
            RepositoryError: If database query fails.
        """
        return await self._scalars(
            select(Job).order_by(Job.created_at.desc(), Job.id.desc()),
            operation="list_all",
        )

    async def list_by_owner(self, owner_id: str) -> list[Job]:
        """Fetch postings created by one employer, newest first."""
        return await self._scalars(
            select(Job)
            .where(Job.owner_id == owner_id)
            .order_by(Job.created_at.desc(), Job.id.desc()),
            operation="list_by_owner",
            owner_id=owner_id,
        )
