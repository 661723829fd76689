"""Data access repository for user profiles."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobconnect.models.user import User
from jobconnect.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for ``users`` keyed by identity-provider uid."""

    unique_constraint = "ix_users_uid"
    unique_columns = ("uid",)
    duplicate_message = "A profile for this account already exists."

    def __init__(self, db: AsyncSession):
        super().__init__(db=db, model_type=User)

    async def get_by_uid(self, uid: str) -> User | None:
        return await self._scalar_one_or_none(
            select(User).where(User.uid == uid), operation="get_by_uid", uid=uid
        )

    async def list_all(self) -> list[User]:
        return await self._scalars(
            select(User).order_by(User.created_at.desc(), User.id.desc()),
            operation="list_all",
        )
