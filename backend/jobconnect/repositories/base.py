"""Shared repository utilities for async SQLAlchemy repositories."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, ClassVar, Generic, TypeVar

from loguru import logger
from sqlalchemy import Select, inspect as sa_inspect, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobconnect.core.exceptions import DuplicateError, RepositoryError
from jobconnect.core.metrics import db_query_timer
from jobconnect.models.base import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

PROTECTED_UPDATE_FIELDS = frozenset({"id", "created_at", "updated_at"})
PROTECTED_CREATE_FIELDS = frozenset({"id", "created_at"})


class BaseRepository(Generic[ModelT]):
    """Base repository with CRUD helpers, timing and error handling.

    Subclasses declaring ``unique_columns`` get integrity errors on those
    columns translated into ``duplicate_error``.
    """

    unique_constraint: ClassVar[str | None] = None
    unique_columns: ClassVar[tuple[str, ...]] = ()
    duplicate_error: ClassVar[type[DuplicateError]] = DuplicateError
    duplicate_message: ClassVar[str] = "Record already exists."

    def __init__(self, db: AsyncSession, model_type: type[ModelT]):
        """Initialize repository with session and model class.

        Args:
            db: Active asynchronous SQLAlchemy session.
            model_type: ORM model class for this repository.
        """
        self.db = db
        self.model_type = model_type
        self._attribute_names = {
            attribute.key for attribute in sa_inspect(model_type).column_attrs
        }

    @property
    def _entity_name(self) -> str:
        return self.model_type.__name__.lower()

    def _log(self, operation: str, **context: Any):
        return logger.bind(
            repository=self.__class__.__name__, operation=operation, **context
        )

    async def get_by_id(self, entity_id: int) -> ModelT | None:
        """Fetch a single record by primary key.

        Raises:
            RepositoryError: If database query fails.
        """
        return await self._scalar_one_or_none(
            select(self.model_type).where(self.model_type.id == entity_id),
            operation="get_by_id",
            entity_id=entity_id,
        )

    async def create(self, data: dict[str, Any]) -> ModelT:
        """Insert one record.

        Args:
            data: Field-value mapping using ORM attribute names.

        Returns:
            Persisted entity.

        Raises:
            ValueError: If protected or unknown fields are supplied.
            DuplicateError: If a declared unique key already exists.
            RepositoryError: If database write fails.
        """
        log = self._log("create")
        log.info(f"Creating {self._entity_name}")

        invalid = PROTECTED_CREATE_FIELDS & data.keys()
        if invalid:
            blocked = ", ".join(sorted(invalid))
            raise ValueError(f"Cannot set protected fields: {blocked}")
        self._check_known_fields(data)

        entity = self.model_type(**data)
        self.db.add(entity)
        with db_query_timer("insert"):
            created = await self._commit_or_raise(entity, log)
        log.bind(entity_id=created.id).info(f"Created {self._entity_name}")
        return created

    async def update(self, entity_id: int, data: dict[str, Any]) -> ModelT | None:
        """Update one record by primary key.

        Returns:
            Updated entity when found, otherwise ``None``.

        Raises:
            ValueError: If protected or unknown fields are supplied.
            DuplicateError: If the update violates a declared unique key.
            RepositoryError: If database write fails.
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            self._log("update", entity_id=entity_id).info(
                f"{self._entity_name.capitalize()} not found for update"
            )
            return None
        return await self.apply_update(entity, data)

    async def apply_update(self, entity: ModelT, data: dict[str, Any]) -> ModelT:
        """Write field changes onto an already loaded entity."""
        log = self._log("update", entity_id=entity.id)
        log.info(f"Updating {self._entity_name}")

        for field in data:
            if field in PROTECTED_UPDATE_FIELDS:
                raise ValueError(f"Cannot update protected field: {field}")
        self._check_known_fields(data)

        try:
            for field, value in data.items():
                setattr(entity, field, value)
        except ValueError:
            await self._rollback_safely()
            raise

        with db_query_timer("update"):
            updated = await self._commit_or_raise(entity, log)
        log.info(f"Updated {self._entity_name}")
        return updated

    async def delete(self, entity_id: int) -> bool:
        """Delete one record by primary key.

        Returns:
            ``True`` when deleted, ``False`` when not found.

        Raises:
            RepositoryError: If database delete fails.
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            self._log("delete", entity_id=entity_id).info(
                f"{self._entity_name.capitalize()} not found for delete"
            )
            return False
        await self.delete_entity(entity)
        return True

    async def delete_entity(self, entity: ModelT) -> None:
        log = self._log("delete", entity_id=entity.id)

        try:
            with db_query_timer("delete"):
                await self.db.delete(entity)
                await self.db.commit()
        except SQLAlchemyError as exc:
            await self._rollback_safely()
            log.bind(error=str(exc)).error(f"Failed to delete {self._entity_name}")
            raise RepositoryError(f"Failed to delete {self._entity_name}.") from exc

        log.info(f"Deleted {self._entity_name}")

    async def _scalar_one_or_none(
        self, query: Select[Any], operation: str, **context: Any
    ) -> ModelT | None:
        log = self._log(operation, **context)
        log.debug(f"Fetching {self._entity_name}")

        try:
            with db_query_timer("select"):
                result = await self.db.execute(query)
            entity = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            log.bind(error=str(exc)).error(f"Failed to fetch {self._entity_name}")
            raise RepositoryError(f"Failed to fetch {self._entity_name}.") from exc

        log.bind(found=entity is not None).debug(f"Fetched {self._entity_name}")
        return entity

    async def _scalars(
        self, query: Select[Any], operation: str, **context: Any
    ) -> list[ModelT]:
        log = self._log(operation, **context)
        log.debug(f"Listing {self._entity_name} records")

        try:
            with db_query_timer("select"):
                result = await self.db.execute(query)
            entities = self._to_list(result.scalars().all())
        except SQLAlchemyError as exc:
            log.bind(error=str(exc)).error(f"Failed to list {self._entity_name} records")
            raise RepositoryError(
                f"Failed to list {self._entity_name} records."
            ) from exc

        log.bind(count=len(entities)).debug(f"Listed {self._entity_name} records")
        return entities

    async def _commit_or_raise(self, entity: ModelT, log: Any) -> ModelT:
        try:
            return await self._commit_and_refresh(entity)
        except IntegrityError as exc:
            await self._rollback_safely()
            if self._is_unique_violation(exc):
                log.bind(error=str(exc)).warning(
                    f"Duplicate {self._entity_name} detected"
                )
                raise self.duplicate_error(self.duplicate_message) from exc
            log.bind(error=str(exc)).error(
                f"Integrity error writing {self._entity_name}"
            )
            raise RepositoryError(
                f"Failed to write {self._entity_name} due to integrity error."
            ) from exc
        except SQLAlchemyError as exc:
            await self._rollback_safely()
            log.bind(error=str(exc)).error(
                f"Database error writing {self._entity_name}"
            )
            raise RepositoryError(f"Failed to write {self._entity_name}.") from exc

    async def _commit_and_refresh(self, entity: ModelT) -> ModelT:
        await self.db.commit()
        await self.db.refresh(entity)
        return entity

    async def _rollback_safely(self) -> None:
        """Attempt rollback and preserve the original error context."""
        try:
            await self.db.rollback()
        except SQLAlchemyError as exc:
            logger.bind(
                repository=self.__class__.__name__,
                model=self.model_type.__name__,
                error=str(exc),
            ).error("Rollback failed")

    def _check_known_fields(self, data: dict[str, Any]) -> None:
        for field in data:
            if field.startswith("_") or field not in self._attribute_names:
                raise ValueError(f"Unknown or unsafe field: {field}")

    def _is_unique_violation(self, error: IntegrityError) -> bool:
        """Check whether an integrity error hits the declared unique key.

        Detection relies on driver error text: PostgreSQL names the
        constraint, SQLite lists the columns.
        """
        if not self.unique_columns:
            return False

        error_text = (
            str(error.orig).lower() if error.orig is not None else str(error).lower()
        )
        if self.unique_constraint and self.unique_constraint in error_text:
            return True
        return "unique" in error_text and all(
            column in error_text for column in self.unique_columns
        )

    @staticmethod
    def _to_list(items: Sequence[ModelT]) -> list[ModelT]:
        return list(items)
