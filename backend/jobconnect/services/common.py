"""Helpers shared by service classes."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from jobconnect.core.exceptions import (
    BusinessLogicError,
    DatabaseError,
    DuplicateError,
    PermissionDeniedError,
    RepositoryError,
)


@contextmanager
def repository_errors(log: Any, failure_message: str) -> Iterator[None]:
    """Translate repository failures raised inside the block.

    Args:
        log: Bound logger of the calling operation.
        failure_message: Message for ``DatabaseError`` on storage failures.

    Raises:
        BusinessLogicError: For duplicates and rejected field values.
        DatabaseError: For any other repository failure.
    """
    try:
        yield
    except DuplicateError as exc:
        log.bind(error=str(exc)).warning("Duplicate record rejected")
        raise BusinessLogicError(str(exc)) from exc
    except RepositoryError as exc:
        log.bind(error=str(exc)).error(failure_message)
        raise DatabaseError(failure_message) from exc
    except ValueError as exc:
        log.bind(error=str(exc)).warning("Invalid field value rejected")
        raise BusinessLogicError(str(exc)) from exc


def ensure_owner_or_admin(actor: Any, owner_uid: str, message: str) -> None:
    """Raise ``PermissionDeniedError`` unless ``actor`` owns the record or is admin."""
    if actor.role == "admin" or actor.uid == owner_uid:
        return
    raise PermissionDeniedError(message)


__all__ = ["ensure_owner_or_admin", "repository_errors"]
