"""Pydantic schemas for notifications and error history."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from jobconnect.core.errors import ErrorKind
from jobconnect.schemas.base import WireModel


class NotificationResponse(WireModel):
    id: str
    message: str
    kind: str
    color: str
    created_at: datetime


class ErrorRecordResponse(WireModel):
    kind: ErrorKind
    message: str
    status: int | None
    timestamp: datetime
    context: dict[str, Any]


__all__ = ["ErrorRecordResponse", "NotificationResponse"]
