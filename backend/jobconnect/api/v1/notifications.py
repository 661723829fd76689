"""Notification and error history endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from jobconnect.api.deps import (
    AdminUser,
    CurrentUser,
    get_error_hub,
    get_notification_center,
)
from jobconnect.core.errors import ErrorHub
from jobconnect.core.notifications import NotificationCenter
from jobconnect.schemas.notification import ErrorRecordResponse, NotificationResponse

router = APIRouter()

NotificationsDep = Annotated[NotificationCenter, Depends(get_notification_center)]


@router.get("", response_model=list[NotificationResponse])
async def active_notifications(
    user: CurrentUser,
    notifications: NotificationsDep,
) -> list[NotificationResponse]:
    """Notifications currently on display, oldest first."""
    return [
        NotificationResponse.model_validate(item) for item in notifications.active()
    ]


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def dismiss_notification(
    notification_id: str, user: AdminUser, notifications: NotificationsDep
) -> Response:
    """Dismiss a notification for everyone; the center is shared."""
    if not notifications.dismiss(notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {notification_id} not found.",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/history", response_model=list[ErrorRecordResponse])
async def error_history(
    user: AdminUser,
    hub: Annotated[ErrorHub, Depends(get_error_hub)],
) -> list[ErrorRecordResponse]:
    """Recent error reports, most recent first."""
    return [ErrorRecordResponse.model_validate(record) for record in hub.history]
