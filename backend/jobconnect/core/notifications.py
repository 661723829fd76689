"""Transient, color-coded user notifications with automatic dismissal."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

from loguru import logger

NOTIFICATION_COLORS: dict[str, str] = {
    "network": "#e53935",
    "api": "#d32f2f",
    "auth": "#7b1fa2",
    "validation": "#f57c00",
    "form": "#fb8c00",
    "upload": "#6d4c41",
    "timeout": "#455a64",
    "permission": "#c2185b",
    "success": "#43a047",
}
DEFAULT_NOTIFICATION_COLOR = "#ff5252"


def color_for(kind: str) -> str:
    """Return the display color for a notification kind."""
    return NOTIFICATION_COLORS.get(kind, DEFAULT_NOTIFICATION_COLOR)


@dataclass(frozen=True)
class Notification:
    """One displayed notification."""

    message: str
    kind: str
    color: str
    expires_at: float
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationCenter:
    """Hold the notifications currently visible to users.

    A notification stays active for ``ttl_seconds`` after it is shown, or
    until it is dismissed. Messages are unique among active notifications.
    """

    def __init__(
        self,
        ttl_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._active: dict[str, Notification] = {}

    def show(self, message: str, kind: str = "error") -> Notification:
        """Display a notification, replacing an expired one with the same text.

        Args:
            message: Text shown to the user.
            kind: Error kind or ``"success"``; selects the color.

        Returns:
            The notification now on display.
        """
        self._purge_expired()
        notification = Notification(
            message=message,
            kind=kind,
            color=color_for(kind),
            expires_at=self._clock() + self.ttl_seconds,
        )
        self._active[message] = notification
        logger.bind(notification_id=notification.id, kind=kind).debug(
            "Notification shown"
        )
        return notification

    def is_active(self, message: str) -> bool:
        """Return whether a notification with this exact text is on display."""
        self._purge_expired()
        return message in self._active

    def active(self) -> list[Notification]:
        """Return notifications on display, oldest first."""
        self._purge_expired()
        return sorted(self._active.values(), key=lambda item: item.expires_at)

    def dismiss(self, notification_id: str) -> bool:
        """Remove one notification before it expires.

        Returns:
            ``True`` when a matching notification was on display.
        """
        for message, notification in list(self._active.items()):
            if notification.id == notification_id:
                del self._active[message]
                return True
        return False

    def clear(self) -> None:
        self._active.clear()

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [
            message
            for message, notification in self._active.items()
            if notification.expires_at <= now
        ]
        for message in expired:
            del self._active[message]


__all__ = [
    "DEFAULT_NOTIFICATION_COLOR",
    "NOTIFICATION_COLORS",
    "Notification",
    "NotificationCenter",
    "color_for",
]
