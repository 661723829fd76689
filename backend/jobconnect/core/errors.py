"""Error classification and dispatch hub.

Every failure that should reach the user funnels into ``ErrorHub.report``.
The hub turns a loosely populated ``ErrorEvent`` into a user-facing message,
shows at most one notification per distinct message, keeps a bounded history
for diagnostics, fans the event out to subscribers, and finally performs the
corrective navigation tied to the error kind.
"""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol

from loguru import logger

from jobconnect.core.metrics import increment_errors_reported
from jobconnect.core.navigation import current_navigation
from jobconnect.core.notifications import NotificationCenter


class ErrorKind(str, Enum):
    """Fixed error taxonomy."""

    NETWORK = "network"
    API = "api"
    AUTH = "auth"
    VALIDATION = "validation"
    SYSTEM = "system"
    DATABASE = "database"
    FORM = "form"
    UPLOAD = "upload"
    PERMISSION = "permission"
    TIMEOUT = "timeout"


OFFLINE_MESSAGE = "Network error: Please check your internet connection"
UNEXPECTED_MESSAGE = "An unexpected error occurred"

API_STATUS_MESSAGES: dict[int, str] = {
    400: "Invalid request. Please check your input.",
    401: "Your session has expired. Please log in again.",
    403: "You don't have permission to perform this action.",
    404: "The requested resource was not found.",
    429: "Too many requests. Please try again later.",
    500: "Server error. Our team has been notified.",
}

KIND_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NETWORK: "Network error: Unable to connect to the server",
    ErrorKind.AUTH: "Authentication required. Please log in.",
    ErrorKind.FORM: "Please fill in all required fields correctly",
    ErrorKind.TIMEOUT: "Request timed out. Please try again",
    ErrorKind.PERMISSION: "You don't have permission to perform this action",
}

# Kinds whose own message wins over the default text.
MESSAGE_DEFAULTS: dict[ErrorKind, str] = {
    ErrorKind.VALIDATION: "Please check your input and try again",
    ErrorKind.UPLOAD: "File upload failed",
    ErrorKind.SYSTEM: UNEXPECTED_MESSAGE,
    ErrorKind.DATABASE: UNEXPECTED_MESSAGE,
}


@dataclass(frozen=True)
class ErrorEvent:
    """A failure as captured at its interception point."""

    kind: ErrorKind
    message: str | None = None
    status: int | None = None
    endpoint: str | None = None
    duration_ms: float | None = None
    detail: str | None = None


@dataclass(frozen=True)
class ErrorRecord:
    """Normalized history entry for one accepted report."""

    kind: ErrorKind
    message: str
    status: int | None
    timestamp: datetime
    context: dict[str, Any] = field(default_factory=dict)


ErrorSubscriber = Callable[[ErrorEvent], Any]


class Navigator(Protocol):
    def redirect(self, target: str, *, remember_current: bool = False) -> None: ...


def message_for(event: ErrorEvent, *, online: bool = True) -> str:
    """Compute the user-facing message for an event.

    Args:
        event: Reported error event.
        online: Whether backend connectivity is currently available.

    Returns:
        Human-readable message for notifications and history.
    """
    if not online:
        return OFFLINE_MESSAGE

    if event.kind is ErrorKind.API:
        if event.status in API_STATUS_MESSAGES:
            return API_STATUS_MESSAGES[event.status]
        return f"Server error: {event.status or 'Unknown'}"

    if event.kind in KIND_MESSAGES:
        return KIND_MESSAGES[event.kind]

    return event.message or MESSAGE_DEFAULTS.get(event.kind, UNEXPECTED_MESSAGE)


class ErrorHub:
    """Single authority for reporting, notifying, and reacting to failures.

    One instance is created per application and handed to every component
    that reports errors. Reports closer together than ``debounce_seconds``,
    or arriving while another report is being handled, are dropped.
    """

    def __init__(
        self,
        notifications: NotificationCenter,
        navigator: Navigator | None = None,
        *,
        debounce_seconds: float = 0.1,
        history_size: int = 100,
        login_path: str = "/login",
        unauthorized_path: str = "/unauthorized",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if history_size < 1:
            raise ValueError("history_size must be at least 1")

        self.notifications = notifications
        self.navigator = navigator
        self.debounce_seconds = debounce_seconds
        self.login_path = login_path
        self.unauthorized_path = unauthorized_path
        self._clock = clock
        self._history: deque[ErrorRecord] = deque(maxlen=history_size)
        self._subscribers: set[ErrorSubscriber] = set()
        self._handling = False
        self._last_accepted_at: float | None = None
        self._online = True

    @property
    def online(self) -> bool:
        return self._online

    def set_online(self, online: bool) -> None:
        self._online = online

    @property
    def history(self) -> list[ErrorRecord]:
        """Recent records, most recent first."""
        return list(self._history)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: ErrorSubscriber) -> Callable[[], None]:
        """Register a callback for every accepted report.

        Returns:
            A callable that removes exactly this callback.
        """
        self._subscribers.add(callback)

        def unsubscribe() -> None:
            self._subscribers.discard(callback)

        return unsubscribe

    def unsubscribe(self, callback: ErrorSubscriber) -> None:
        self._subscribers.discard(callback)

    def report(self, event: ErrorEvent) -> bool:
        """Handle one error event.

        Never raises.

        Returns:
            ``True`` when the report was accepted, ``False`` when debounced.
        """
        now = self._clock()
        if self._handling or (
            self._last_accepted_at is not None
            and now - self._last_accepted_at < self.debounce_seconds
        ):
            logger.bind(error_kind=event.kind.value).debug("Dropped burst error report")
            return False

        self._handling = True
        self._last_accepted_at = now
        try:
            message = message_for(event, online=self._online)
            if not self.notifications.is_active(message):
                self.notifications.show(message, event.kind.value)

            self._record(event, message)
            self._dispatch(event)
            self.navigate_for(event)
            increment_errors_reported(event.kind.value)
        except Exception:
            logger.exception("Error hub failed while handling a report")
        finally:
            self._handling = False

        return True

    def close(self) -> None:
        """Drop subscribers, history, and displayed notifications."""
        self._subscribers.clear()
        self._history.clear()
        self.notifications.clear()
        self._last_accepted_at = None

    def _record(self, event: ErrorEvent, message: str) -> None:
        context: dict[str, Any] = {
            key: value
            for key, value in (
                ("endpoint", event.endpoint),
                ("duration_ms", event.duration_ms),
                ("detail", event.detail),
            )
            if value is not None
        }
        navigation = current_navigation()
        if navigation is not None:
            context["path"] = navigation.current_path

        record = ErrorRecord(
            kind=event.kind,
            message=message,
            status=event.status,
            timestamp=datetime.now(timezone.utc),
            context=context,
        )
        self._history.appendleft(record)

        log = logger.bind(error_kind=event.kind.value, status=event.status, **context)
        if event.kind in (ErrorKind.SYSTEM, ErrorKind.DATABASE):
            log.error(message)
        else:
            log.warning(message)

    def _dispatch(self, event: ErrorEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Error subscriber raised")

    def navigate_for(self, event: ErrorEvent) -> None:
        """Run the corrective navigation tied to the event's kind."""
        if self.navigator is None:
            return

        try:
            if event.kind is ErrorKind.AUTH or (
                event.kind is ErrorKind.API and event.status == 401
            ):
                self.navigator.redirect(self.login_path, remember_current=True)
            elif event.kind is ErrorKind.PERMISSION:
                self.navigator.redirect(self.unauthorized_path)
        except Exception:
            logger.exception("Corrective navigation failed")


__all__ = [
    "API_STATUS_MESSAGES",
    "ErrorEvent",
    "ErrorHub",
    "ErrorKind",
    "ErrorRecord",
    "ErrorSubscriber",
    "Navigator",
    "OFFLINE_MESSAGE",
    "message_for",
]
