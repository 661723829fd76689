"""Unit tests for the notification center."""

from __future__ import annotations

from jobconnect.core.notifications import (
    DEFAULT_NOTIFICATION_COLOR,
    NOTIFICATION_COLORS,
    NotificationCenter,
    color_for,
)


class StepClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_show_uses_kind_color() -> None:
    center = NotificationCenter(ttl_seconds=5.0, clock=StepClock())

    notification = center.show("Connection restored", "success")

    assert notification.color == NOTIFICATION_COLORS["success"]
    assert center.is_active("Connection restored")


def test_unknown_kind_gets_default_color() -> None:
    assert color_for("system") == DEFAULT_NOTIFICATION_COLOR


def test_notification_expires_after_ttl() -> None:
    clock = StepClock()
    center = NotificationCenter(ttl_seconds=5.0, clock=clock)
    center.show("Request timed out. Please try again", "timeout")

    clock.now = 4.9
    assert center.is_active("Request timed out. Please try again")

    clock.now = 5.0
    assert not center.is_active("Request timed out. Please try again")
    assert center.active() == []


def test_active_returns_oldest_first() -> None:
    clock = StepClock()
    center = NotificationCenter(clock=clock)
    center.show("first", "api")
    clock.now = 1.0
    center.show("second", "api")

    assert [item.message for item in center.active()] == ["first", "second"]


def test_dismiss_by_id() -> None:
    center = NotificationCenter(clock=StepClock())
    shown = center.show("File upload failed", "upload")

    assert center.dismiss(shown.id) is True
    assert center.dismiss(shown.id) is False
    assert not center.is_active("File upload failed")


def test_clear_removes_everything() -> None:
    center = NotificationCenter(clock=StepClock())
    center.show("a", "api")
    center.show("b", "network")

    center.clear()

    assert center.active() == []
