"""Per-request navigation instructions returned to the client."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from loguru import logger
from starlette.responses import Response

REDIRECT_HEADER = "X-Redirect-To"
CLIENT_PATH_HEADER = "X-Client-Path"
RETURN_PATH_COOKIE = "redirect_path"


@dataclass
class NavigationState:
    """Navigation outcome collected while one request is handled."""

    current_path: str
    redirect_to: str | None = None
    return_path: str | None = None


_navigation_state: ContextVar[NavigationState | None] = ContextVar(
    "navigation_state", default=None
)


@contextmanager
def navigation_scope(current_path: str) -> Iterator[NavigationState]:
    """Bind a fresh navigation state to the current request context.

    The state object is mutated in place, so handlers running in child
    tasks of the request share it with the middleware.
    """
    state = NavigationState(current_path=current_path)
    token = _navigation_state.set(state)
    try:
        yield state
    finally:
        _navigation_state.reset(token)


def current_navigation() -> NavigationState | None:
    return _navigation_state.get()


class RequestNavigator:
    """Record forced navigation on the active request."""

    def redirect(self, target: str, *, remember_current: bool = False) -> None:
        """Send the client to ``target`` once the current response is built.

        Args:
            target: Client route to navigate to.
            remember_current: Keep the current path so the client can return.
        """
        state = _navigation_state.get()
        if state is None:
            logger.debug("No active request; skipping redirect", target=target)
            return

        if remember_current:
            state.return_path = state.current_path
        state.redirect_to = target


def apply_navigation(response: Response, state: NavigationState) -> None:
    """Copy a recorded redirect onto the outgoing response."""
    if state.redirect_to is None:
        return

    response.headers[REDIRECT_HEADER] = state.redirect_to
    if state.return_path:
        response.set_cookie(
            RETURN_PATH_COOKIE,
            state.return_path,
            httponly=True,
            samesite="lax",
        )


__all__ = [
    "CLIENT_PATH_HEADER",
    "NavigationState",
    "REDIRECT_HEADER",
    "RETURN_PATH_COOKIE",
    "RequestNavigator",
    "apply_navigation",
    "current_navigation",
    "navigation_scope",
]
