"""Unit tests for per-request navigation state."""

from __future__ import annotations

from starlette.responses import JSONResponse

from jobconnect.core.navigation import (
    REDIRECT_HEADER,
    RETURN_PATH_COOKIE,
    RequestNavigator,
    apply_navigation,
    current_navigation,
    navigation_scope,
)


def test_scope_binds_and_resets_state() -> None:
    assert current_navigation() is None

    with navigation_scope("/jobs") as state:
        assert current_navigation() is state
        assert state.current_path == "/jobs"

    assert current_navigation() is None


def test_redirect_without_scope_is_ignored() -> None:
    RequestNavigator().redirect("/login", remember_current=True)

    assert current_navigation() is None


def test_redirect_remembers_current_path() -> None:
    with navigation_scope("/profile") as state:
        RequestNavigator().redirect("/login", remember_current=True)

    assert state.redirect_to == "/login"
    assert state.return_path == "/profile"


def test_apply_navigation_sets_header_and_cookie() -> None:
    response = JSONResponse({"detail": "expired"}, status_code=401)
    with navigation_scope("/my-applications") as state:
        RequestNavigator().redirect("/login", remember_current=True)

    apply_navigation(response, state)

    assert response.headers[REDIRECT_HEADER] == "/login"
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f"{RETURN_PATH_COOKIE}=")
    assert "/my-applications" in set_cookie


def test_apply_navigation_without_redirect_leaves_response_untouched() -> None:
    response = JSONResponse({"ok": True})
    with navigation_scope("/") as state:
        pass

    apply_navigation(response, state)

    assert REDIRECT_HEADER not in response.headers
    assert "set-cookie" not in response.headers


def test_redirect_without_remembering_keeps_no_return_path() -> None:
    response = JSONResponse({"detail": "forbidden"}, status_code=403)
    with navigation_scope("/admin") as state:
        RequestNavigator().redirect("/unauthorized")

    apply_navigation(response, state)

    assert response.headers[REDIRECT_HEADER] == "/unauthorized"
    assert "set-cookie" not in response.headers
