"""Exception handlers and error hub wiring for the application."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobconnect.api.deps import get_request_id
from jobconnect.clients.identity import build_identity_client
from jobconnect.clients.storage import StorageClient
from jobconnect.clients.transport import build_http_client
from jobconnect.core.config import settings
from jobconnect.core.errors import ErrorEvent, ErrorHub, ErrorKind
from jobconnect.core.exceptions import (
    AuthenticationError,
    DatabaseError,
    ExternalServiceError,
    FormValidationError,
    PermissionDeniedError,
    UploadError,
)
from jobconnect.core.navigation import RequestNavigator
from jobconnect.core.notifications import NotificationCenter

UNEXPECTED_ERROR_DETAIL = "Something went wrong"
RELOAD_HINT = "Please reload the page and try again."


def _report(
    request: Request,
    kind: ErrorKind,
    *,
    status: int | None = None,
    message: str | None = None,
    detail: str | None = None,
) -> None:
    hub: ErrorHub | None = getattr(request.app.state, "error_hub", None)
    if hub is None:
        return
    event = ErrorEvent(
        kind=kind,
        message=message,
        status=status,
        endpoint=f"{request.method} {request.url.path}",
        detail=detail,
    )
    # Navigation belongs to this response even when the hub drops the report.
    if not hub.report(event):
        hub.navigate_for(event)


def _error_response(
    request: Request,
    status_code: int,
    kind: ErrorKind,
    detail: Any,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    request_id = get_request_id(request)
    logger.warning(
        "Request rejected",
        request_id=request_id,
        status_code=status_code,
        kind=kind.value,
        path=request.url.path,
        detail=detail,
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "kind": kind.value,
            "request_id": request_id,
            **extra,
        },
        headers=headers,
    )


def _kind_for_status(status_code: int) -> ErrorKind:
    if status_code == 401:
        return ErrorKind.AUTH
    if status_code == 403:
        return ErrorKind.PERMISSION
    return ErrorKind.API


async def handle_http_exception(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Return a clean JSON response for HTTP exceptions.

    Args:
        request: Active incoming request.
        exc: Raised HTTP exception.

    Returns:
        JSONResponse payload with error detail and request id.
    """
    detail = (
        exc.detail if isinstance(exc.detail, (str, list, dict)) else "Request failed"
    )
    kind = _kind_for_status(exc.status_code)
    _report(request, kind, status=exc.status_code)
    return _error_response(request, exc.status_code, kind, detail, headers=exc.headers)


async def handle_validation_exception(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Return standardized JSON for request validation errors."""
    sanitized_errors: list[dict[str, Any]] = []
    for error in exc.errors():
        copied_error = deepcopy(error)
        copied_error.pop("input", None)
        copied_error.pop("ctx", None)
        sanitized_errors.append(copied_error)

    _report(request, ErrorKind.VALIDATION)
    return _error_response(
        request,
        422,
        ErrorKind.VALIDATION,
        "Validation failed",
        errors=sanitized_errors,
    )


async def handle_form_validation_error(
    request: Request, exc: FormValidationError
) -> JSONResponse:
    _report(request, ErrorKind.FORM, detail=str(exc))
    return _error_response(request, 422, ErrorKind.FORM, str(exc), errors=exc.errors)


async def handle_authentication_error(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    _report(request, ErrorKind.AUTH, detail=str(exc))
    return _error_response(
        request,
        401,
        ErrorKind.AUTH,
        str(exc),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def handle_permission_error(
    request: Request, exc: PermissionDeniedError
) -> JSONResponse:
    _report(request, ErrorKind.PERMISSION, detail=str(exc))
    return _error_response(request, 403, ErrorKind.PERMISSION, str(exc))


async def handle_upload_error(request: Request, exc: UploadError) -> JSONResponse:
    _report(request, ErrorKind.UPLOAD, status=exc.status_code, message=str(exc))
    return _error_response(request, exc.status_code, ErrorKind.UPLOAD, str(exc))


async def handle_database_error(request: Request, exc: DatabaseError) -> JSONResponse:
    _report(request, ErrorKind.DATABASE, message=str(exc))
    return _error_response(request, 503, ErrorKind.DATABASE, str(exc))


async def handle_external_service_error(
    request: Request, exc: ExternalServiceError
) -> JSONResponse:
    _report(request, ErrorKind.NETWORK, detail=str(exc))
    return _error_response(request, 502, ErrorKind.NETWORK, str(exc))


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort boundary for defects.

    Args:
        request: Active incoming request.
        exc: Unhandled exception.

    Returns:
        JSONResponse telling the client to reload.
    """
    request_id = get_request_id(request)
    logger.exception(
        "Unhandled exception",
        request_id=request_id,
        path=request.url.path,
        error=str(exc),
    )
    _report(
        request,
        ErrorKind.SYSTEM,
        message=UNEXPECTED_ERROR_DETAIL,
        detail=f"{exc.__class__.__name__}: {exc}",
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": UNEXPECTED_ERROR_DETAIL,
            "hint": RELOAD_HINT,
            "kind": ErrorKind.SYSTEM.value,
            "request_id": request_id,
        },
    )


def install_error_hub(
    app: FastAPI,
    *,
    identity_transport: httpx.AsyncBaseTransport | None = None,
    storage_transport: httpx.AsyncBaseTransport | None = None,
) -> ErrorHub:
    """Create the application's error hub and everything reporting to it.

    Builds the notification center, the request navigator and the monitored
    outbound clients, stores them on ``app.state`` and registers the
    exception handlers. Calling it again on the same app returns the
    existing hub unchanged.

    Args:
        app: Application to wire.
        identity_transport: Inner transport for the identity client.
        storage_transport: Inner transport for the object store client.

    Returns:
        The application's hub.
    """
    existing: ErrorHub | None = getattr(app.state, "error_hub", None)
    if existing is not None:
        return existing

    notifications = NotificationCenter(ttl_seconds=settings.NOTIFICATION_TTL_SECONDS)
    navigator = RequestNavigator()
    hub = ErrorHub(
        notifications,
        navigator,
        debounce_seconds=settings.error_debounce_seconds,
        history_size=settings.ERROR_HISTORY_SIZE,
        login_path=settings.LOGIN_PATH,
        unauthorized_path=settings.UNAUTHORIZED_PATH,
    )

    app.state.notifications = notifications
    app.state.navigator = navigator
    app.state.error_hub = hub
    app.state.identity_client = build_identity_client(
        settings.IDENTITY_BASE_URL,
        hub,
        settings.IDENTITY_API_KEY,
        timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
        transport=identity_transport,
    )
    app.state.storage_client = StorageClient(
        build_http_client(
            settings.STORAGE_BASE_URL,
            hub,
            timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
            transport=storage_transport,
        ),
        settings.STORAGE_BUCKET,
    )

    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(FormValidationError, handle_form_validation_error)
    app.add_exception_handler(AuthenticationError, handle_authentication_error)
    app.add_exception_handler(PermissionDeniedError, handle_permission_error)
    app.add_exception_handler(UploadError, handle_upload_error)
    app.add_exception_handler(DatabaseError, handle_database_error)
    app.add_exception_handler(ExternalServiceError, handle_external_service_error)
    app.add_exception_handler(Exception, handle_unexpected_exception)

    logger.bind(
        debounce_seconds=hub.debounce_seconds,
        history_size=settings.ERROR_HISTORY_SIZE,
    ).info("Error hub installed")
    return hub


async def close_error_hub(app: FastAPI) -> None:
    """Close outbound clients and tear down the hub."""
    for name in ("identity_client", "storage_client"):
        client = getattr(app.state, name, None)
        if client is not None:
            await client.aclose()

    hub: ErrorHub | None = getattr(app.state, "error_hub", None)
    if hub is not None:
        hub.close()
    logger.info("Error hub closed")


__all__ = [
    "close_error_hub",
    "handle_http_exception",
    "handle_unexpected_exception",
    "handle_validation_exception",
    "install_error_hub",
]
