"""FastAPI application setup for the backend service."""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from loguru import logger

from jobconnect.api import api_router
from jobconnect.api.errors import close_error_hub, install_error_hub
from jobconnect.core.config import settings
from jobconnect.core.connectivity import ConnectivityMonitor
from jobconnect.core.health import HealthService
from jobconnect.core.logging import setup_logging
from jobconnect.core.navigation import (
    CLIENT_PATH_HEADER,
    REDIRECT_HEADER,
    apply_navigation,
    navigation_scope,
)
from jobconnect.db.session import dispose_engine

setup_logging(settings.LOG_LEVEL)


async def request_logging_middleware(request: Request, call_next: Any) -> Response:
    """Log inbound requests and attach forced navigation to the response.

    Args:
        request: Incoming HTTP request.
        call_next: FastAPI middleware continuation callable.

    Returns:
        Response produced by downstream middleware/route handlers.

    Raises:
        Exception: Re-raises downstream exceptions after logging context.
    """
    request_id = str(uuid4())
    request.state.request_id = request_id
    started_at = time.perf_counter()
    client_path = request.headers.get(CLIENT_PATH_HEADER) or request.url.path

    logger.info(
        "Request started",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    with navigation_scope(client_path) as navigation:
        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = round((time.perf_counter() - started_at) * 1000, 2)
            logger.error(
                "Request failed",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                duration_ms=duration_ms,
                error=str(exc),
            )
            raise
        apply_navigation(response, navigation)

    duration_ms = round((time.perf_counter() - started_at) * 1000, 2)
    response.headers["X-Request-ID"] = request_id
    logger.info(
        "Request completed",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the connectivity monitor while the app serves requests."""
    hub = install_error_hub(app)
    monitor: ConnectivityMonitor | None = None

    if settings.CONNECTIVITY_CHECK_ENABLED:
        monitor = ConnectivityMonitor(
            hub,
            app.state.notifications,
            probe=app.state.health_service.is_reachable,
            interval_seconds=settings.CONNECTIVITY_CHECK_INTERVAL_SECONDS,
        )
        app.state.connectivity_monitor = monitor
        monitor.start()

    try:
        yield
    finally:
        if monitor is not None:
            await monitor.stop()
        await close_error_hub(app)
        await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        lifespan=lifespan,
    )

    app.middleware("http")(request_logging_middleware)

    if settings.CORS_ORIGINS:
        allow_credentials = "*" not in settings.CORS_ORIGINS
        if not allow_credentials:
            logger.warning(
                "CORS_ORIGINS contains wildcard '*'; redirect cookies will not be sent"
            )

        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=allow_credentials,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", REDIRECT_HEADER],
        )

    app.state.health_service = HealthService()
    install_error_hub(app)

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    logger.info(
        "Application configured",
        environment=settings.ENVIRONMENT,
        api_prefix=settings.API_V1_PREFIX,
    )
    return app


app = create_app()
