"""Outbound HTTP interception feeding the error hub."""

from __future__ import annotations

import asyncio
from time import perf_counter

import httpx
from loguru import logger

from jobconnect.core.errors import ErrorEvent, ErrorHub, ErrorKind


class MonitoredTransport(httpx.AsyncBaseTransport):
    """Wrap a transport so failed outbound calls are reported to the hub.

    Calls exceeding ``timeout_seconds`` are cancelled and surface as
    ``httpx.TimeoutException``. Error responses are returned unchanged.
    Statuses listed in ``handled_statuses`` are left to the owning client,
    which turns them into domain errors of its own.
    """

    def __init__(
        self,
        hub: ErrorHub,
        inner: httpx.AsyncBaseTransport | None = None,
        timeout_seconds: float = 30.0,
        handled_statuses: frozenset[int] = frozenset(),
    ) -> None:
        self.hub = hub
        self.inner = inner if inner is not None else httpx.AsyncHTTPTransport()
        self.timeout_seconds = timeout_seconds
        self.handled_statuses = handled_statuses

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        endpoint = f"{request.method} {request.url.host}{request.url.path}"
        started_at = perf_counter()

        try:
            response = await asyncio.wait_for(
                self.inner.handle_async_request(request),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            self._report(ErrorKind.TIMEOUT, endpoint, started_at)
            raise httpx.TimeoutException(
                f"Request exceeded {self.timeout_seconds}s", request=request
            ) from exc
        except httpx.TimeoutException as exc:
            self._report(ErrorKind.TIMEOUT, endpoint, started_at, detail=str(exc))
            raise
        except httpx.TransportError as exc:
            self._report(ErrorKind.NETWORK, endpoint, started_at, detail=str(exc))
            raise

        if (
            response.status_code >= 400
            and response.status_code not in self.handled_statuses
        ):
            self._report(
                ErrorKind.API,
                endpoint,
                started_at,
                status=response.status_code,
            )
        return response

    async def aclose(self) -> None:
        await self.inner.aclose()

    def _report(
        self,
        kind: ErrorKind,
        endpoint: str,
        started_at: float,
        *,
        status: int | None = None,
        detail: str | None = None,
    ) -> None:
        duration_ms = round((perf_counter() - started_at) * 1000, 2)
        logger.bind(endpoint=endpoint, status=status, duration_ms=duration_ms).debug(
            "Outbound request failed"
        )
        self.hub.report(
            ErrorEvent(
                kind=kind,
                status=status,
                endpoint=endpoint,
                duration_ms=duration_ms,
                detail=detail,
            )
        )


def build_http_client(
    base_url: str,
    hub: ErrorHub,
    *,
    timeout_seconds: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
    handled_statuses: frozenset[int] = frozenset(),
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` whose traffic is monitored by the hub.

    Args:
        base_url: Base URL for every request made through the client.
        hub: Error hub receiving failures.
        timeout_seconds: Overall per-request deadline.
        transport: Inner transport; defaults to the real network transport.
        handled_statuses: Error statuses the caller translates itself and
            that must not be reported.

    Returns:
        Configured client. The caller owns it and must close it.
    """
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(timeout_seconds),
        transport=MonitoredTransport(
            hub,
            inner=transport,
            timeout_seconds=timeout_seconds,
            handled_statuses=handled_statuses,
        ),
    )


__all__ = ["MonitoredTransport", "build_http_client"]
