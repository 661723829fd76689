"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator, cast

from loguru import logger
from prometheus_client import REGISTRY, Counter, Histogram

_METRICS_CACHE: dict[str, Counter | Histogram] = globals().get("_METRICS_CACHE", {})


def _get_or_create(
    metric_cls: type[Counter] | type[Histogram],
    name: str,
    documentation: str,
    labelnames: tuple[str, ...],
) -> Counter | Histogram:
    """Return an existing collector or register a new one.

    Re-importing this module (for example under test reloaders) must not
    register the same collector name twice.

    Args:
        metric_cls: ``Counter`` or ``Histogram``.
        name: Metric name.
        documentation: Metric help text.
        labelnames: Ordered metric label names.

    Returns:
        The registered collector.
    """
    cached = _METRICS_CACHE.get(name)
    if cached is not None:
        return cached

    try:
        metric = metric_cls(name=name, documentation=documentation, labelnames=labelnames)
    except ValueError as exc:
        existing = getattr(REGISTRY, "_names_to_collectors", {}).get(name)
        if existing is None:
            raise exc
        metric = existing
        logger.debug("Reused existing collector", metric=name)

    _METRICS_CACHE[name] = metric
    return metric


jobs_created_total = cast(
    Counter,
    _get_or_create(
        Counter,
        name="jobs_created_total",
        documentation="Total number of job postings created, labeled by category.",
        labelnames=("category",),
    ),
)

errors_reported_total = cast(
    Counter,
    _get_or_create(
        Counter,
        name="errors_reported_total",
        documentation="Error reports accepted by the error hub, labeled by kind.",
        labelnames=("kind",),
    ),
)

db_query_duration_seconds = cast(
    Histogram,
    _get_or_create(
        Histogram,
        name="db_query_duration_seconds",
        documentation="Database query duration in seconds, labeled by query type.",
        labelnames=("query_type",),
    ),
)


def increment_jobs_created(category: str) -> None:
    """Increment job creation counter for a category.

    Raises:
        ValueError: If the category label is empty.
    """
    if not category:
        raise ValueError("category label must be a non-empty string.")

    jobs_created_total.labels(category=category).inc()


def increment_errors_reported(kind: str) -> None:
    """Increment the accepted error report counter for one kind."""
    if not kind:
        raise ValueError("kind label must be a non-empty string.")

    errors_reported_total.labels(kind=kind).inc()


def observe_db_query_duration(query_type: str, duration_seconds: float) -> None:
    """Observe one database query duration value.

    Args:
        query_type: Query category label (example: "insert", "select").
        duration_seconds: Duration in seconds.

    Raises:
        ValueError: If query type is empty or duration is negative.
    """
    if not query_type:
        raise ValueError("query_type label must be a non-empty string.")
    if duration_seconds < 0:
        raise ValueError("duration_seconds cannot be negative.")

    db_query_duration_seconds.labels(query_type=query_type).observe(duration_seconds)


@contextmanager
def db_query_timer(query_type: str) -> Iterator[None]:
    """Context manager to track DB query duration.

    Args:
        query_type: Query category label (example: "insert", "select").

    Yields:
        None.
    """
    started_at = time.perf_counter()
    try:
        yield
    finally:
        duration_seconds = time.perf_counter() - started_at
        try:
            observe_db_query_duration(
                query_type=query_type,
                duration_seconds=duration_seconds,
            )
        except ValueError as exc:
            logger.warning(
                "Skipped db query duration metric",
                query_type=query_type,
                duration_seconds=duration_seconds,
                error=str(exc),
            )


__all__ = [
    "db_query_duration_seconds",
    "db_query_timer",
    "errors_reported_total",
    "increment_errors_reported",
    "increment_jobs_created",
    "jobs_created_total",
    "observe_db_query_duration",
]
