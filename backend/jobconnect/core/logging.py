"""Centralized Loguru configuration for backend services."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from loguru import logger

from jobconnect.core.config import settings

LOG_DIR = Path("logs")
MAX_LOG_FILE_BYTES = 500 * 1024 * 1024

DEFAULT_EXTRA: dict[str, str] = {
    "request_id": "-",
    "method": "-",
    "path": "-",
    "status_code": "-",
    "error_kind": "-",
}

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> | "
    "req=<magenta>{extra[request_id]}</magenta> "
    "path=<cyan>{extra[path]}</cyan> "
    "kind=<yellow>{extra[error_kind]}</yellow> - "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} | "
    "request_id={extra[request_id]} method={extra[method]} "
    "path={extra[path]} status={extra[status_code]} "
    "kind={extra[error_kind]} - {message}"
)


def _daily_or_size_rotation(message: Any, file: Any) -> bool:
    """Rotate when date changes or file exceeds 500MB.

    Args:
        message: Loguru message object.
        file: Active file handle managed by Loguru.

    Returns:
        ``True`` when the sink should rotate.
    """
    record_time = message.record["time"]
    current_file_date = Path(file.name).stem.split("_")[-1]
    if record_time.strftime("%Y-%m-%d") != current_file_date:
        return True
    return file.tell() >= MAX_LOG_FILE_BYTES


def _is_error_report(record: Any) -> bool:
    """Select records emitted for error hub reports."""
    return record["extra"].get("error_kind", "-") != "-"


def setup_logging(log_level: str = "INFO", log_dir: Path = LOG_DIR) -> None:
    """Configure console, application, and error-report sinks.

    Args:
        log_level: Minimum level for application logs.
        log_dir: Directory receiving rotated log files.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.configure(extra=dict(DEFAULT_EXTRA))

    effective_level = "DEBUG" if settings.DEBUG else log_level.upper()

    logger.add(
        sys.stdout,
        level=effective_level,
        colorize=True,
        enqueue=True,
        backtrace=settings.DEBUG,
        diagnose=settings.DEBUG,
        format=CONSOLE_FORMAT,
    )

    logger.add(
        log_dir / "app_{time:YYYY-MM-DD}.log",
        level=effective_level,
        rotation=_daily_or_size_rotation,
        retention="30 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        format=FILE_FORMAT,
    )

    # Accepted hub reports only.
    logger.add(
        log_dir / "error_reports_{time:YYYY-MM-DD}.log",
        level="WARNING",
        filter=_is_error_report,
        rotation="100 MB",
        retention="90 days",
        compression="zip",
        enqueue=True,
        backtrace=True,
        diagnose=settings.DEBUG,
        format=FILE_FORMAT,
    )


__all__ = ["DEFAULT_EXTRA", "setup_logging"]
