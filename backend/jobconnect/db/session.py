"""Async SQLAlchemy engine and session management."""

import asyncio
from typing import AsyncGenerator

from loguru import logger
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from jobconnect.core.config import Settings, settings


def build_engine(config: Settings = settings) -> AsyncEngine:
    """Create the application engine from pool settings."""
    return create_async_engine(
        config.DATABASE_URL,
        echo=config.DB_ECHO,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=config.DB_POOL_RECYCLE,
        pool_timeout=config.DB_POOL_TIMEOUT,
    )


engine: AsyncEngine = build_engine()

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session, retrying when the first connection attempt fails.

    Yields:
        AsyncSession: Database session instance.

    Raises:
        OperationalError: If the database stays unreachable after all retries.
    """
    max_retries = settings.DB_CONNECT_RETRIES
    delay_seconds = settings.DB_CONNECT_RETRY_DELAY

    yielded = False
    for attempt in range(1, max_retries + 1):
        try:
            async with AsyncSessionLocal() as session:
                yielded = True
                yield session
                return
        except OperationalError as exc:
            # Failures raised by the consumer are not connection retries.
            if yielded:
                raise
            if attempt < max_retries:
                logger.bind(attempt=attempt, max_retries=max_retries).warning(
                    "Database connection failed; retrying", error=str(exc)
                )
                await asyncio.sleep(delay_seconds)
                continue

            logger.bind(max_retries=max_retries).error(
                "Database connection failed after retries", error=str(exc)
            )
            raise


async def dispose_engine() -> None:
    await engine.dispose()
    logger.info("Database engine disposed")


__all__ = ["AsyncSessionLocal", "build_engine", "dispose_engine", "engine", "get_session"]
