"""Alembic environment configuration for async migrations."""

from __future__ import annotations

import asyncio
from logging.config import fileConfig
from typing import Any

from alembic import context
from loguru import logger
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, async_engine_from_config

from jobconnect.core.config import settings
from jobconnect.db.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# `alembic -x db_url=...` targets another database than the configured one.
database_url = context.get_x_argument(as_dictionary=True).get(
    "db_url", settings.DATABASE_URL
)
config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))

target_metadata = Base.metadata


def _configure_options() -> dict[str, Any]:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "compare_server_default": True,
    }


def run_migrations_offline() -> None:
    """Emit migration SQL without connecting to the database.

    Raises:
        RuntimeError: If migration context configuration fails.
    """
    try:
        context.configure(
            url=config.get_main_option("sqlalchemy.url"),
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
            **_configure_options(),
        )

        with context.begin_transaction():
            context.run_migrations()

        logger.info("Alembic offline migrations completed")
    except Exception as exc:
        logger.bind(error=str(exc)).exception("Alembic offline migration failed")
        raise RuntimeError("Failed to run offline migrations") from exc


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, **_configure_options())

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations through an async engine.

    Raises:
        RuntimeError: If engine initialization or migration execution fails.
    """
    connectable: AsyncEngine | None = None
    try:
        connectable = async_engine_from_config(
            config.get_section(config.config_ini_section, {}),
            prefix="sqlalchemy.",
            poolclass=pool.NullPool,
        )

        async with connectable.connect() as connection:
            await connection.run_sync(do_run_migrations)

        logger.info("Alembic online migrations completed")
    except Exception as exc:
        logger.bind(error=str(exc)).exception("Alembic online migration failed")
        raise RuntimeError("Failed to run online migrations") from exc
    finally:
        if connectable is not None:
            await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
