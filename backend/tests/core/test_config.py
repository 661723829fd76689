"""Tests for settings parsing and database URL resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from jobconnect.core.config import Settings, as_asyncpg_url


def make_settings(**values: object) -> Settings:
    return Settings(_env_file=None, **values)


def test_database_url_built_from_parts() -> None:
    config = make_settings(
        DATABASE_URL="",
        DB_USER="app",
        DB_PASSWORD="p@ss",
        DB_PASSWORD_FILE="",
        DB_HOST="db",
        DB_PORT=6543,
        DB_NAME="jc",
    )

    assert config.DATABASE_URL == "postgresql+asyncpg://app:p%40ss@db:6543/jc"


def test_database_url_override_is_rewritten_to_asyncpg() -> None:
    config = make_settings(DATABASE_URL="postgres://u:pw@host/jobs")

    assert config.DATABASE_URL == "postgresql+asyncpg://u:pw@host/jobs"


def test_non_postgres_url_is_rejected() -> None:
    with pytest.raises(ValueError):
        as_asyncpg_url("mysql://u:pw@host/jobs")


def test_password_file_wins_over_env(tmp_path: Path) -> None:
    secret = tmp_path / "db_password"
    secret.write_text("from-file\n", encoding="utf-8")

    config = make_settings(DB_PASSWORD="from-env", DB_PASSWORD_FILE=str(secret))

    assert config.resolved_db_password == "from-file"


def test_missing_password_file_falls_back(tmp_path: Path) -> None:
    config = make_settings(
        DB_PASSWORD="from-env", DB_PASSWORD_FILE=str(tmp_path / "absent")
    )

    assert config.resolved_db_password == "from-env"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("https://a.test, https://b.test", ["https://a.test", "https://b.test"]),
        ("", []),
        (["*"], ["*"]),
    ],
)
def test_cors_origins_parsing(raw: object, expected: list[str]) -> None:
    assert make_settings(CORS_ORIGINS=raw).CORS_ORIGINS == expected


def test_debounce_window_in_seconds() -> None:
    assert make_settings(ERROR_DEBOUNCE_MS=250).error_debounce_seconds == 0.25
    assert make_settings(ERROR_DEBOUNCE_MS=-5).error_debounce_seconds == 0
