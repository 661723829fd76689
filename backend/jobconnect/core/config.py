"""Application configuration loaded from environment variables and secrets files."""

from pathlib import Path
from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """Typed settings for the backend application."""

    PROJECT_NAME: str = "JobConnect API"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="local", alias="ENV")
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # Database
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "jobconnect"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_PASSWORD_FILE: str = ""
    DATABASE_URL_OVERRIDE: str = Field(default="", alias="DATABASE_URL")
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_TIMEOUT: int = 30
    DB_CONNECT_RETRIES: int = 3
    DB_CONNECT_RETRY_DELAY: float = 1.0

    # Identity provider
    IDENTITY_BASE_URL: str = "https://identitytoolkit.googleapis.com/v1"
    IDENTITY_API_KEY: str = ""

    # Object store
    STORAGE_BASE_URL: str = "https://firebasestorage.googleapis.com/v0"
    STORAGE_BUCKET: str = "jobconnect.appspot.com"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # Error hub
    HTTP_TIMEOUT_SECONDS: float = 30.0
    ERROR_DEBOUNCE_MS: int = 100
    ERROR_HISTORY_SIZE: int = 100
    NOTIFICATION_TTL_SECONDS: float = 5.0
    LOGIN_PATH: str = "/login"
    UNAUTHORIZED_PATH: str = "/unauthorized"

    # Connectivity monitor
    CONNECTIVITY_CHECK_ENABLED: bool = True
    CONNECTIVITY_CHECK_INTERVAL_SECONDS: float = 15.0

    # CORS
    CORS_ORIGINS: List[str] = Field(default_factory=list)

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(
        cls, value: Union[str, List[str], tuple[str, ...], set[str], None]
    ) -> List[str]:
        """Normalize CORS origins from env variables.

        Args:
            value: Raw env value (None, list/tuple/set, or comma-separated string).

        Returns:
            List of CORS origins.

        Raises:
            ValueError: If the input cannot be parsed.
        """
        if value is None:
            return []
        if isinstance(value, str):
            if not value.strip():
                return []
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        if isinstance(value, (list, tuple, set)):
            return [str(origin).strip() for origin in value if str(origin).strip()]
        raise ValueError("CORS_ORIGINS must be a list or comma-separated string")

    @property
    def resolved_db_password(self) -> str:
        """Password from ``DB_PASSWORD_FILE`` when readable, else ``DB_PASSWORD``."""
        if not self.DB_PASSWORD_FILE:
            return self.DB_PASSWORD
        secret = Path(self.DB_PASSWORD_FILE)
        try:
            return secret.read_text(encoding="utf-8").rstrip()
        except OSError:
            return self.DB_PASSWORD

    @property
    def DATABASE_URL(self) -> str:
        """Async SQLAlchemy URL for the JobConnect database.

        ``DATABASE_URL`` in the environment wins over the ``DB_*`` parts.

        Raises:
            ValueError: If the configured URL is not a PostgreSQL URL.
        """
        override = self.DATABASE_URL_OVERRIDE.strip()
        if override:
            return as_asyncpg_url(override)

        return URL.create(
            "postgresql+asyncpg",
            username=self.DB_USER,
            password=self.resolved_db_password,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)

    @property
    def error_debounce_seconds(self) -> float:
        """Debounce window for the error hub, in seconds."""
        return max(self.ERROR_DEBOUNCE_MS, 0) / 1000


def as_asyncpg_url(database_url: str) -> str:
    """Rewrite any PostgreSQL URL to use the asyncpg driver."""
    url = make_url(database_url)
    if url.get_backend_name() not in {"postgres", "postgresql"}:
        raise ValueError(
            "DATABASE_URL must use postgres/postgresql scheme for async SQLAlchemy"
        )
    return url.set(drivername="postgresql+asyncpg").render_as_string(
        hide_password=False
    )


settings = Settings()
