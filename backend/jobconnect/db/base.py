"""Database metadata and model imports for migrations."""

from jobconnect.models import application, job, user  # noqa: F401
from jobconnect.models.base import Base

__all__ = ["Base"]
