"""ORM models package exports."""

from jobconnect.models.application import Application
from jobconnect.models.base import Base, BaseModel
from jobconnect.models.job import Job
from jobconnect.models.user import User

__all__ = ["Application", "Base", "BaseModel", "Job", "User"]
