"""Repository package exports."""

from jobconnect.repositories.application import ApplicationRepository
from jobconnect.repositories.base import BaseRepository
from jobconnect.repositories.job import JobRepository
from jobconnect.repositories.user import UserRepository

__all__ = [
    "ApplicationRepository",
    "BaseRepository",
    "JobRepository",
    "UserRepository",
]
