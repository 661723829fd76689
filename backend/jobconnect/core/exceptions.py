"""Custom exception hierarchy for backend layers."""

from __future__ import annotations


class JobConnectError(Exception):
    """Base application exception."""


class RepositoryError(JobConnectError):
    """Raised when repository data access fails."""


class DuplicateError(RepositoryError):
    """Raised when a duplicate record violates a unique constraint."""


class DuplicateApplicationError(DuplicateError):
    """Raised when a user already applied to the same job."""


class NotFoundError(JobConnectError):
    """Raised when a requested resource does not exist."""


class BusinessLogicError(JobConnectError):
    """Raised when a service layer business rule fails."""


class FormValidationError(BusinessLogicError):
    """Raised when submitted form fields fail validation.

    Attributes:
        errors: Mapping of wire field name to a human-readable message.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(self.errors.values()) or "Invalid form input.")


class IdentityProviderError(BusinessLogicError):
    """Raised when the identity provider rejects a request."""


class AuthenticationError(JobConnectError):
    """Raised when a request lacks a valid signed-in user."""


class PermissionDeniedError(JobConnectError):
    """Raised when the signed-in user may not perform an action."""


class DatabaseError(JobConnectError):
    """Raised by services when persistence fails underneath them."""


class ExternalServiceError(JobConnectError):
    """Raised when an external HTTP service is unreachable or times out."""


class UploadError(JobConnectError):
    """Raised when a file upload is rejected or fails.

    Attributes:
        status_code: HTTP status returned to the client.
    """

    def __init__(self, message: str, status_code: int = 413):
        self.status_code = status_code
        super().__init__(message)


__all__ = [
    "AuthenticationError",
    "BusinessLogicError",
    "DatabaseError",
    "DuplicateApplicationError",
    "DuplicateError",
    "ExternalServiceError",
    "FormValidationError",
    "IdentityProviderError",
    "JobConnectError",
    "NotFoundError",
    "PermissionDeniedError",
    "RepositoryError",
    "UploadError",
]
