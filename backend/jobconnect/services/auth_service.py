"""Registration, sign-in and token authentication."""

from __future__ import annotations

from loguru import logger

from jobconnect.clients.identity import IdentityClient, IdentitySession
from jobconnect.core.exceptions import AuthenticationError, FormValidationError
from jobconnect.models.user import SELF_SERVICE_USER_TYPES, User
from jobconnect.repositories.user import UserRepository
from jobconnect.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from jobconnect.schemas.user import UserResponse
from jobconnect.services.common import repository_errors

MIN_PASSWORD_LENGTH = 6


def validate_registration(payload: RegisterRequest) -> None:
    """Check the registration form.

    Raises:
        FormValidationError: With one message per offending field.
    """
    errors: dict[str, str] = {}
    required = (
        ("firstName", payload.first_name, "First name"),
        ("lastName", payload.last_name, "Last name"),
        ("email", payload.email, "Email"),
        ("password", payload.password, "Password"),
        ("confirmPassword", payload.confirm_password, "Password confirmation"),
    )
    for wire_name, value, label in required:
        if not value.strip():
            errors[wire_name] = f"{label} is required"

    if "password" not in errors and len(payload.password) < MIN_PASSWORD_LENGTH:
        errors["password"] = "Password must be at least 6 characters"
    if (
        "confirmPassword" not in errors
        and "password" not in errors
        and payload.password != payload.confirm_password
    ):
        errors["confirmPassword"] = "Passwords do not match"
    if payload.user_type not in SELF_SERVICE_USER_TYPES:
        errors["userType"] = "Account type must be jobseeker or employer"

    if errors:
        raise FormValidationError(errors)


class AuthService:
    """Bridge between identity-provider accounts and stored profiles."""

    def __init__(self, identity: IdentityClient, users: UserRepository):
        self.identity = identity
        self.users = users

    async def register(self, payload: RegisterRequest) -> AuthResponse:
        """Create an account and its profile.

        Raises:
            FormValidationError: If the form is incomplete or inconsistent.
            IdentityProviderError: If the provider rejects the sign-up.
            DatabaseError: If the profile cannot be stored.
        """
        log = logger.bind(
            service=self.__class__.__name__,
            operation="register",
            user_type=payload.user_type,
        )
        validate_registration(payload)
        log.info("Registering account")

        session = await self.identity.sign_up(payload.email.strip(), payload.password)
        with repository_errors(log, "Failed to create user profile."):
            user = await self.users.create(
                {
                    "uid": session.uid,
                    "first_name": payload.first_name.strip(),
                    "last_name": payload.last_name.strip(),
                    "email": session.email,
                    "phone": payload.phone,
                    "user_type": payload.user_type,
                    "is_admin": False,
                }
            )

        log.bind(uid=user.uid).info("Registered account")
        return self._auth_response(session, user)

    async def login(self, payload: LoginRequest) -> AuthResponse:
        """Sign in and load the caller's profile.

        Raises:
            AuthenticationError: For bad credentials or a missing profile.
        """
        log = logger.bind(service=self.__class__.__name__, operation="login")

        session = await self.identity.sign_in(payload.email.strip(), payload.password)
        with repository_errors(log, "Failed to load user profile."):
            user = await self.users.get_by_uid(session.uid)
        if user is None:
            log.bind(uid=session.uid).warning("Signed-in account has no profile")
            raise AuthenticationError("User profile not found.")

        log.bind(uid=user.uid).info("Signed in")
        return self._auth_response(session, user)

    async def authenticate(self, id_token: str) -> User:
        """Resolve a bearer token to its stored profile.

        Raises:
            AuthenticationError: If the token is invalid or the profile is missing.
        """
        log = logger.bind(service=self.__class__.__name__, operation="authenticate")

        account = await self.identity.lookup(id_token)
        with repository_errors(log, "Failed to load user profile."):
            user = await self.users.get_by_uid(account.uid)
        if user is None:
            raise AuthenticationError("User profile not found.")
        return user

    @staticmethod
    def _auth_response(session: IdentitySession, user: User) -> AuthResponse:
        return AuthResponse(
            id_token=session.id_token,
            refresh_token=session.refresh_token,
            expires_in=session.expires_in,
            user=UserResponse.model_validate(user),
        )
