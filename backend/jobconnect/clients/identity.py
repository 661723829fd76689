"""REST client for the hosted identity provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from jobconnect.clients.transport import build_http_client
from jobconnect.core.errors import ErrorHub
from jobconnect.core.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    IdentityProviderError,
)

CREDENTIAL_ERROR_CODES = frozenset(
    {
        "INVALID_PASSWORD",
        "EMAIL_NOT_FOUND",
        "INVALID_LOGIN_CREDENTIALS",
        "INVALID_ID_TOKEN",
        "TOKEN_EXPIRED",
        "USER_DISABLED",
        "USER_NOT_FOUND",
        "CREDENTIAL_TOO_OLD_LOGIN_AGAIN",
    }
)

# The provider answers every rejected call with 400 and an error code.
REJECTION_STATUSES = frozenset({400})

PROVIDER_MESSAGES: dict[str, str] = {
    "EMAIL_EXISTS": "An account with this email already exists.",
    "INVALID_EMAIL": "The email address is invalid.",
    "WEAK_PASSWORD": "Password must be at least 6 characters.",
    "MISSING_PASSWORD": "Password is required.",
    "INVALID_PASSWORD": "Invalid email or password.",
    "EMAIL_NOT_FOUND": "Invalid email or password.",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
    "INVALID_ID_TOKEN": "Your session has expired. Please log in again.",
    "TOKEN_EXPIRED": "Your session has expired. Please log in again.",
    "USER_NOT_FOUND": "Your session has expired. Please log in again.",
    "USER_DISABLED": "This account has been disabled.",
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "Please log in again before changing credentials.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later.",
}


@dataclass(frozen=True)
class IdentitySession:
    """Tokens issued for a signed-in account."""

    uid: str
    email: str
    id_token: str
    refresh_token: str
    expires_in: int


@dataclass(frozen=True)
class IdentityUser:
    uid: str
    email: str


def provider_error_code(payload: Any) -> str:
    """Extract the provider error code from an error response body.

    Codes can carry a trailing explanation, e.g.
    ``"WEAK_PASSWORD : Password should be at least 6 characters"``.
    """
    if not isinstance(payload, dict):
        return "UNKNOWN"
    error = payload.get("error")
    if not isinstance(error, dict):
        return "UNKNOWN"
    message = str(error.get("message") or "UNKNOWN")
    return message.split(" : ", 1)[0].strip() or "UNKNOWN"


class IdentityClient:
    """Sign-up, sign-in, token lookup and credential updates."""

    def __init__(self, http_client: httpx.AsyncClient, api_key: str) -> None:
        self.http_client = http_client
        self.api_key = api_key

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def sign_up(self, email: str, password: str) -> IdentitySession:
        data = await self._post(
            "/accounts:signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._session_from(data, email)

    async def sign_in(self, email: str, password: str) -> IdentitySession:
        data = await self._post(
            "/accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._session_from(data, email)

    async def lookup(self, id_token: str) -> IdentityUser:
        """Resolve an ID token to the account it was issued for.

        Raises:
            AuthenticationError: If the token is invalid, expired or unknown.
        """
        data = await self._post("/accounts:lookup", {"idToken": id_token})
        users = data.get("users") or []
        if not users:
            raise AuthenticationError("Your session has expired. Please log in again.")
        account = users[0]
        return IdentityUser(uid=account["localId"], email=account.get("email", ""))

    async def update_email(self, id_token: str, email: str) -> IdentityUser:
        data = await self._post(
            "/accounts:update",
            {"idToken": id_token, "email": email, "returnSecureToken": True},
        )
        return IdentityUser(uid=data["localId"], email=data.get("email", email))

    async def update_password(self, id_token: str, password: str) -> None:
        await self._post(
            "/accounts:update",
            {"idToken": id_token, "password": password, "returnSecureToken": True},
        )

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST one identity call and translate provider failures.

        Raises:
            AuthenticationError: For credential and token errors.
            IdentityProviderError: For any other rejection.
            ExternalServiceError: When the provider cannot be reached.
        """
        log = logger.bind(client=self.__class__.__name__, endpoint=endpoint)

        try:
            response = await self.http_client.post(
                endpoint, params={"key": self.api_key}, json=payload
            )
        except httpx.TimeoutException as exc:
            log.bind(error=str(exc)).error("Identity provider timed out")
            raise ExternalServiceError("Identity provider timed out.") from exc
        except httpx.TransportError as exc:
            log.bind(error=str(exc)).error("Identity provider unreachable")
            raise ExternalServiceError("Identity provider is unreachable.") from exc

        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = None
        code = provider_error_code(body)
        message = PROVIDER_MESSAGES.get(code, f"Identity provider error: {code}")
        log.bind(status=response.status_code, code=code).warning(
            "Identity provider rejected request"
        )
        if code in CREDENTIAL_ERROR_CODES:
            raise AuthenticationError(message)
        raise IdentityProviderError(message)

    @staticmethod
    def _session_from(data: dict[str, Any], email: str) -> IdentitySession:
        return IdentitySession(
            uid=data["localId"],
            email=data.get("email", email),
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken", ""),
            expires_in=int(data.get("expiresIn", 3600)),
        )


def build_identity_client(
    base_url: str,
    hub: ErrorHub,
    api_key: str,
    *,
    timeout_seconds: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> IdentityClient:
    """Create an identity client whose rejections are reported as domain errors.

    Provider rejections are translated by ``IdentityClient`` into
    ``AuthenticationError`` or ``IdentityProviderError``, so the transport
    does not report them a second time as generic API failures.
    """
    http_client = build_http_client(
        base_url,
        hub,
        timeout_seconds=timeout_seconds,
        transport=transport,
        handled_statuses=REJECTION_STATUSES,
    )
    return IdentityClient(http_client, api_key)


__all__ = [
    "IdentityClient",
    "IdentitySession",
    "IdentityUser",
    "build_identity_client",
    "provider_error_code",
]
