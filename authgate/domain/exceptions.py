# authgate/domain/exceptions.py

"""
Custom exceptions for the application.

Every exception carries the HTTP status, the OAuth2 error code
(``internal_code``) and a human readable ``error_description``, so the
request pipeline and the route handlers can render the same error body:

    {"error": "<code>", "error_description": "<text>"}
"""

from fastapi import HTTPException, status
from typing import Any, Dict, List, Optional

INVALID_GRANT = "invalid_grant"
INVALID_TOKEN = "invalid_token"
INVALID_REQUEST = "invalid_request"
ACCESS_DENIED = "access_denied"
RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
SERVER_ERROR = "server_error"


class AuthGateException(HTTPException):
    """
    Base exception for all AuthGate errors.
    Extends FastAPI's HTTPException so route handlers can simply raise it.
    """

    def __init__(
            self,
            status_code: int,
            internal_code: str,
            description: str,
            headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=description, headers=headers)
        self.internal_code = internal_code
        self.description = description

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.internal_code, "error_description": self.description}

    def __str__(self) -> str:
        return f"{self.internal_code}: {self.description}"


# ── Credential errors ────────────────────────────────────────────────────────

class InvalidCredentialsException(AuthGateException):
    """Bad username or password."""

    def __init__(self, description: str = "Invalid username or password"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, INVALID_GRANT, description)


class UserNotFoundException(AuthGateException):
    """Unknown user. Shares the bad-credentials message unless told otherwise."""

    def __init__(self, description: str = "Invalid username or password"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, INVALID_GRANT, description)


class UserDisabledException(AuthGateException):
    def __init__(self, description: str = "User account is disabled"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, INVALID_GRANT, description)


class InvalidGrantException(AuthGateException):
    """The refresh grant cannot be honored."""

    def __init__(self, description: str = "Invalid refresh token"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, INVALID_GRANT, description)


# ── Token errors ─────────────────────────────────────────────────────────────

class InvalidTokenException(AuthGateException):
    """Base class for every token validation failure."""

    def __init__(
            self,
            description: str = "Invalid token",
            status_code: int = status.HTTP_401_UNAUTHORIZED,
    ):
        super().__init__(status_code, INVALID_TOKEN, description)


class TokenMalformedException(InvalidTokenException):
    def __init__(self, description: str = "Malformed token"):
        super().__init__(description)


class TokenSignatureInvalidException(InvalidTokenException):
    def __init__(self, description: str = "Invalid token signature"):
        super().__init__(description)


class TokenExpiredException(InvalidTokenException):
    def __init__(self, description: str = "Token has expired, please re-login"):
        super().__init__(description)


class TokenRevokedException(InvalidTokenException):
    """The token id is on the blacklist (logout or refresh rotation)."""

    def __init__(self, description: str = "Token has been invalidated, please re-login"):
        super().__init__(description, status_code=status.HTTP_403_FORBIDDEN)


class TokenStatusUnavailableException(InvalidTokenException):
    """The revocation store could not be consulted; the token is not trusted."""

    def __init__(self, description: str = "Token status could not be verified"):
        super().__init__(description)


# ── Request pipeline errors ──────────────────────────────────────────────────

class MissingCredentialException(AuthGateException):
    def __init__(self, description: str = "Missing credential: a Bearer token is required"):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            INVALID_REQUEST,
            description,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenPathException(AuthGateException):
    """Path that is never served, whatever the credentials."""

    def __init__(self, description: str = "Access to this resource is forbidden"):
        super().__init__(status.HTTP_403_FORBIDDEN, ACCESS_DENIED, description)


class AccessDeniedException(AuthGateException):
    def __init__(self, description: str = "Access denied", authority: Optional[str] = None):
        authority_info = f" (required authority: {authority})" if authority else ""
        super().__init__(status.HTTP_403_FORBIDDEN, ACCESS_DENIED, f"{description}{authority_info}")


class RateLimitExceededException(AuthGateException):
    def __init__(self, subject: str, limit: int, reset_seconds: int, headers: Optional[Dict[str, str]] = None):
        self.subject = subject
        self.limit = limit
        self.reset_seconds = reset_seconds
        response_headers = dict(headers or {})
        response_headers["Retry-After"] = str(reset_seconds)
        super().__init__(
            status.HTTP_429_TOO_MANY_REQUESTS,
            RATE_LIMIT_EXCEEDED,
            f"Too many requests, limit is {limit} per {reset_seconds} seconds",
            headers=response_headers,
        )


class RequestValidationException(AuthGateException):
    """Aggregated field validation messages."""

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            INVALID_REQUEST,
            ", ".join(self.messages) or "Invalid request",
        )


class DatabaseOperationException(AuthGateException):
    """Database operation failed. The original error stays server side."""

    def __init__(self, description: str = "Database operation failed",
                 original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR, description)
