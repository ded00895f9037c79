"""Errors raised by the users service.

Every error is an ``AppError`` carrying a stable ``code`` that clients can
switch on, a human ``message``, structured ``details`` and a ``retryable``
hint. The HTTP layer picks the status code from the error's class.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(kw_only=True)
class AppError(Exception):
    """Base class for every error the service reports."""

    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    retryable: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form for logs and error responses."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
            "timestamp": self.timestamp.isoformat(),
        }


# Lookups


@dataclass(kw_only=True)
class NotFoundError(AppError):
    """A requested record does not exist."""

    code: str = "NOT_FOUND"
    retryable: bool = False


@dataclass(kw_only=True)
class UserNotFoundError(NotFoundError):
    """No user with the given id (or it was deleted)."""

    code: str = "USER_NOT_FOUND"


# Input


@dataclass(kw_only=True)
class ValidationError(AppError):
    """Input validation failed.

    Field-level problems are reported under ``details["fields"]`` as a
    mapping of field name to a list of messages.
    """

    code: str = "VALIDATION_ERROR"
    retryable: bool = False

    @property
    def fields(self) -> dict[str, list[str]]:
        return self.details.get("fields", {})


@dataclass(kw_only=True)
class InvalidIdentifierError(ValidationError):
    """Identifier is not a well-formed UUID."""

    code: str = "INVALID_IDENTIFIER"


# Uniqueness


@dataclass(kw_only=True)
class ConflictError(AppError):
    """Uniqueness constraint violated."""

    code: str = "CONFLICT"
    retryable: bool = False
    field_name: str | None = None


# Caller identity


@dataclass(kw_only=True)
class AuthenticationError(AppError):
    """No caller identity, or the identity could not be verified."""

    code: str = "AUTHENTICATION_ERROR"
    retryable: bool = False


@dataclass(kw_only=True)
class TokenExpiredError(AuthenticationError):
    """Bearer token is past its expiry."""

    code: str = "TOKEN_EXPIRED"
    retryable: bool = True


@dataclass(kw_only=True)
class TokenInvalidError(AuthenticationError):
    """Bearer token failed signature or claim checks."""

    code: str = "TOKEN_INVALID"


# Identity store


@dataclass(kw_only=True)
class StoreError(AppError):
    """The identity store failed; internals stay in the logs."""

    code: str = "STORE_ERROR"
    operation: str = ""
