"""Application-level exception types.

Domain errors raised by services and adapters. The exception handlers map
each subclass to an HTTP status code and a consistent JSON body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    pet_id: int
    table: str
    http_status: int
    retry_after: int
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input fails validation."""


class AuthenticationAppError(AppError):
    """Raised when admin credentials are missing or invalid."""


class NotFoundAppError(AppError):
    """Raised when a catalog record does not exist."""


class StoreAppError(AppError):
    """Raised when a call to the hosted database fails."""


class ConfigurationAppError(AppError):
    """Raised when the server lacks configuration required for an operation."""


@dataclass
class RateLimitedAppError(AppError):
    """Raised when a client exceeded its attempt budget.

    Attributes:
        retry_after: Whole seconds until the client may try again.
    """

    retry_after: int = 0
