"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for logs.

    Details are never sent to clients; the API only exposes ``message``.
    """

    hint: str
    post_id: str
    backend: str
    operation: str
    retry_after: float
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
    """Raised when input/config validation fails."""


class StorageAppError(AppError):
    """Raised when the post store cannot read or write."""


class RateLimitAppError(AppError):
    """Raised when the token bucket has no token for the request."""


class MethodNotAllowedAppError(AppError):
    """Raised for HTTP methods the posts endpoint does not support."""
