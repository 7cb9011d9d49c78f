"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypedDict


class FieldViolation(TypedDict):
    """A single violated constraint on an input or payload field."""

    field: str
    message: str
    type: str


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional; each error fills in what it knows.
    """

    violations: list[FieldViolation]
    url: str
    product_id: int
    http_status: int
    retry_after: int
    limit: int
    remaining: int
    reset_at: int
    hint: str
    context: dict[str, Any]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
        headers: Optional HTTP headers to attach when surfaced to a client.
    """

    code: str
    message: str
    details: ErrorDetails | None = None
    headers: dict[str, str] | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when client input fails validation."""


class NotFoundAppError(AppError):
    """Raised when no resource matches the request."""


class UpstreamAppError(AppError):
    """Raised when the remote catalog is unreachable or returns a bad payload.

    Never surfaced to clients; the catalog service degrades it to an empty
    or absent result.
    """


class RateLimitAppError(AppError):
    """Raised when a client exceeds its request budget."""
