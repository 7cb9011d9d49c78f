"""Rate limiting dependency for FastAPI routes.

Wires the limiter stored on ``app.state`` into the HTTP layer as a middleware,
so every request is counted before routing, unknown paths included. Clients
are identified by source address.

Usage:
    app.middleware("http")(rate_limit_middleware)
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request, Response

from catalog_gateway.adapters.rate_limit.base import AbstractRateLimiter
from catalog_gateway.core.config import Settings
from catalog_gateway.core.errors import RateLimitAppError
from catalog_gateway.core.exception_handlers import app_error_handler

logger = logging.getLogger(__name__)


def build_rate_limit_key(request: Request) -> str:
    """Build the limiter key for the current request.

    Returns:
        str: Namespaced limiter key (``ip:<client host>``).
    """

    client_host = request.client.host if request.client else "unknown"
    return f"ip:{client_host}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


async def enforce_rate_limit(request: Request) -> None:
    """Check the client's budget for the current request.

    Consumes one unit from the client's budget when limiting is enabled.

    Raises:
        RateLimitAppError: When the client exceeded its budget for the window.
    """

    settings: Settings = request.app.state.settings
    if not settings.app.rate_limit_enabled:
        return

    limiter: AbstractRateLimiter = request.app.state.rate_limiter
    key = build_rate_limit_key(request)

    result = limiter.consume(key)
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={"key_hash": _hash_limiter_key(key), "remaining": result.remaining},
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": _hash_limiter_key(key),
            "limit": result.limit,
            "window_s": settings.app.rate_limit_window_seconds,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] = {}
    if settings.app.rate_limit_include_headers:
        headers["Retry-After"] = str(retry_after)
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(result.reset_at)

    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message=settings.app.rate_limit_message,
        details={
            "retry_after": retry_after,
            "limit": result.limit,
            "remaining": result.remaining,
            "reset_at": result.reset_at,
        },
        headers=headers or None,
    )


async def rate_limit_middleware(request: Request, call_next) -> Response:
    """Reject over-budget requests before they reach routing.

    Exceptions raised from HTTP middleware bypass the app's exception
    handlers, so the 429 is rendered here with the shared error handler.
    """
    try:
        await enforce_rate_limit(request)
    except RateLimitAppError as exc:
        return await app_error_handler(request, exc)
    return await call_next(request)
