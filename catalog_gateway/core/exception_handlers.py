"""Global exception handlers for consistent error responses.

Design:
- ValidationAppError → 400 with the list of violated constraints
- NotFoundAppError → 404
- RateLimitAppError → 429 with Retry-After / X-RateLimit-* headers
- UpstreamAppError is normally absorbed by the catalog service; if one ever
  escapes it is reported like any unexpected error
- Unexpected Exception → generic 500 (safety net)

Bodies are flat: ``{"code", "message", "request_id"[, "details"]}``.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from catalog_gateway.core.errors import (
    AppError,
    NotFoundAppError,
    RateLimitAppError,
    ValidationAppError,
)
from catalog_gateway.core.logging import get_request_id

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str | None:
    # The 500 fallback runs outside the request-id middleware
    return getattr(request.state, "request_id", None) or get_request_id()


def _status_for(exc: AppError) -> int:
    if isinstance(exc, ValidationAppError):
        return 400
    if isinstance(exc, NotFoundAppError):
        return 404
    if isinstance(exc, RateLimitAppError):
        return 429
    return 500


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error as JSON with its HTTP status.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with status code, body and any headers the error carries.
    """
    status_code = _status_for(exc)

    log = logger.error if status_code >= 500 else logger.info
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "request_path": request.url.path,
        },
    )

    content: dict = {
        "code": exc.code,
        "message": exc.message if status_code < 500 else "An unexpected error occurred. Please try again later.",
        "request_id": _request_id(request),
    }

    # Only validation failures expose their details to the client
    if isinstance(exc, ValidationAppError) and exc.details:
        content["details"] = exc.details.get("violations", [])

    return JSONResponse(status_code=status_code, content=content, headers=exc.headers)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs the failure and returns a generic message; no stack traces leak to
    the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "code": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "request_id": _request_id(request),
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
