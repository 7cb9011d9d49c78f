"""HTTP middleware for request ID propagation and timing.

Every response carries the request's correlation id (taken from the incoming
header or freshly generated) and the total handling time in milliseconds.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from catalog_gateway.core.logging import clear_request_id, set_request_id


async def request_id_middleware(request: Request, call_next) -> Response:
    """Bind a request id to the context for the duration of the request.

    The header name comes from ``LogSettings.request_id_header`` on the
    settings the application was built with. The id is also kept on
    ``request.state`` for handlers that run after the context is cleared.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response with ``<request id header>`` and ``X-Request-Duration-ms`` set.
    """

    header_name = request.app.state.settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    request.state.request_id = request_id
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
