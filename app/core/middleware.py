"""HTTP middleware: request correlation and CORS headers.

``request_id_middleware``:
- Accepts the incoming request id header or generates a UUID
- Stores request_id in contextvars for access throughout the request lifecycle
- Injects request_id and total duration into response headers

``cors_headers_middleware`` sets the fixed CORS headers for ``/posts`` on every
response, error responses included. It is registered innermost and turns
unexpected exceptions into the generic 500 itself, so those responses still
pass back through both middlewares.

Usage:
    app.middleware("http")(cors_headers_middleware)
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from app.core.config import settings
from app.core.exception_handlers import general_exception_handler
from app.core.logging import clear_request_id, set_request_id

POSTS_CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _request_id_header(request: Request) -> str:
    app_settings = getattr(request.app.state, "settings", None) or settings
    return app_settings.log.request_id_header


async def request_id_middleware(request: Request, call_next) -> Response:
    """HTTP middleware for request ID generation and propagation.

    If the client provides the application's request id header, that value is
    used. Otherwise a new UUID is generated. The id is stored in contextvars
    for log correlation and echoed back in the response headers together with
    ``X-Request-Duration-ms``.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The response from the next handler with request_id and
            duration headers added.
    """

    header_name = _request_id_header(request)
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
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


async def cors_headers_middleware(request: Request, call_next) -> Response:
    """Attach the /posts CORS headers, whatever the outcome."""

    try:
        response: Response = await call_next(request)
    except Exception as exc:
        response = await general_exception_handler(request, exc)

    if request.url.path == "/posts":
        response.headers.update(POSTS_CORS_HEADERS)
    return response
