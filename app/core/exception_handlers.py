"""Global exception handlers for consistent error responses.

Every failure is returned as ``{"error": "<message>"}`` with the matching
HTTP status:
- ValidationAppError → 400
- RequestValidationError (malformed or mistyped body) → 400
- MethodNotAllowedAppError / router 405 → 405
- RateLimitAppError → 429 (with Retry-After headers when enabled)
- StorageAppError → 500 with a generic message
- Unexpected Exception → 500 (safety net)

Internal messages and stack traces are logged, never returned.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import (
    AppError,
    MethodNotAllowedAppError,
    RateLimitAppError,
    StorageAppError,
    ValidationAppError,
)
from app.core.logging import get_request_id
from app.core.responses import JSONUTF8Response

logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "Invalid request body"
INTERNAL_ERROR_MESSAGE = "Internal server error"
METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed"

_STATUS_BY_ERROR: dict[type[AppError], int] = {
    ValidationAppError: 400,
    MethodNotAllowedAppError: 405,
    RateLimitAppError: 429,
    StorageAppError: 500,
}


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONUTF8Response:
    return JSONUTF8Response(
        status_code=status_code,
        content={"error": message},
        headers=headers,
    )


def _status_for(exc: AppError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


def _rate_limit_headers(request: Request, exc: RateLimitAppError) -> dict[str, str] | None:
    app_settings = getattr(request.app.state, "settings", None)
    if app_settings is None or not app_settings.app.rate_limit_include_headers:
        return None

    details = exc.details or {}
    context = details.get("context", {})
    headers = {"Retry-After": str(int(details.get("retry_after", 1)))}
    if "limit" in context:
        headers["X-RateLimit-Limit"] = str(context["limit"])
    if "remaining" in context:
        headers["X-RateLimit-Remaining"] = str(context["remaining"])
    return headers


async def app_error_handler(request: Request, exc: AppError) -> JSONUTF8Response:
    """Handle domain application errors.

    Server-side failures (5xx) hide the domain message behind a generic one;
    client errors return the domain message as is.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSON error response with the mapped status code.
    """
    status_code = _status_for(exc)
    server_fault = status_code >= 500

    log = logger.error if server_fault else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    headers = None
    if isinstance(exc, RateLimitAppError):
        headers = _rate_limit_headers(request, exc)

    message = INTERNAL_ERROR_MESSAGE if server_fault else exc.message
    return error_response(status_code, message, headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONUTF8Response:
    """Map body decoding and schema failures to 400."""
    logger.info(
        "request_body_rejected",
        extra={
            "error_count": len(exc.errors()),
            "error_types": sorted({str(err.get("type")) for err in exc.errors()}),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )
    return error_response(400, INVALID_BODY_MESSAGE)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONUTF8Response:
    """Render framework HTTP errors (404, 405, ...) in the API error shape."""
    message = METHOD_NOT_ALLOWED_MESSAGE if exc.status_code == 405 else str(exc.detail)
    return error_response(exc.status_code, message, getattr(exc, "headers", None))


async def general_exception_handler(request: Request, exc: Exception) -> JSONUTF8Response:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic message.
    """
    logger.error(
        "unhandled_exception",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )
    return error_response(500, INTERNAL_ERROR_MESSAGE)


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
