"""Rate limiting dependency for FastAPI routes.

This module wires the token bucket adapter into the HTTP layer.

Policy:
- One process-wide bucket, owned by the application (``app.state.rate_limiter``).
- Only the mutating endpoint (POST /posts) consumes tokens; listing, CORS
  preflight and the root route are never throttled.
- Taking a token never waits: the request either proceeds or gets HTTP 429.
"""

from __future__ import annotations

import logging

from fastapi import Request

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.token_bucket import TokenBucketRateLimiter
from app.core.config import AppSettings
from app.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."


def create_rate_limiter(app_settings: AppSettings) -> AbstractRateLimiter | None:
    """Build the process-wide limiter from startup configuration.

    Returns:
        Configured limiter, or None when rate limiting is disabled.
    """

    if not app_settings.rate_limit_enabled:
        logger.info("rate_limit.disabled")
        return None

    return TokenBucketRateLimiter(
        capacity=app_settings.rate_limit_capacity,
        refill_per_second=app_settings.rate_limit_refill_per_second,
    )


def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the token bucket.

    Consumes one token from the application's bucket. When the bucket is
    empty, raises RateLimitAppError, which the exception handlers map to 429.

    Args:
        request: FastAPI request (used to reach the owning application).

    Raises:
        RateLimitAppError: When no token is available.
    """

    limiter: AbstractRateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return

    result = limiter.consume()
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={"limit": result.limit, "remaining": result.remaining},
        )
        return

    retry_after = result.retry_after_seconds or 1
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "limit": result.limit,
            "remaining": result.remaining,
            "retry_after_s": retry_after,
            "client_host": request.client.host if request.client else "unknown",
        },
    )

    raise RateLimitAppError(
        code="rate_limited",
        message=RATE_LIMIT_MESSAGE,
        details={
            "retry_after": retry_after,
            "context": {"limit": result.limit, "remaining": result.remaining},
        },
    )
