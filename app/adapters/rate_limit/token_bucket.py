"""In-memory token bucket rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around the bucket state.
- Non-blocking: a request either takes a token immediately or is rejected.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


class TokenBucketRateLimiter(AbstractRateLimiter):
    """Single token bucket with a fixed capacity and refill rate.

    The bucket starts full. Before every decision it is refilled by
    ``elapsed * refill_per_second`` tokens, capped at ``capacity``.
    """

    def __init__(
        self,
        *,
        capacity: int,
        refill_per_second: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the bucket.

        Args:
            capacity: Maximum number of tokens held by the bucket.
            refill_per_second: Tokens added per second.
            clock: Monotonic time source in seconds.

        Raises:
            ValueError: If capacity or refill_per_second are invalid.
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        if refill_per_second <= 0:
            raise ValueError("refill_per_second must be > 0")

        self._capacity = capacity
        self._rate = float(refill_per_second)
        self._clock = clock
        self._lock = threading.Lock()
        self._tokens = float(capacity)
        self._last_refill = clock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def refill_per_second(self) -> float:
        return self._rate

    def _refill_locked(self, now: float) -> None:
        elapsed = max(0.0, now - self._last_refill)
        self._tokens = min(float(self._capacity), self._tokens + elapsed * self._rate)
        self._last_refill = now

    def consume(self, *, cost: int = 1) -> RateLimitResult:
        """Take ``cost`` tokens if available.

        Args:
            cost: Tokens to take (default 1).

        Returns:
            RateLimitResult with the decision and the tokens left.

        Raises:
            ValueError: If cost is below 1 or above the bucket capacity.
        """
        if cost < 1:
            raise ValueError("cost must be >= 1")
        if cost > self._capacity:
            raise ValueError("cost must not exceed capacity")

        with self._lock:
            self._refill_locked(self._clock())

            if self._tokens >= cost:
                self._tokens -= cost
                return RateLimitResult(
                    allowed=True,
                    limit=self._capacity,
                    remaining=int(self._tokens),
                    retry_after_seconds=None,
                )

            missing = cost - self._tokens
            retry_after = max(1, int(math.ceil(missing / self._rate)))
            return RateLimitResult(
                allowed=False,
                limit=self._capacity,
                remaining=int(self._tokens),
                retry_after_seconds=retry_after,
            )
