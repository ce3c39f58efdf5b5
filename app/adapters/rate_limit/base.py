"""Rate limiter interfaces.

The API should depend on this abstraction (not the concrete implementation)
so the token bucket can be swapped for a shared backend later.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Bucket capacity.
        remaining: Whole tokens left after the decision.
        retry_after_seconds: Seconds until enough tokens are available when
            blocked, None when allowed.
    """

    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for process-wide rate limiters."""

    @abstractmethod
    def consume(self, *, cost: int = 1) -> RateLimitResult:
        """Try to take ``cost`` units of budget without waiting.

        Args:
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
