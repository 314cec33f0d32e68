"""
Rate Limiting for Trello API calls.

Trello enforces two independent request quotas:
- 300 requests per 10 seconds per API key
- 100 requests per 10 seconds per access token

Every outbound call must fit inside BOTH quotas, so the limiter holds one
bucket per identity and only grants a call when every bucket has a token.

Design:
- Fixed-window buckets: a bucket refills to full capacity once its window
  has elapsed (bursts up to capacity are allowed at each boundary)
- Cooperative waiting: callers suspend with asyncio.sleep, never block
- No fairness guarantee (first-ready-wins), but no starvation while the
  windows keep advancing
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Trello quotas (https://developer.atlassian.com/cloud/trello/guides/rest-api/rate-limits/)
TRELLO_KEY_LIMIT = 300
TRELLO_TOKEN_LIMIT = 100
TRELLO_WINDOW_SECONDS = 10.0


# =============================================================================
# Window Bucket State
# =============================================================================


@dataclass
class WindowBucket:
    """
    Fixed-window token bucket for a single identity.

    The bucket starts full. Once `window` seconds have passed since the
    last refill it is reset to `capacity`; there is no gradual leak.
    """

    identity: str
    capacity: int
    window: float
    available: int = -1
    last_refill: float = 0.0

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("Bucket capacity must be at least 1")
        if self.window <= 0:
            raise ValueError("Bucket window must be positive")
        if self.available < 0:
            self.available = self.capacity

    def refill(self, now: float) -> None:
        """Reset to full capacity if the current window has elapsed."""
        if now - self.last_refill >= self.window:
            self.available = self.capacity
            self.last_refill = now

    def has_token(self, now: float) -> bool:
        self.refill(now)
        return self.available > 0

    def try_consume(self, now: float) -> bool:
        """
        Attempt to take one token.

        Returns True if a token was consumed, False if the bucket is empty.
        """
        if not self.has_token(now):
            return False
        self.available -= 1
        return True

    def time_until_reset(self, now: float) -> float:
        """Seconds until the next window boundary."""
        return max(0.0, self.last_refill + self.window - now)


# =============================================================================
# Rate Limiter
# =============================================================================


@dataclass
class RateLimiter:
    """
    Multi-bucket rate limiter.

    A call proceeds only when every bucket has a token available; one token
    is then taken from each bucket.

    Example:
        limiter = create_trello_rate_limiter(api_key, token)

        await limiter.wait_for_available()
        # Request is now allowed under both quotas

    Args:
        buckets: One bucket per identity (credential key, access token, ...)
        clock: Monotonic time source, injectable for tests
    """

    buckets: list[WindowBucket]
    clock: Callable[[], float] = field(default=time.monotonic)
    max_sleep: float = 1.0

    def __post_init__(self) -> None:
        if not self.buckets:
            raise ValueError("RateLimiter needs at least one bucket")
        now = self.clock()
        for bucket in self.buckets:
            bucket.last_refill = now

    def try_acquire(self) -> bool:
        """
        Attempt to consume one token from every bucket.

        Non-blocking and all-or-nothing: no bucket is touched unless all of
        them have availability.
        """
        now = self.clock()
        if not all(bucket.has_token(now) for bucket in self.buckets):
            return False
        for bucket in self.buckets:
            bucket.try_consume(now)
        return True

    def time_until_available(self) -> float:
        """Seconds until every exhausted bucket reaches its next window boundary."""
        now = self.clock()
        waits = [
            bucket.time_until_reset(now)
            for bucket in self.buckets
            if not bucket.has_token(now)
        ]
        return max(waits, default=0.0)

    async def wait_for_available(self) -> None:
        """
        Suspend until a call is allowed under every quota, then consume it.

        Only ends early through cancellation of the awaiting task.
        """
        while not self.try_acquire():
            wait_time = self.time_until_available()
            logger.debug(f"[rate_limiter] Quota exhausted, waiting {wait_time:.2f}s")
            # Re-check at least once a second; another caller may win the race
            await asyncio.sleep(min(max(wait_time, 0.001), self.max_sleep))

    def snapshot(self) -> dict[str, int]:
        """Current available count per identity."""
        now = self.clock()
        for bucket in self.buckets:
            bucket.refill(now)
        return {bucket.identity: bucket.available for bucket in self.buckets}


def create_trello_rate_limiter(
    api_key: str,
    token: str,
    *,
    clock: Callable[[], float] = time.monotonic,
) -> RateLimiter:
    """
    Build the limiter for Trello's per-key and per-token quotas.

    Identities are truncated so credentials never appear in logs.
    """
    return RateLimiter(
        buckets=[
            WindowBucket(
                identity=f"key:{api_key[:4]}",
                capacity=TRELLO_KEY_LIMIT,
                window=TRELLO_WINDOW_SECONDS,
            ),
            WindowBucket(
                identity=f"token:{token[:4]}",
                capacity=TRELLO_TOKEN_LIMIT,
                window=TRELLO_WINDOW_SECONDS,
            ),
        ],
        clock=clock,
    )


__all__ = [
    "TRELLO_KEY_LIMIT",
    "TRELLO_TOKEN_LIMIT",
    "TRELLO_WINDOW_SECONDS",
    "RateLimiter",
    "WindowBucket",
    "create_trello_rate_limiter",
]
