"""
Resilience primitives for upstream calls.

- RateLimiter: Dual fixed-window quota gate (per key, per token)
- RetryPolicy: Bounded retry of quota rejections
"""

from .ratelimit import (
    TRELLO_KEY_LIMIT,
    TRELLO_TOKEN_LIMIT,
    TRELLO_WINDOW_SECONDS,
    RateLimiter,
    WindowBucket,
    create_trello_rate_limiter,
)
from .retry import (
    NO_RETRY,
    BackoffStrategy,
    ConstantBackoff,
    ExponentialBackoff,
    RetryPolicy,
    retry_async,
)

__all__ = [
    "NO_RETRY",
    "TRELLO_KEY_LIMIT",
    "TRELLO_TOKEN_LIMIT",
    "TRELLO_WINDOW_SECONDS",
    "BackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "RateLimiter",
    "RetryPolicy",
    "WindowBucket",
    "create_trello_rate_limiter",
    "retry_async",
]
