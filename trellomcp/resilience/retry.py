"""
Retry Policies for upstream calls.

Trello answers 429 when a quota is exceeded even if the local limiter
believed there was room (other processes may share the credentials).
Those rejections are retried; every other failure is surfaced at once.

Provides:
- BackoffStrategy: Delay calculation between retries
- RetryPolicy: Which errors retry, how often, how long to wait
- retry_async: Bounded retry loop for a single async operation
"""

from __future__ import annotations

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Backoff Strategies
# =============================================================================


class BackoffStrategy(ABC):
    """Abstract base for backoff delay calculation."""

    @abstractmethod
    def get_delay(self, attempt: int) -> float:
        """
        Calculate delay before next retry attempt.

        Args:
            attempt: Current attempt number (1-indexed, first retry is attempt 1)

        Returns:
            Delay in seconds before next attempt
        """
        ...


@dataclass
class ConstantBackoff(BackoffStrategy):
    """
    Fixed delay between retries.

    Example:
        backoff = ConstantBackoff(delay=1.0)
        # Always waits 1 second between retries
    """

    delay: float = 1.0

    def get_delay(self, attempt: int) -> float:
        return self.delay


@dataclass
class ExponentialBackoff(BackoffStrategy):
    """
    Exponentially increasing delay between retries.

    delay = base * (multiplier ^ (attempt - 1))

    With optional jitter to prevent thundering herd.
    """

    base: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 60.0
    jitter: bool = True
    jitter_factor: float = 0.25  # +/- 25%

    def get_delay(self, attempt: int) -> float:
        delay = self.base * (self.multiplier ** (attempt - 1))
        delay = min(delay, self.max_delay)

        if self.jitter:
            jitter_range = delay * self.jitter_factor
            delay += random.uniform(-jitter_range, jitter_range)
            delay = max(0, delay)

        return delay


# =============================================================================
# Retry Policy
# =============================================================================


@dataclass
class RetryPolicy:
    """
    Configures retry behavior for an upstream call.

    Example:
        policy = RetryPolicy(
            max_attempts=11,
            backoff=ConstantBackoff(delay=1.0),
            retry_on=(RateLimitError,),
        )
    """

    max_attempts: int = 1  # 1 = no retry (single attempt)
    backoff: BackoffStrategy = field(default_factory=ConstantBackoff)
    retry_on: tuple[type[Exception], ...] = (Exception,)
    delay_hint: Callable[[Exception], float | None] | None = None

    def should_retry(self, attempt: int, error: Exception) -> bool:
        """
        Determine if retry should be attempted.

        Args:
            attempt: Current attempt number (1-indexed)
            error: Exception that caused failure
        """
        if attempt >= self.max_attempts:
            return False
        return isinstance(error, self.retry_on)

    def get_delay(self, attempt: int, error: Exception | None = None) -> float:
        """Delay before the next attempt; an error-provided hint wins."""
        if error is not None and self.delay_hint is not None:
            hinted = self.delay_hint(error)
            if hinted is not None:
                return hinted
        return self.backoff.get_delay(attempt)


NO_RETRY = RetryPolicy(max_attempts=1)


# =============================================================================
# Retry Executor
# =============================================================================


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    operation_name: str = "operation",
) -> T:
    """
    Execute an async operation, retrying as the policy allows.

    The last error is re-raised once the policy declines another attempt.

    Example:
        cards = await retry_async(
            lambda: client.get("/lists/abc/cards"),
            policy=RetryPolicy(max_attempts=3, retry_on=(RateLimitError,)),
            operation_name="GET /lists/abc/cards",
        )
    """
    attempt = 0

    while True:
        attempt += 1
        try:
            return await operation()
        except Exception as e:
            if not policy.should_retry(attempt, e):
                if attempt > 1:
                    logger.warning(
                        f"{operation_name}: giving up after {attempt} attempts: {e}"
                    )
                raise

            delay = policy.get_delay(attempt, e)
            logger.info(
                f"{operation_name}: attempt {attempt}/{policy.max_attempts} "
                f"failed with {type(e).__name__}, retrying in {delay:.2f}s"
            )
            await asyncio.sleep(delay)


__all__ = [
    "NO_RETRY",
    "BackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "RetryPolicy",
    "retry_async",
]
