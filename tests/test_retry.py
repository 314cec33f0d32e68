"""
Tests for retry policies and the bounded retry loop.
"""

from unittest.mock import AsyncMock, patch

import pytest

from trellomcp.integrations.base import IntegrationError, RateLimitError
from trellomcp.resilience import (
    NO_RETRY,
    ConstantBackoff,
    ExponentialBackoff,
    RetryPolicy,
    retry_async,
)


def rate_limited(retry_after=None):
    return RateLimitError("Rate limit exceeded", "trello", status_code=429, retry_after=retry_after)


# =============================================================================
# Backoff Tests
# =============================================================================


class TestBackoff:
    def test_constant(self):
        backoff = ConstantBackoff(delay=1.0)

        assert [backoff.get_delay(n) for n in (1, 2, 5)] == [1.0, 1.0, 1.0]

    def test_exponential_without_jitter(self):
        backoff = ExponentialBackoff(base=0.5, multiplier=2.0, max_delay=3.0, jitter=False)

        assert [backoff.get_delay(n) for n in (1, 2, 3, 4)] == [0.5, 1.0, 2.0, 3.0]

    def test_exponential_jitter_stays_in_range(self):
        backoff = ExponentialBackoff(base=1.0, jitter=True, jitter_factor=0.25)

        for _ in range(20):
            assert 0.75 <= backoff.get_delay(1) <= 1.25


# =============================================================================
# RetryPolicy Tests
# =============================================================================


class TestRetryPolicy:
    def test_no_retry_policy(self):
        assert NO_RETRY.should_retry(1, rate_limited()) is False

    def test_retries_matching_errors_until_cap(self):
        policy = RetryPolicy(max_attempts=3, retry_on=(RateLimitError,))

        assert policy.should_retry(1, rate_limited()) is True
        assert policy.should_retry(2, rate_limited()) is True
        assert policy.should_retry(3, rate_limited()) is False

    def test_ignores_other_errors(self):
        policy = RetryPolicy(max_attempts=3, retry_on=(RateLimitError,))

        assert policy.should_retry(1, IntegrationError("boom", "trello", status_code=500)) is False

    def test_delay_hint_wins(self):
        policy = RetryPolicy(
            max_attempts=3,
            backoff=ConstantBackoff(delay=1.0),
            delay_hint=lambda e: getattr(e, "retry_after", None),
        )

        assert policy.get_delay(1, rate_limited(retry_after=4.0)) == 4.0
        assert policy.get_delay(1, rate_limited()) == 1.0
        assert policy.get_delay(1) == 1.0


# =============================================================================
# retry_async Tests
# =============================================================================


class TestRetryAsync:
    @pytest.mark.asyncio
    async def test_success_first_try(self):
        operation = AsyncMock(return_value="ok")

        result = await retry_async(operation, RetryPolicy(max_attempts=3))

        assert result == "ok"
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        operation = AsyncMock(side_effect=[rate_limited(), rate_limited(), "ok"])
        policy = RetryPolicy(
            max_attempts=5,
            backoff=ConstantBackoff(delay=1.0),
            retry_on=(RateLimitError,),
        )

        with patch("trellomcp.resilience.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            result = await retry_async(operation, policy)

        assert result == "ok"
        assert operation.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 1.0]

    @pytest.mark.asyncio
    async def test_gives_up_with_last_error(self):
        last = rate_limited()
        operation = AsyncMock(side_effect=[rate_limited(), rate_limited(), last])
        policy = RetryPolicy(
            max_attempts=3,
            backoff=ConstantBackoff(delay=0),
            retry_on=(RateLimitError,),
        )

        with pytest.raises(RateLimitError) as exc_info:
            await retry_async(operation, policy)

        assert exc_info.value is last
        assert operation.await_count == 3

    @pytest.mark.asyncio
    async def test_non_retryable_raised_immediately(self):
        operation = AsyncMock(side_effect=IntegrationError("boom", "trello", status_code=500))
        policy = RetryPolicy(max_attempts=5, retry_on=(RateLimitError,))

        with pytest.raises(IntegrationError):
            await retry_async(operation, policy)

        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_sleeps_for_hinted_delay(self):
        operation = AsyncMock(side_effect=[rate_limited(retry_after=2.5), "ok"])
        policy = RetryPolicy(
            max_attempts=2,
            retry_on=(RateLimitError,),
            delay_hint=lambda e: e.retry_after,
        )

        with patch("trellomcp.resilience.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            await retry_async(operation, policy)

        sleep.assert_awaited_once_with(2.5)
