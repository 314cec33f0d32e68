"""
Tests for the dual key/token rate limiter.
"""

import asyncio
import time

import pytest

from trellomcp.resilience import (
    TRELLO_KEY_LIMIT,
    TRELLO_TOKEN_LIMIT,
    TRELLO_WINDOW_SECONDS,
    RateLimiter,
    WindowBucket,
    create_trello_rate_limiter,
)


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


# =============================================================================
# WindowBucket Tests
# =============================================================================


class TestWindowBucket:
    """Tests for WindowBucket."""

    def test_starts_full(self):
        bucket = WindowBucket(identity="key:abcd", capacity=5, window=10.0)

        assert bucket.available == 5

    def test_consume_until_empty(self):
        bucket = WindowBucket(identity="key:abcd", capacity=2, window=10.0)

        assert bucket.try_consume(0.0) is True
        assert bucket.try_consume(0.0) is True
        assert bucket.try_consume(0.0) is False
        assert bucket.available == 0

    def test_refills_after_window(self):
        bucket = WindowBucket(identity="key:abcd", capacity=2, window=10.0)
        bucket.try_consume(0.0)
        bucket.try_consume(0.0)

        assert bucket.has_token(9.99) is False
        assert bucket.has_token(10.0) is True
        assert bucket.available == 2
        assert bucket.last_refill == 10.0

    def test_no_gradual_refill(self):
        bucket = WindowBucket(identity="key:abcd", capacity=4, window=10.0)
        for _ in range(4):
            bucket.try_consume(0.0)

        bucket.refill(5.0)

        assert bucket.available == 0

    def test_time_until_reset(self):
        bucket = WindowBucket(identity="key:abcd", capacity=1, window=10.0, last_refill=2.0)

        assert bucket.time_until_reset(5.0) == pytest.approx(7.0)
        assert bucket.time_until_reset(20.0) == 0.0

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            WindowBucket(identity="x", capacity=0, window=10.0)

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            WindowBucket(identity="x", capacity=1, window=0)


# =============================================================================
# RateLimiter Tests
# =============================================================================


class TestRateLimiter:
    """Tests for the multi-bucket limiter."""

    def test_requires_a_bucket(self):
        with pytest.raises(ValueError):
            RateLimiter(buckets=[])

    def test_try_acquire_consumes_from_every_bucket(self):
        clock = FakeClock()
        limiter = RateLimiter(
            buckets=[
                WindowBucket(identity="key", capacity=3, window=10.0),
                WindowBucket(identity="token", capacity=2, window=10.0),
            ],
            clock=clock,
        )

        assert limiter.try_acquire() is True
        assert limiter.snapshot() == {"key": 2, "token": 1}

    def test_all_or_nothing(self):
        clock = FakeClock()
        limiter = RateLimiter(
            buckets=[
                WindowBucket(identity="key", capacity=3, window=10.0),
                WindowBucket(identity="token", capacity=1, window=10.0),
            ],
            clock=clock,
        )

        assert limiter.try_acquire() is True
        assert limiter.try_acquire() is False
        # The key bucket is untouched by the refused call
        assert limiter.snapshot() == {"key": 2, "token": 0}

    def test_smaller_bucket_bounds_throughput(self):
        clock = FakeClock()
        limiter = RateLimiter(
            buckets=[
                WindowBucket(identity="key", capacity=300, window=10.0),
                WindowBucket(identity="token", capacity=100, window=10.0),
            ],
            clock=clock,
        )

        granted = sum(1 for _ in range(150) if limiter.try_acquire())

        assert granted == 100

    def test_window_reset_restores_capacity(self):
        clock = FakeClock()
        limiter = RateLimiter(
            buckets=[WindowBucket(identity="token", capacity=2, window=10.0)],
            clock=clock,
        )
        limiter.try_acquire()
        limiter.try_acquire()
        assert limiter.try_acquire() is False

        clock.advance(10.0)

        assert limiter.try_acquire() is True

    def test_time_until_available(self):
        clock = FakeClock()
        limiter = RateLimiter(
            buckets=[
                WindowBucket(identity="key", capacity=5, window=10.0),
                WindowBucket(identity="token", capacity=1, window=10.0),
            ],
            clock=clock,
        )
        assert limiter.time_until_available() == 0.0

        limiter.try_acquire()
        clock.advance(4.0)

        assert limiter.time_until_available() == pytest.approx(6.0)

    @pytest.mark.asyncio
    async def test_wait_for_available_immediate(self):
        limiter = RateLimiter(buckets=[WindowBucket(identity="token", capacity=5, window=10.0)])

        start = time.monotonic()
        await limiter.wait_for_available()

        assert time.monotonic() - start < 0.1

    @pytest.mark.asyncio
    async def test_bounded_per_window(self):
        """No more than capacity calls complete inside one window."""
        window = 0.2
        start = time.monotonic()
        limiter = RateLimiter(
            buckets=[WindowBucket(identity="token", capacity=3, window=window)],
            max_sleep=0.05,
        )
        completed: list[float] = []

        async def call():
            await limiter.wait_for_available()
            completed.append(time.monotonic() - start)

        await asyncio.gather(*(call() for _ in range(7)))

        completed.sort()
        assert len(completed) == 7
        assert all(t < window for t in completed[:3])
        assert all(t >= window for t in completed[3:])
        assert completed[6] >= 2 * window

    @pytest.mark.asyncio
    async def test_waiting_can_be_cancelled(self):
        limiter = RateLimiter(buckets=[WindowBucket(identity="token", capacity=1, window=60.0)])
        await limiter.wait_for_available()

        waiter = asyncio.create_task(limiter.wait_for_available())
        await asyncio.sleep(0.01)
        waiter.cancel()

        with pytest.raises(asyncio.CancelledError):
            await waiter


# =============================================================================
# Trello Limiter Tests
# =============================================================================


class TestCreateTrelloRateLimiter:
    def test_trello_quotas(self):
        limiter = create_trello_rate_limiter("key-12345", "token-67890")

        key_bucket, token_bucket = limiter.buckets
        assert key_bucket.capacity == TRELLO_KEY_LIMIT == 300
        assert token_bucket.capacity == TRELLO_TOKEN_LIMIT == 100
        assert key_bucket.window == token_bucket.window == TRELLO_WINDOW_SECONDS == 10.0

    def test_identities_do_not_leak_credentials(self):
        limiter = create_trello_rate_limiter("key-12345", "token-67890")

        assert set(limiter.snapshot()) == {"key:key-", "token:toke"}

    def test_token_quota_binds_first(self):
        clock = FakeClock()
        limiter = create_trello_rate_limiter("k", "t", clock=clock)

        granted = sum(1 for _ in range(120) if limiter.try_acquire())

        assert granted == 100
        assert limiter.snapshot() == {"key:k": 200, "token:t": 0}
