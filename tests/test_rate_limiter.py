"""Tests for the sliding-window rate limiter."""

import asyncio
import logging

import pytest

from core.errors import ConfigError
from core.rate_limiter import SlidingWindowRateLimiter


class TestConstruction:
    def test_zero_max_calls_rejected(self, clock):
        with pytest.raises(ConfigError):
            SlidingWindowRateLimiter(max_calls=0, window=1.0, clock=clock)

    def test_non_positive_window_rejected(self, clock):
        with pytest.raises(ConfigError):
            SlidingWindowRateLimiter(max_calls=1, window=0, clock=clock)


class TestAdmit:
    @pytest.mark.asyncio
    async def test_under_limit_is_immediate(self, clock):
        limiter = SlidingWindowRateLimiter(max_calls=3, window=10.0, clock=clock)
        for _ in range(3):
            await limiter.admit()
        assert clock.sleeps == []
        assert limiter.stats()["current_calls"] == 3

    @pytest.mark.asyncio
    async def test_waits_for_oldest_to_expire(self, clock):
        limiter = SlidingWindowRateLimiter(max_calls=2, window=10.0, clock=clock)
        await limiter.admit()          # t=1000
        clock.t += 4
        await limiter.admit()          # t=1004
        await limiter.admit()          # must wait until t=1010
        assert clock.sleeps == [pytest.approx(6.0)]
        assert clock.now() == pytest.approx(1010.0)

    @pytest.mark.asyncio
    async def test_wait_logs_window_occupancy(self, clock, caplog):
        limiter = SlidingWindowRateLimiter(max_calls=1, window=10.0, clock=clock)
        await limiter.admit()
        with caplog.at_level(logging.INFO, logger="core.rate_limiter"):
            await limiter.admit()
        assert "'current_calls': 1" in caplog.text
        assert "'max_calls': 1" in caplog.text
        assert "waiting 10.00s" in caplog.text

    @pytest.mark.asyncio
    async def test_old_entries_are_pruned(self, clock):
        limiter = SlidingWindowRateLimiter(max_calls=1, window=5.0, clock=clock)
        await limiter.admit()
        clock.t += 5
        await limiter.admit()
        assert clock.sleeps == []
        assert limiter.stats()["current_calls"] == 1

    @pytest.mark.asyncio
    async def test_concurrent_burst_never_exceeds_window(self, clock):
        max_calls, window = 3, 1.0
        limiter = SlidingWindowRateLimiter(max_calls=max_calls, window=window, clock=clock)
        admitted: list[float] = []

        async def worker():
            await limiter.admit()
            admitted.append(clock.now())

        await asyncio.gather(*(worker() for _ in range(10)))

        assert len(admitted) == 10
        admitted.sort()
        for i in range(len(admitted) - max_calls):
            # any N+1 consecutive admissions span at least one full window
            assert admitted[i + max_calls] - admitted[i] >= window

    @pytest.mark.asyncio
    async def test_waiters_are_served_in_arrival_order(self, clock):
        limiter = SlidingWindowRateLimiter(max_calls=1, window=2.0, clock=clock)
        order: list[int] = []

        async def worker(n):
            await limiter.admit()
            order.append(n)

        await asyncio.gather(*(worker(n) for n in range(4)))
        assert order == [0, 1, 2, 3]
