# =============================================================================
# core/rate_limiter.py  —  Sliding-window rate limiter
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Caps outbound provider calls at ``max_calls`` per rolling ``window``.
#
# HOW IT WORKS:
#   1. Timestamps of recent admissions live in a deque
#   2. Before each check, entries at least ``window`` old are pruned
#   3. A free slot admits the caller at once and records "now"
#   4. A full window sleeps until the oldest entry expires, then re-checks
#
# ATOMICITY:
#   The whole check-sleep-record cycle runs under one asyncio.Lock.  Two
#   callers can never both claim the last free slot, and suspended callers
#   are admitted in arrival order.
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from collections import deque

from core.clock import Clock, MonotonicClock
from core.errors import ConfigError

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """At most ``max_calls`` admissions in any rolling ``window`` seconds.

    Usage:
        limiter = SlidingWindowRateLimiter(max_calls=10, window=60.0)
        await limiter.admit()   # returns once a slot was recorded
    """

    def __init__(self, max_calls: int, window: float, clock: Clock | None = None):
        if max_calls < 1:
            raise ConfigError("rate limiter needs max_calls >= 1")
        if window <= 0:
            raise ConfigError("rate limiter needs a positive window")
        self.max_calls = max_calls
        self.window = window
        self._clock = clock or MonotonicClock()
        self._timestamps: deque[float] = deque()
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        cutoff = now - self.window
        while self._timestamps and self._timestamps[0] <= cutoff:
            self._timestamps.popleft()

    async def admit(self) -> None:
        """Block until a slot is free, then record this call attempt."""
        async with self._lock:
            while True:
                now = self._clock.now()
                self._prune(now)
                if len(self._timestamps) < self.max_calls:
                    self._timestamps.append(now)
                    return
                wait = self.window - (now - self._timestamps[0])
                logger.info("Rate limit reached %s, waiting %.2fs", self.stats(), wait)
                await self._clock.sleep(wait)

    def stats(self) -> dict:
        """Current window occupancy, as logged when a caller has to wait."""
        self._prune(self._clock.now())
        return {
            "current_calls": len(self._timestamps),
            "max_calls": self.max_calls,
            "window_seconds": self.window,
        }
