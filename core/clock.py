# =============================================================================
# core/clock.py  —  Injectable time source
# =============================================================================
# The rate limiter and retry loop never call time.monotonic() or
# asyncio.sleep() directly.  They go through a Clock, so tests can swap in a
# fake one and assert exact delays without waiting.
# =============================================================================

import asyncio
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        """Seconds on a monotonic scale."""
        ...

    async def sleep(self, seconds: float) -> None:
        ...


class MonotonicClock:
    """The real clock: time.monotonic() + asyncio.sleep()."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
