# =============================================================================
# core/retry.py  —  Bounded retry with exponential backoff
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Runs a zero-argument async operation (one provider call) up to
#   ``max_attempts`` times.  Transient failures are retried; everything else
#   goes straight back to the caller.
#
# THE SCHEDULE:
#   attempt 1 → immediately
#   attempt 2 → after base_delay        (1s by default)
#   attempt 3 → after base_delay * 2    (2s)
#   attempt i → after base_delay * 2**(i-2)
#   No jitter.
#
# EVERY ATTEMPT PAYS THE RATE LIMITER:
#   limiter.admit() runs before each network call, so retries consume
#   rate-limit budget exactly like first attempts.
#
# CANCELLATION:
#   Only ProviderError is caught.  If the surrounding task is cancelled,
#   asyncio.CancelledError propagates out of the sleep or the admit, and no
#   further attempts are scheduled.
# =============================================================================

import logging
from typing import Awaitable, Callable, Optional, TypeVar

from core.clock import Clock
from core.errors import ConfigError, ProviderError
from core.models import AttemptRecord
from core.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base_delay: float) -> float:
    """Seconds to wait before ``attempt`` (1-based).  Zero for the first one."""
    if attempt < 2:
        return 0.0
    return base_delay * 2 ** (attempt - 2)


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    limiter: SlidingWindowRateLimiter,
    clock: Clock,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    on_attempt: Optional[Callable[[AttemptRecord], None]] = None,
) -> T:
    """Run ``operation`` with rate limiting and retries.

    Args:
        operation: The provider call.  Called once per attempt.
        limiter: Admission gate awaited before every attempt.
        clock: Source of the backoff sleep.
        max_attempts: Attempt budget K (>= 1).
        base_delay: Delay in seconds before the second attempt.
        on_attempt: Optional observer notified of every failed attempt.

    Returns:
        Whatever ``operation`` returns on its first success.

    Raises:
        ProviderError: the first fatal error, or the last retryable one once
            the budget is spent.
    """
    if max_attempts < 1:
        raise ConfigError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        delay = backoff_delay(attempt, base_delay)
        if delay:
            await clock.sleep(delay)

        await limiter.admit()
        try:
            return await operation()
        except ProviderError as exc:
            last_attempt = attempt == max_attempts
            next_delay = 0.0 if (last_attempt or not exc.retryable) else backoff_delay(attempt + 1, base_delay)
            record = AttemptRecord(
                attempt=attempt,
                retryable=exc.retryable,
                delay=next_delay,
                error=str(exc),
            )
            if on_attempt is not None:
                on_attempt(record)

            if not exc.retryable:
                logger.error("Attempt %d failed with a fatal error: %s", attempt, exc)
                raise
            if last_attempt:
                logger.error("Giving up after %d attempts: %s", attempt, exc)
                raise
            logger.warning(
                "Attempt %d/%d failed (%s), retrying in %.1fs",
                attempt,
                max_attempts,
                exc,
                next_delay,
            )

    # Unreachable: the loop either returns or raises.
    raise AssertionError("retry loop exited without a result")
