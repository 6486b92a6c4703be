# =============================================================================
# core/gateway.py  —  Reliability wrapper around the selected provider
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Glues three pieces together into the single call every tool uses:
#
#     ReliableGateway.generate(prompt, preamble)
#         └─ call_with_retry(...)            core/retry.py
#              ├─ limiter.admit()            core/rate_limiter.py
#              └─ provider.generate(...)     core/providers.py
#
# OWNERSHIP:
#   build_gateway() is called by the composition root with a Settings object.
#   The gateway owns the one rate limiter for the whole process; callers
#   never touch the limiter's window directly.
# =============================================================================

import logging
from typing import Callable, Optional

from core.clock import Clock, MonotonicClock
from core.models import AttemptRecord, RetryConfig, Settings
from core.providers import Provider, build_provider
from core.rate_limiter import SlidingWindowRateLimiter
from core.retry import call_with_retry

logger = logging.getLogger(__name__)


class ReliableGateway:
    """A provider decorated with rate limiting and bounded retries."""

    def __init__(
        self,
        provider: Provider,
        limiter: SlidingWindowRateLimiter,
        retry: RetryConfig,
        clock: Clock,
        on_attempt: Optional[Callable[[AttemptRecord], None]] = None,
    ):
        self.provider = provider
        self.limiter = limiter
        self.retry = retry
        self.clock = clock
        self.on_attempt = on_attempt

    @property
    def provider_name(self) -> str:
        return self.provider.name

    async def generate(self, prompt: str, preamble: str = "") -> str:
        """Generate text for ``prompt``; raises ProviderError when it cannot."""
        return await call_with_retry(
            lambda: self.provider.generate(prompt, preamble),
            limiter=self.limiter,
            clock=self.clock,
            max_attempts=self.retry.max_attempts,
            base_delay=self.retry.base_delay_seconds,
            on_attempt=self.on_attempt,
        )


def build_gateway(
    settings: Settings,
    clock: Optional[Clock] = None,
    provider: Optional[Provider] = None,
) -> ReliableGateway:
    """Composition-root factory: one provider, one limiter, one retry policy.

    ``clock`` and ``provider`` are injectable for tests; by default the real
    monotonic clock and the backend named in ``settings`` are used.
    """
    clock = clock or MonotonicClock()
    provider = provider or build_provider(settings.provider)
    limiter = SlidingWindowRateLimiter(
        max_calls=settings.rate_limit.max_calls,
        window=settings.rate_limit.window_seconds,
        clock=clock,
    )
    logger.info(
        "Gateway ready: provider=%s, rate_limit=%d/%dms, max_attempts=%d",
        provider.name,
        settings.rate_limit.max_calls,
        settings.rate_limit.window_ms,
        settings.retry.max_attempts,
    )
    return ReliableGateway(provider, limiter, settings.retry, clock)
