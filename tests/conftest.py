import pytest

from core.gateway import build_gateway
from core.models import GeminiConfig, RateLimitConfig, RetryConfig, Settings

from tests.fakes import FakeClock, FakeProvider


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        provider=GeminiConfig(api_key="test-key"),
        rate_limit=RateLimitConfig(max_calls=100, window_ms=1000),
        retry=RetryConfig(max_attempts=3, base_delay_ms=1000),
    )


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def gateway(settings, clock, provider):
    return build_gateway(settings, clock=clock, provider=provider)
