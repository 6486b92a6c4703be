"""Tests for environment-driven configuration."""

import pytest

from core.config import load_settings
from core.errors import ConfigError
from core.models import GeminiConfig, OpenAICompatConfig


def test_defaults_to_gemini():
    settings = load_settings({"GEMINI_API_KEY": "g"})
    assert isinstance(settings.provider, GeminiConfig)
    assert settings.provider.api_key == "g"
    assert settings.provider.timeout == 30.0
    assert settings.rate_limit.max_calls == 10
    assert settings.rate_limit.window_ms == 60_000
    assert settings.retry.max_attempts == 3
    assert settings.retry.base_delay_seconds == 1.0
    assert settings.error_mode == "degrade"
    assert settings.provider_name == "gemini"


def test_gemini_model_override():
    settings = load_settings({"GEMINI_API_KEY": "g", "GEMINI_MODEL": "gemini-2.0-flash"})
    assert settings.provider.endpoint.endswith("/models/gemini-2.0-flash:generateContent")


def test_openai_variant_with_overrides():
    settings = load_settings(
        {
            "AI_PROVIDER": "OpenAI",
            "OPENAI_API_KEY": "o",
            "OPENAI_BASE_URL": "https://proxy.example.com/v1",
            "OPENAI_MODEL": "deepseek-chat",
            "OPENAI_TEMPERATURE": "0.2",
            "REQUEST_TIMEOUT_SECONDS": "12.5",
        }
    )
    assert isinstance(settings.provider, OpenAICompatConfig)
    assert settings.provider.endpoint == "https://proxy.example.com/v1/chat/completions"
    assert settings.provider.model == "deepseek-chat"
    assert settings.provider.temperature == 0.2
    assert settings.provider.timeout == 12.5
    assert settings.provider_name == "openai"


def test_reliability_knobs():
    settings = load_settings(
        {
            "GEMINI_API_KEY": "g",
            "RATE_LIMIT_MAX_CALLS": "5",
            "RATE_LIMIT_WINDOW_MS": "2000",
            "RETRY_MAX_ATTEMPTS": "4",
            "RETRY_BASE_DELAY_MS": "250",
            "PROVIDER_ERROR_MODE": "raise",
            "LOG_LEVEL": "debug",
        }
    )
    assert settings.rate_limit.window_seconds == 2.0
    assert settings.rate_limit.max_calls == 5
    assert settings.retry.max_attempts == 4
    assert settings.retry.base_delay_seconds == 0.25
    assert settings.error_mode == "raise"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {},
        {"AI_PROVIDER": "openai", "GEMINI_API_KEY": "g"},
        {"AI_PROVIDER": "claude", "GEMINI_API_KEY": "g"},
        {"GEMINI_API_KEY": "g", "RATE_LIMIT_MAX_CALLS": "0"},
        {"GEMINI_API_KEY": "g", "RATE_LIMIT_WINDOW_MS": "0"},
        {"GEMINI_API_KEY": "g", "RATE_LIMIT_MAX_CALLS": "many"},
        {"GEMINI_API_KEY": "g", "RETRY_MAX_ATTEMPTS": "0"},
        {"GEMINI_API_KEY": "g", "PROVIDER_ERROR_MODE": "ignore"},
        {"GEMINI_API_KEY": "g", "REQUEST_TIMEOUT_SECONDS": "-1"},
    ],
)
def test_invalid_configuration_rejected(env):
    with pytest.raises(ConfigError):
        load_settings(env)
