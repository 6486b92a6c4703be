# =============================================================================
# core/config.py  —  Environment-driven configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns environment variables into one immutable Settings object.  It runs
#   exactly once, in the composition root (tools/mcp_server.py), and every
#   bad value is rejected HERE, at startup, with a ConfigError.
#
# WHY VALIDATE UP FRONT?
#   A rate limit of 0 calls would block every request forever.  A missing
#   API key would fail every request.  Neither should be discovered at call
#   time by whoever happens to invoke the first tool.
#
# .env FILES:
#   The entry point calls python-dotenv's load_dotenv() before this module
#   reads anything, so a local .env works the same as real env vars.
# =============================================================================

import os
from typing import Mapping, Optional

from core.errors import ConfigError
from core.models import (
    ERROR_MODES,
    GeminiConfig,
    OpenAICompatConfig,
    ProviderConfig,
    RateLimitConfig,
    RetryConfig,
    Settings,
)

PROVIDERS = ("gemini", "openai")


def _get(env: Mapping[str, str], key: str, default: str = "") -> str:
    return env.get(key, default).strip()


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = _get(env, key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from None


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = _get(env, key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None


def load_provider_config(env: Mapping[str, str]) -> ProviderConfig:
    """Pick exactly one backend variant from ``AI_PROVIDER``."""
    provider = _get(env, "AI_PROVIDER", "gemini").lower() or "gemini"
    timeout = _float(env, "REQUEST_TIMEOUT_SECONDS", 30.0)
    if timeout <= 0:
        raise ConfigError("REQUEST_TIMEOUT_SECONDS must be positive")

    if provider == "gemini":
        api_key = _get(env, "GEMINI_API_KEY")
        if not api_key:
            raise ConfigError("Please set the GEMINI_API_KEY environment variable")
        return GeminiConfig(
            api_key=api_key,
            model=_get(env, "GEMINI_MODEL") or GeminiConfig.model,
            timeout=timeout,
        )

    if provider == "openai":
        api_key = _get(env, "OPENAI_API_KEY")
        if not api_key:
            raise ConfigError("Please set the OPENAI_API_KEY environment variable")
        max_tokens = _int(env, "OPENAI_MAX_TOKENS", OpenAICompatConfig.max_tokens)
        if max_tokens < 1:
            raise ConfigError("OPENAI_MAX_TOKENS must be at least 1")
        return OpenAICompatConfig(
            api_key=api_key,
            base_url=_get(env, "OPENAI_BASE_URL") or OpenAICompatConfig.base_url,
            model=_get(env, "OPENAI_MODEL") or OpenAICompatConfig.model,
            temperature=_float(env, "OPENAI_TEMPERATURE", OpenAICompatConfig.temperature),
            max_tokens=max_tokens,
            timeout=timeout,
        )

    raise ConfigError(f"AI_PROVIDER must be one of {PROVIDERS}, got {provider!r}")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build and validate Settings from ``env`` (defaults to ``os.environ``).

    Raises:
        ConfigError: if any value is missing or out of range.
    """
    env = os.environ if env is None else env

    rate_limit = RateLimitConfig(
        max_calls=_int(env, "RATE_LIMIT_MAX_CALLS", RateLimitConfig.max_calls),
        window_ms=_int(env, "RATE_LIMIT_WINDOW_MS", RateLimitConfig.window_ms),
    )
    if rate_limit.max_calls < 1:
        raise ConfigError("RATE_LIMIT_MAX_CALLS must be at least 1")
    if rate_limit.window_ms <= 0:
        raise ConfigError("RATE_LIMIT_WINDOW_MS must be positive")

    retry = RetryConfig(
        max_attempts=_int(env, "RETRY_MAX_ATTEMPTS", RetryConfig.max_attempts),
        base_delay_ms=_int(env, "RETRY_BASE_DELAY_MS", RetryConfig.base_delay_ms),
    )
    if retry.max_attempts < 1:
        raise ConfigError("RETRY_MAX_ATTEMPTS must be at least 1")
    if retry.base_delay_ms < 0:
        raise ConfigError("RETRY_BASE_DELAY_MS must not be negative")

    error_mode = _get(env, "PROVIDER_ERROR_MODE", "degrade").lower() or "degrade"
    if error_mode not in ERROR_MODES:
        raise ConfigError(f"PROVIDER_ERROR_MODE must be one of {ERROR_MODES}, got {error_mode!r}")

    return Settings(
        provider=load_provider_config(env),
        rate_limit=rate_limit,
        retry=retry,
        error_mode=error_mode,
        log_level=(_get(env, "LOG_LEVEL", "INFO") or "INFO").upper(),
    )
