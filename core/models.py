# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every piece of configuration and
# bookkeeping that flows through the server.  They carry no network behavior;
# the gateway and dispatcher read them, never mutate them.
#
# THE PROVIDER CONFIG IS A TAGGED VARIANT:
#   ProviderConfig = GeminiConfig | OpenAICompatConfig
#   The concrete class IS the tag.  core/providers.py picks the matching
#   implementation once at startup; nothing downstream branches on a
#   string flag again.
# =============================================================================

from dataclasses import dataclass, field
from typing import Optional, Union


# -----------------------------------------------------------------------------
# Provider configs, one per remote backend
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class GeminiConfig:
    """Variant A: Google Gemini ``generateContent`` endpoint."""

    api_key: str
    model: str = "gemini-2.5-flash"
    api_root: str = "https://generativelanguage.googleapis.com/v1beta/models"
    timeout: float = 30.0              # Seconds; exceeding it is retryable

    @property
    def endpoint(self) -> str:
        return f"{self.api_root}/{self.model}:generateContent"


@dataclass(frozen=True)
class OpenAICompatConfig:
    """Variant B: any OpenAI-compatible ``/chat/completions`` endpoint."""

    api_key: str
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    temperature: float = 0.7
    max_tokens: int = 2048
    timeout: float = 30.0

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"


ProviderConfig = Union[GeminiConfig, OpenAICompatConfig]


# -----------------------------------------------------------------------------
# Reliability knobs
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RateLimitConfig:
    """At most ``max_calls`` admissions per rolling ``window_ms`` window."""

    max_calls: int = 10
    window_ms: int = 60_000

    @property
    def window_seconds(self) -> float:
        return self.window_ms / 1000


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    base_delay_ms: int = 1000

    @property
    def base_delay_seconds(self) -> float:
        return self.base_delay_ms / 1000


# What to do with a provider failure once retries are spent:
#   "degrade" → return it as plain text ("AI service temporarily unavailable: ...")
#   "raise"   → surface it as an MCP INTERNAL_ERROR
ERROR_MODES = ("degrade", "raise")


@dataclass(frozen=True)
class Settings:
    """Everything the composition root needs, read once at process start."""

    provider: ProviderConfig
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    error_mode: str = "degrade"
    log_level: str = "INFO"

    @property
    def provider_name(self) -> str:
        return "gemini" if isinstance(self.provider, GeminiConfig) else "openai"


# -----------------------------------------------------------------------------
# AttemptRecord: transient record of one failed provider call
# -----------------------------------------------------------------------------
# Lives only for the duration of one logical request.  The retry loop hands
# it to an optional observer (tests use this) and logs it.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class AttemptRecord:
    attempt: int                       # 1-based attempt number that failed
    retryable: bool
    delay: float                       # Seconds before the next attempt (0 if none)
    error: str


# -----------------------------------------------------------------------------
# Tool contracts
# -----------------------------------------------------------------------------
# ParamSpec mirrors one property of a tool's JSON input schema.  ``kind`` is
# "string" or "number", the only primitive types the tools accept.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ParamSpec:
    name: str
    kind: str = "string"
    required: bool = True
    default: Optional[object] = None
    choices: tuple = ()
    minimum: Optional[float] = None    # Exclusive lower bound for numbers


@dataclass(frozen=True)
class PromptRequest:
    """A fully rendered request: the user prompt plus optional system preamble."""

    prompt: str
    preamble: str = ""
