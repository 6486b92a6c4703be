# =============================================================================
# core/providers.py  —  Remote text-generation backends
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Implements the two interchangeable backends behind one capability:
#
#       async def generate(prompt: str, preamble: str = "") -> str
#
#   Each backend normalizes its own response shape into one plain string.
#
# FAILURE MAPPING (core/retry.py acts on the ``retryable`` flag):
#   non-2xx reply                     → ProviderHTTPError(status_code)
#   timeout / dropped connection      → ProviderTransportError (retryable)
#   any other httpx failure           → ProviderError (fatal)
#   missing text field / non-JSON     → MalformedResponseError (fatal)
#
#   No httpx exception ever leaves this module, so the dispatcher's
#   degrade policy covers every upstream failure.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from core.errors import (
    MalformedResponseError,
    ProviderError,
    ProviderHTTPError,
    ProviderTransportError,
)
from core.models import GeminiConfig, OpenAICompatConfig, ProviderConfig

logger = logging.getLogger(__name__)


class Provider(Protocol):
    name: str

    async def generate(self, prompt: str, preamble: str = "") -> str:
        ...


async def _post_json(provider: str, url: str, payload: dict, headers: dict, timeout: float) -> Any:
    """POST ``payload`` and return the decoded JSON body.

    Translates httpx failures into the provider error taxonomy.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.post(url, json=payload, headers=headers)
    except httpx.TimeoutException as exc:
        raise ProviderTransportError(f"{provider} request timed out after {timeout}s", provider=provider) from exc
    except httpx.NetworkError as exc:
        raise ProviderTransportError(f"{provider} connection failed: {exc}", provider=provider) from exc
    except httpx.RemoteProtocolError as exc:
        # Peer closed the connection mid-request; same as a reset.
        raise ProviderTransportError(f"{provider} connection dropped: {exc}", provider=provider) from exc
    except httpx.HTTPError as exc:
        raise ProviderError(f"{provider} request failed: {exc}", provider=provider) from exc

    if not resp.is_success:
        raise ProviderHTTPError(resp.status_code, resp.reason_phrase, provider=provider)

    try:
        return resp.json()
    except ValueError as exc:
        raise MalformedResponseError(f"{provider} returned a non-JSON body", provider=provider) from exc


class GeminiProvider:
    """Variant A: Gemini ``generateContent`` with a single content block."""

    name = "gemini"

    def __init__(self, config: GeminiConfig):
        self.config = config

    @staticmethod
    def build_payload(prompt: str, preamble: str = "") -> dict:
        text = f"{preamble}\n\n{prompt}" if preamble else prompt
        return {"contents": [{"parts": [{"text": text}]}]}

    @staticmethod
    def extract_text(data: Any) -> str:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise MalformedResponseError(
                "gemini response has no candidates[0].content.parts[0].text", provider="gemini"
            ) from None
        if not isinstance(text, str):
            raise MalformedResponseError("gemini response text is not a string", provider="gemini")
        return text

    async def generate(self, prompt: str, preamble: str = "") -> str:
        data = await _post_json(
            self.name,
            self.config.endpoint,
            self.build_payload(prompt, preamble),
            {
                "Content-Type": "application/json",
                "X-goog-api-key": self.config.api_key,
            },
            self.config.timeout,
        )
        return self.extract_text(data)


class OpenAICompatProvider:
    """Variant B: OpenAI-style chat completion with role-tagged messages."""

    name = "openai"

    def __init__(self, config: OpenAICompatConfig):
        self.config = config

    def build_payload(self, prompt: str, preamble: str = "") -> dict:
        messages = []
        if preamble:
            messages.append({"role": "system", "content": preamble})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

    @staticmethod
    def extract_text(data: Any) -> str:
        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise MalformedResponseError(
                "openai response has no choices[0].message.content", provider="openai"
            ) from None
        if not isinstance(text, str):
            raise MalformedResponseError("openai response content is not a string", provider="openai")
        return text

    async def generate(self, prompt: str, preamble: str = "") -> str:
        data = await _post_json(
            self.name,
            self.config.endpoint,
            self.build_payload(prompt, preamble),
            {
                "Authorization": f"Bearer {self.config.api_key}",
                "Content-Type": "application/json",
            },
            self.config.timeout,
        )
        return self.extract_text(data)


def build_provider(config: ProviderConfig) -> Provider:
    """Select the backend implementation for ``config`` (done once at startup)."""
    if isinstance(config, GeminiConfig):
        return GeminiProvider(config)
    if isinstance(config, OpenAICompatConfig):
        return OpenAICompatProvider(config)
    raise TypeError(f"Unsupported provider config: {type(config).__name__}")
