# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes every text-processing tool over MCP.  Each tool is a thin wrapper
#   around core/dispatch.py. It logs the call, hands the arguments to the
#   dispatcher, and turns protocol errors into MCP tool errors.
#
# HOW IT WORKS (the flow):
#   1. An MCP client (Claude Desktop, an IDE, main.py) calls a tool by name
#   2. FastMCP checks the argument types against the function signature
#   3. The wrapper forwards to ToolDispatcher.dispatch()
#   4. The dispatcher validates, renders the prompt, and calls the
#      rate-limited, retrying gateway
#   5. The provider's plain text comes back as the tool result
#
# COMPOSITION ROOT:
#   create_server() is the ONE place where Settings, the gateway (and its
#   rate limiter), and the dispatcher are built.  Nothing reads configuration
#   from globals after that.
#
# RUNNING THIS SERVER:
#   a) Standalone:   python -m tools.mcp_server
#   b) As a stdio subprocess of any MCP client (see main.py)
# =============================================================================

import logging
import sys
from typing import Literal, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp import McpError

from core.config import load_settings
from core.dispatch import ToolDispatcher
from core.errors import ERROR_NAMES, ConfigError
from core.gateway import ReliableGateway, build_gateway
from core.models import Settings

SERVER_NAME = "multi-ai-server"

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to its client over STDOUT.
# Anything printed to stdout would corrupt the JSON-RPC stream.
#
#   CYAN   → incoming tool calls
#   GREEN  → responses
#   YELLOW → intermediate status (rejections, degraded answers)
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

_PREVIEW_CHARS = 120

logger = logging.getLogger("mcp_server")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log a preview of the tool output in GREEN, then return it."""
    preview = text if len(text) <= _PREVIEW_CHARS else text[:_PREVIEW_CHARS] + "…"
    logger.info(f"{_GREEN}  ← {tool_name} response ({len(text)} chars): {preview!r}{_RESET}")
    return text


async def _run(dispatcher: ToolDispatcher, tool_name: str, **arguments) -> str:
    _log_request(tool_name, **arguments)
    try:
        text = await dispatcher.dispatch(tool_name, arguments)
    except McpError as exc:
        name = ERROR_NAMES.get(exc.error.code, "error")
        _log_status(f"{name}: {exc.error.message}")
        raise ToolError(f"{name}: {exc.error.message}") from exc
    return _log_response(tool_name, text)


# =============================================================================
# Server factory
# =============================================================================
def create_server(
    settings: Optional[Settings] = None,
    gateway: Optional[ReliableGateway] = None,
) -> FastMCP:
    """Build the FastMCP server and register every tool.

    Args:
        settings: Validated configuration.  Loaded from the environment when
            omitted.
        gateway: Pre-built gateway (tests inject one with a fake provider).
            Built from ``settings`` when omitted.
    """
    settings = settings or load_settings()
    gateway = gateway or build_gateway(settings)
    dispatcher = ToolDispatcher(gateway, error_mode=settings.error_mode)

    mcp = FastMCP(SERVER_NAME)

    # -------------------------------------------------------------------------
    # TOOL 1: generate_text
    # -------------------------------------------------------------------------
    @mcp.tool()
    async def generate_text(prompt: str) -> str:
        """Generate text with the configured AI provider.

        Args:
            prompt: The text-generation prompt.
        """
        return await _run(dispatcher, "generate_text", prompt=prompt)

    # -------------------------------------------------------------------------
    # TOOL 2: translate_text
    # -------------------------------------------------------------------------
    @mcp.tool()
    async def translate_text(text: str, target_language: str) -> str:
        """Translate text into another language. Returns only the translation.

        Args:
            text: The text to translate.
            target_language: The language to translate into (e.g. "French").
        """
        return await _run(dispatcher, "translate_text", text=text, target_language=target_language)

    # -------------------------------------------------------------------------
    # TOOL 3: summarize_text
    # -------------------------------------------------------------------------
    @mcp.tool()
    async def summarize_text(text: str, max_length: float = 100) -> str:
        """Summarize text concisely.

        Args:
            text: The text to summarize.
            max_length: Maximum summary length in words (default 100).
        """
        return await _run(dispatcher, "summarize_text", text=text, max_length=max_length)

    # -------------------------------------------------------------------------
    # TOOL 4: verify_ai_result
    # -------------------------------------------------------------------------
    # Useful as a second opinion: one model grades another model's answer.
    # -------------------------------------------------------------------------
    @mcp.tool()
    async def verify_ai_result(
        original_prompt: str,
        ai_result: str,
        verification_criteria: str = "accuracy,completeness",
    ) -> str:
        """Verify an AI-generated answer against a list of criteria.

        WHEN TO CALL THIS: when you want an independent check of an answer
        before relying on it.

        Args:
            original_prompt: The prompt that produced the answer.
            ai_result: The answer to verify.
            verification_criteria: Comma-separated criteria
                (default "accuracy,completeness").

        Returns:
            Per-criterion scores, detected problems, and an overall verdict.
        """
        return await _run(
            dispatcher,
            "verify_ai_result",
            original_prompt=original_prompt,
            ai_result=ai_result,
            verification_criteria=verification_criteria,
        )

    # -------------------------------------------------------------------------
    # TOOL 5: generate_thought_chain
    # -------------------------------------------------------------------------
    @mcp.tool()
    async def generate_thought_chain(
        question: str,
        domain: str = "general",
        depth: Literal["basic", "detailed", "expert"] = "basic",
    ) -> str:
        """Produce a step-by-step reasoning chain for a question.

        Args:
            question: The question or problem to reason about.
            domain: Subject area, e.g. "coding", "math" (default "general").
            depth: "basic", "detailed" or "expert" (default "basic").
        """
        return await _run(
            dispatcher,
            "generate_thought_chain",
            question=question,
            domain=domain,
            depth=depth,
        )

    # -------------------------------------------------------------------------
    # TOOL 6: optimize_prompt
    # -------------------------------------------------------------------------
    @mcp.tool()
    async def optimize_prompt(
        original_prompt: str,
        goal: str = "clarity,specificity",
        target_model: str = "general",
    ) -> str:
        """Rewrite a prompt so language models answer it more reliably.

        Args:
            original_prompt: The prompt to improve.
            goal: Comma-separated optimization goals (default "clarity,specificity").
            target_model: The model family the prompt is for (default "general").

        Returns:
            The optimized prompt followed by a short list of the changes made.
        """
        return await _run(
            dispatcher,
            "optimize_prompt",
            original_prompt=original_prompt,
            goal=goal,
            target_model=target_model,
        )

    return mcp


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    """Load configuration, then serve MCP over stdio until the client hangs up."""
    load_dotenv()
    try:
        settings = load_settings()
    except ConfigError as exc:
        configure_logging()
        logger.error(f"❌ Configuration error: {exc}")
        sys.exit(1)

    configure_logging(settings.log_level)
    server = create_server(settings)
    logger.info(f"{SERVER_NAME} started (provider={settings.provider_name}, errors={settings.error_mode})")
    server.run()


if __name__ == "__main__":
    main()
