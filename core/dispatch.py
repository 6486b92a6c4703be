# =============================================================================
# core/dispatch.py  —  Tool table + request dispatch
# =============================================================================
#
# HOW A TOOL CALL FLOWS:
#   1. Look the tool name up in TOOLS.        unknown → METHOD_NOT_FOUND
#   2. Validate the arguments against its     wrong type/missing → INVALID_PARAMS
#      ParamSpecs and fill in defaults.
#   3. Render the prompt (core/prompts.py).
#   4. Call the reliable gateway.             provider failure → error policy
#
#   Steps 1 and 2 run BEFORE any network call, so bad requests never cost
#   rate-limit budget.
#
# PROVIDER-FAILURE POLICY (Settings.error_mode):
#   "degrade" → return "AI service temporarily unavailable: <reason>" as the
#               tool's ordinary text output.  The caller always gets an answer.
#   "raise"   → raise McpError(INTERNAL_ERROR).
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from mcp import McpError

from core import prompts
from core.errors import ProviderError, internal_error, invalid_params, method_not_found
from core.gateway import ReliableGateway
from core.models import ParamSpec, PromptRequest

logger = logging.getLogger(__name__)

DEGRADED_PREFIX = "AI service temporarily unavailable: "


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    params: tuple
    build: Callable[..., PromptRequest]


# -----------------------------------------------------------------------------
# The fixed set of tools.  Order here is the order they are listed in.
# -----------------------------------------------------------------------------
TOOLS: dict[str, ToolDefinition] = {
    tool.name: tool
    for tool in (
        ToolDefinition(
            name="generate_text",
            params=(ParamSpec("prompt"),),
            build=prompts.generate_text,
        ),
        ToolDefinition(
            name="translate_text",
            params=(ParamSpec("text"), ParamSpec("target_language")),
            build=prompts.translate_text,
        ),
        ToolDefinition(
            name="summarize_text",
            params=(
                ParamSpec("text"),
                ParamSpec("max_length", kind="number", required=False, default=100, minimum=0),
            ),
            build=prompts.summarize_text,
        ),
        ToolDefinition(
            name="verify_ai_result",
            params=(
                ParamSpec("original_prompt"),
                ParamSpec("ai_result"),
                ParamSpec("verification_criteria", required=False, default="accuracy,completeness"),
            ),
            build=prompts.verify_ai_result,
        ),
        ToolDefinition(
            name="generate_thought_chain",
            params=(
                ParamSpec("question"),
                ParamSpec("domain", required=False, default="general"),
                ParamSpec(
                    "depth",
                    required=False,
                    default="basic",
                    choices=tuple(prompts.DEPTH_GUIDANCE),
                ),
            ),
            build=prompts.generate_thought_chain,
        ),
        ToolDefinition(
            name="optimize_prompt",
            params=(
                ParamSpec("original_prompt"),
                ParamSpec("goal", required=False, default="clarity,specificity"),
                ParamSpec("target_model", required=False, default="general"),
            ),
            build=prompts.optimize_prompt,
        ),
    )
}


def _check_type(spec: ParamSpec, value: object) -> None:
    if spec.kind == "string":
        if not isinstance(value, str):
            raise invalid_params(f"'{spec.name}' must be a string")
    elif spec.kind == "number":
        # bool is an int subclass; JSON true/false is not a number here
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise invalid_params(f"'{spec.name}' must be a number")
        if spec.minimum is not None and value <= spec.minimum:
            raise invalid_params(f"'{spec.name}' must be greater than {spec.minimum}")
    if spec.choices and value not in spec.choices:
        raise invalid_params(f"'{spec.name}' must be one of: {', '.join(spec.choices)}")


def validate_arguments(tool: ToolDefinition, arguments: Optional[Mapping]) -> dict:
    """Return a complete keyword-argument dict for ``tool.build``.

    Unknown keys are ignored.  Raises McpError(INVALID_PARAMS) on any problem.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise invalid_params("arguments must be an object")

    resolved = {}
    for spec in tool.params:
        value = arguments.get(spec.name)
        if value is None:
            if spec.required:
                raise invalid_params(f"'{spec.name}' is required")
            value = spec.default
        _check_type(spec, value)
        resolved[spec.name] = value
    return resolved


class ToolDispatcher:
    """Maps tool requests to prompt templates and the reliable gateway."""

    def __init__(self, gateway: ReliableGateway, error_mode: str = "degrade"):
        self.gateway = gateway
        self.error_mode = error_mode

    @staticmethod
    def tool_names() -> list[str]:
        return list(TOOLS)

    def prepare(self, name: str, arguments: Optional[Mapping] = None) -> PromptRequest:
        """Resolve and validate a request without touching the network."""
        tool = TOOLS.get(name)
        if tool is None:
            raise method_not_found(name)
        return tool.build(**validate_arguments(tool, arguments))

    async def dispatch(self, name: str, arguments: Optional[Mapping] = None) -> str:
        """Run tool ``name`` and return its text output.

        Raises:
            McpError: METHOD_NOT_FOUND, INVALID_PARAMS, or INTERNAL_ERROR.
        """
        request = self.prepare(name, arguments)
        try:
            return await self.gateway.generate(request.prompt, request.preamble)
        except ProviderError as exc:
            logger.error("%s failed on %s: %s", name, self.gateway.provider_name, exc)
            if self.error_mode == "degrade":
                return f"{DEGRADED_PREFIX}{exc}"
            raise internal_error(f"Tool execution failed: {exc}") from exc
        except McpError:
            raise
        except Exception as exc:
            logger.exception("%s crashed", name)
            raise internal_error(f"Tool execution failed: {exc}") from exc
