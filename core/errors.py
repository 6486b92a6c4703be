# =============================================================================
# core/errors.py  —  Failure taxonomy
# =============================================================================
#
# Two families of errors live here:
#
#   1. Provider errors (raised by core/providers.py).  Each one knows whether
#      it is RETRYABLE.  core/retry.py only reads that flag; it never inspects
#      status codes itself.
#
#        ProviderHTTPError       non-2xx reply; retryable for 429 and 503
#        ProviderTransportError  timeout / connection reset; always retryable
#        MalformedResponseError  2xx reply without the expected text field
#        ProviderError           any other failed request; fatal
#
#   2. Protocol errors (raised by core/dispatch.py).  These are mcp.McpError
#      instances carrying a JSON-RPC error code, exactly what the MCP SDK
#      uses on the wire.
# =============================================================================

from mcp import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData

RETRYABLE_STATUS_CODES = frozenset({429, 503})


class ConfigError(ValueError):
    """Startup configuration is invalid; the process must not start."""


class ProviderError(Exception):
    """Base class for failures talking to the remote text-generation provider."""

    retryable = False

    def __init__(self, message: str, *, provider: str = ""):
        super().__init__(message)
        self.provider = provider


class ProviderHTTPError(ProviderError):
    """The provider answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str = "", *, provider: str = ""):
        super().__init__(
            f"{provider or 'provider'} returned HTTP {status_code}"
            + (f": {message}" if message else ""),
            provider=provider,
        )
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.status_code in RETRYABLE_STATUS_CODES


class ProviderTransportError(ProviderError):
    """Timeout or connection-level failure before a status code was received."""

    retryable = True


class MalformedResponseError(ProviderError):
    """2xx reply whose body lacks the generated text."""


# -----------------------------------------------------------------------------
# Protocol-level errors
# -----------------------------------------------------------------------------
ERROR_NAMES = {
    INVALID_PARAMS: "invalid_params",
    METHOD_NOT_FOUND: "method_not_found",
    INTERNAL_ERROR: "internal_error",
}


def invalid_params(message: str) -> McpError:
    return McpError(ErrorData(code=INVALID_PARAMS, message=message))


def method_not_found(name: str) -> McpError:
    return McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))


def internal_error(message: str) -> McpError:
    return McpError(ErrorData(code=INTERNAL_ERROR, message=message))
