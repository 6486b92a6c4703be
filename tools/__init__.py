# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between the MCP protocol and core/.
#   It declares each tool's typed signature and docstring (what MCP clients
#   see), logs the call, and forwards to core.dispatch.ToolDispatcher.
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build prompts (core/prompts.py)
#   - They do NOT talk HTTP (core/providers.py)
#   - They do NOT retry or rate-limit (core/gateway.py)
# =============================================================================
