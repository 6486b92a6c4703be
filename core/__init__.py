# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL logic behind the MCP tools: configuration, the
# provider gateway, the rate limiter and retry loop, prompt templates, and
# request dispatch.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP.  The server layer (tools/)
#   depends on core/, never the other way round, so everything here can be
#   unit-tested without starting an MCP server.
# =============================================================================
