"""End-to-end tests through the FastMCP surface (in-memory client)."""

from importlib.metadata import version

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from core.dispatch import DEGRADED_PREFIX, TOOLS
from core.errors import ProviderHTTPError
from core.gateway import build_gateway
from tools.mcp_server import create_server

from tests.fakes import FakeProvider


def _server(settings, clock, script=None):
    provider = FakeProvider(script)
    gateway = build_gateway(settings, clock=clock, provider=provider)
    return create_server(settings, gateway=gateway), provider


def _text(result) -> str:
    return result.content[0].text


@pytest.mark.asyncio
async def test_lists_every_tool(settings, clock):
    server, _ = _server(settings, clock)
    async with Client(server) as client:
        tools = {tool.name: tool for tool in await client.list_tools()}

    assert set(tools) == set(TOOLS)
    for name, definition in TOOLS.items():
        required = set(tools[name].inputSchema.get("required", []))
        assert required == {p.name for p in definition.params if p.required}


@pytest.mark.asyncio
async def test_call_returns_provider_text(settings, clock):
    server, provider = _server(settings, clock, ["Bonjour"])
    async with Client(server) as client:
        result = await client.call_tool("translate_text", {"text": "Hello", "target_language": "French"})

    assert _text(result) == "Bonjour"
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_optional_arguments_use_defaults(settings, clock):
    server, provider = _server(settings, clock)
    async with Client(server) as client:
        await client.call_tool("summarize_text", {"text": "some long text"})

    assert "100 words" in provider.calls[0][0]


@pytest.mark.asyncio
async def test_unknown_tool_is_rejected(settings, clock):
    server, provider = _server(settings, clock)
    async with Client(server) as client:
        with pytest.raises(ToolError, match="nonexistent_tool"):
            await client.call_tool("nonexistent_tool", {})
    assert provider.calls == []


@pytest.mark.asyncio
async def test_wrong_argument_type_is_rejected(settings, clock):
    server, provider = _server(settings, clock)
    async with Client(server) as client:
        with pytest.raises(ToolError):
            await client.call_tool("generate_text", {"prompt": 123})
    assert provider.calls == []


@pytest.mark.asyncio
async def test_dispatcher_rejection_names_the_error(settings, clock):
    server, provider = _server(settings, clock)
    async with Client(server) as client:
        with pytest.raises(ToolError, match="invalid_params"):
            await client.call_tool("summarize_text", {"text": "t", "max_length": -5})
    assert provider.calls == []


@pytest.mark.asyncio
async def test_provider_failure_degrades_to_text(settings, clock):
    server, _ = _server(settings, clock, [ProviderHTTPError(401, provider="gemini")])
    async with Client(server) as client:
        result = await client.call_tool("generate_text", {"prompt": "hi"})

    assert _text(result).startswith(DEGRADED_PREFIX)


def test_installed_sdk_majors_match_pins():
    # core/errors.py imports McpError from the top-level mcp package (1.x API)
    assert version("mcp").split(".")[0] == "1"
    assert version("fastmcp").split(".")[0] == "2"
