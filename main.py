# =============================================================================
# main.py  —  Demo & smoke-test client for the Multi-AI MCP server
# =============================================================================
#
# HOW TO RUN:
#   python main.py [mode]
#
#   demo   - list the tools, then call each one with a sample input (default)
#   test   - run a pass/fail smoke suite against the live server
#   tools  - list the available tools with their parameters
#   help   - show usage
#
# WHAT HAPPENS:
#   1. The server (tools/mcp_server.py) is started as a stdio subprocess
#   2. A fastmcp Client connects to it over stdin/stdout
#   3. Tool calls go through the full stack: MCP → dispatcher → rate limiter
#      → retry loop → AI provider
#
# The subprocess inherits this process's environment, so the same .env /
# AI_PROVIDER / API key settings apply.
# =============================================================================

import asyncio
import json
import os
import sys

from dotenv import load_dotenv
from fastmcp import Client
from fastmcp.client.transports import StdioTransport
from fastmcp.exceptions import ToolError

from core.dispatch import DEGRADED_PREFIX, TOOLS

PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))

DEMO_CALLS = [
    ("generate_text", {"prompt": "Explain what MCP (Model Context Protocol) is in simple terms."}),
    ("translate_text", {"text": "Hello, how are you today?", "target_language": "French"}),
    (
        "summarize_text",
        {
            "text": (
                "Artificial intelligence is a branch of computer science that tries to "
                "understand the essence of intelligence and build machines that respond in "
                "ways similar to human intelligence. Research covers robotics, speech "
                "recognition, image recognition, natural language processing and expert "
                "systems, and AI is now used in medicine, education, transport and finance."
            ),
            "max_length": 30,
        },
    ),
    (
        "verify_ai_result",
        {
            "original_prompt": "What is JavaScript?",
            "ai_result": "JavaScript is a programming language used mainly for web development.",
            "verification_criteria": "accuracy,completeness",
        },
    ),
    ("generate_thought_chain", {"question": "How do I debug a failing unit test?", "domain": "coding"}),
    ("optimize_prompt", {"original_prompt": "write code", "goal": "clarity,specificity"}),
]

HELP_TEXT = """
Multi-AI MCP client
===================

Usage:
  python main.py [mode]

Modes:
  demo     Call every tool with a sample input (default)
  test     Run the smoke-test suite
  tools    Show the available tools
  help     Show this message
"""


def make_client() -> Client:
    """A client that launches the server as a stdio subprocess."""
    transport = StdioTransport(
        command=sys.executable,
        args=["-m", "tools.mcp_server"],
        env=dict(os.environ),
        cwd=PROJECT_ROOT,
    )
    return Client(transport)


def _first_text(result) -> str:
    for block in result.content:
        if getattr(block, "type", None) == "text":
            return block.text
    return ""


async def list_tools(client: Client) -> list:
    print("\n📋 Available tools:")
    tools = await client.list_tools()
    for index, tool in enumerate(tools, start=1):
        print(f"{index}. {tool.name}")
        print(f"   Description: {(tool.description or '').strip().splitlines()[0]}")
        print(f"   Parameters: {json.dumps(tool.inputSchema.get('properties', {}), indent=2)}")
    return tools


async def call_tool(client: Client, name: str, arguments: dict) -> str:
    print(f"\n🔧 Calling {name} with {json.dumps(arguments, ensure_ascii=False)}")
    result = await client.call_tool(name, arguments)
    text = _first_text(result)
    print(text)
    return text


async def run_demo(client: Client) -> None:
    await list_tools(client)
    for name, arguments in DEMO_CALLS:
        try:
            await call_tool(client, name, arguments)
        except ToolError as exc:
            print(f"❌ {name} failed: {exc}")
    print("\n🎉 Demo complete!")


async def run_tests(client: Client) -> int:
    """Run the smoke suite and return the number of failures."""
    passed = failed = 0

    async def check(label, coro):
        nonlocal passed, failed
        print(f"\n🧪 {label}")
        try:
            await coro
        except Exception as exc:  # report and keep going
            failed += 1
            print(f"❌ FAILED: {exc}")
        else:
            passed += 1
            print("✅ PASSED")

    async def tool_list():
        names = {tool.name for tool in await client.list_tools()}
        missing = set(TOOLS) - names
        if missing:
            raise AssertionError(f"missing tools: {sorted(missing)}")

    async def tool_returns_text(name, arguments):
        text = await call_tool(client, name, arguments)
        if not text:
            raise AssertionError("empty response")
        if text.startswith(DEGRADED_PREFIX):
            print("⚠️  Provider call failed, but the MCP round-trip worked")

    async def unknown_tool_rejected():
        try:
            await client.call_tool("nonexistent_tool", {})
        except ToolError as exc:
            if "nonexistent_tool" not in str(exc):
                raise AssertionError(f"unexpected error text: {exc}") from exc
            return
        raise AssertionError("unknown tool was accepted")

    await check("Tool list", tool_list())
    for name, arguments in DEMO_CALLS:
        await check(f"{name} returns text", tool_returns_text(name, arguments))
    await check("Unknown tool is rejected", unknown_tool_rejected())

    total = passed + failed
    print("\n📊 Summary")
    print("=" * 40)
    print(f"Total:  {total}")
    print(f"Passed: {passed} ✅")
    print(f"Failed: {failed} ❌")
    return failed


async def run(mode: str) -> int:
    async with make_client() as client:
        if mode == "demo":
            await run_demo(client)
        elif mode == "tools":
            await list_tools(client)
        elif mode == "test":
            return 1 if await run_tests(client) else 0
    return 0


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    mode = argv[0] if argv else "demo"

    if mode in ("help", "--help", "-h"):
        print(HELP_TEXT)
        return 0
    if mode not in ("demo", "test", "tools"):
        print(f"Unknown mode: {mode}. Use 'python main.py help' for usage.")
        return 1

    load_dotenv()
    return asyncio.run(run(mode))


if __name__ == "__main__":
    sys.exit(main())
