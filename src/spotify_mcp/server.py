"""MCP server for Spotify - playback control via AppleScript (macOS only).

Exposes a fixed catalogue of tools over stdio. Each call runs exactly one
AppleScript against the Spotify desktop app and returns its text output.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from . import __version__
from . import applescript as asc
from .config import get_config
from .dispatcher import Dispatcher
from .tools import list_mcp_tools

logger = logging.getLogger("spotify_mcp")

# Created on first use so configuration is read at startup, not import
_dispatcher: Dispatcher | None = None


def get_dispatcher() -> Dispatcher:
    """Return the process-wide dispatcher, creating it if needed."""
    global _dispatcher
    if _dispatcher is None:
        config = get_config()
        _dispatcher = Dispatcher(asc.OsascriptExecutor(config.executor))
    return _dispatcher


server = Server("spotify", version=__version__)


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return list_mcp_tools()


@server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: dict[str, Any] | None) -> CallToolResult:
    """Handle tool calls.

    Dispatch blocks on osascript, so it runs in a worker thread to keep
    other in-flight calls moving.
    """
    dispatcher = get_dispatcher()
    response = await asyncio.to_thread(dispatcher.dispatch, name, arguments)
    return CallToolResult.model_validate(response.to_dict())


async def run_server():
    """Run the MCP server on stdio."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Spotify MCP server running on stdio")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main():
    """Run the MCP server."""
    config = get_config()
    # stdout carries the MCP protocol; logs go to stderr
    logging.basicConfig(
        level=config.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    if not asc.is_available():
        logger.warning("applescript_unavailable platform=%s", sys.platform)
    try:
        asyncio.run(run_server())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Server error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
