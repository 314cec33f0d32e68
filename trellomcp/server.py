"""
Trello MCP Server - exposes Trello boards, lists and cards as tools over
the Model Context Protocol (stdio transport).

stdout carries the protocol stream, so all logging goes to stderr.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from trellomcp import __version__
from trellomcp.config import SettingsError, TrelloSettings, get_settings
from trellomcp.integrations.trello import AttachmentStorage, TrelloClient
from trellomcp.tools import ToolRegistry
from trellomcp.tools.trello import build_trello_registry
from trellomcp.watch import SnapshotStore

logger = logging.getLogger(__name__)

SERVER_NAME = "trello-mcp"


def create_server(registry: ToolRegistry) -> Server:
    """Wire the registry into an MCP server's list/call handlers."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        logger.debug("[server] ListTools request")
        return [types.Tool.model_validate(schema) for schema in registry.to_mcp_schemas()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        logger.info(f"[server] CallTool request: {name}")
        result = await registry.call(name, arguments)
        if result.is_error:
            logger.warning(f"[server] Tool {name} returned error: {result.text}")
        return [types.TextContent(type="text", text=result.text)]

    return server


def build_registry(settings: TrelloSettings, client: TrelloClient) -> ToolRegistry:
    storage = AttachmentStorage(Path(settings.attachment_dir)) if settings.attachment_dir else None
    return build_trello_registry(client, SnapshotStore(), storage=storage)


async def serve(settings: TrelloSettings) -> None:
    """Run the server on stdio until the client disconnects."""
    async with TrelloClient(settings.to_client_config()) as client:
        server = create_server(build_registry(settings, client))

        logger.info("[server] Connecting server to stdio transport...")
        async with stdio_server() as (read_stream, write_stream):
            logger.info("[server] Trello MCP Server running on stdio")
            await server.run(read_stream, write_stream, server.create_initialization_options())


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    """Console entry point."""
    try:
        settings = get_settings()
    except SettingsError as e:
        configure_logging("INFO")
        logger.error(f"[server] {e}")
        sys.exit(1)

    configure_logging(settings.log_level)
    logger.info("[server] Starting Trello MCP Server...")

    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("[server] Interrupted, shutting down")
    except Exception as e:
        logger.error(f"[server] Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
