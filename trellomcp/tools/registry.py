"""
Tool Registry.

The registry holds the tools the protocol server advertises:
- Registration with validation
- Lookup by name
- Dispatch with uniform error reporting

Usage:
    registry = ToolRegistry()
    registry.register(GetListsTool(client))

    result = await registry.call("trello_get_lists", {"boardId": "abc"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .base import ToolResult

if TYPE_CHECKING:
    from .base import Tool

logger = logging.getLogger(__name__)


class ToolRegistryError(Exception):
    """Error in tool registry operations."""

    pass


class ToolRegistry:
    """
    Registry of available tools.

    Tools are registered once at startup and looked up by name for every
    call.
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """
        Register a tool.

        Raises:
            ToolRegistryError: If tool name already registered or tool is invalid
        """
        if tool.name in self._tools:
            raise ToolRegistryError(
                f"Tool '{tool.name}' already registered. Use a unique name or unregister first."
            )

        self._validate_tool(tool)

        self._tools[tool.name] = tool
        logger.debug(f"[tool_registry] Registered tool: {tool.name}")

    def get(self, name: str) -> Tool | None:
        """Get a tool by name, or None if not found."""
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def to_mcp_schemas(self) -> list[dict[str, Any]]:
        """Get all tool schemas in MCP format."""
        return [tool.to_mcp_schema() for tool in self._tools.values()]

    async def call(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        """
        Execute a tool by name.

        Unknown tools and unexpected exceptions are returned as error
        results rather than raised.
        """
        tool = self._tools.get(name)
        if tool is None:
            return ToolResult.error(f"Unknown tool: {name}")

        try:
            return await tool.execute(arguments or {})
        except Exception as e:
            logger.error(f"[tool_registry] Tool {name} failed: {e}", exc_info=True)
            return ToolResult.error(str(e))

    def _validate_tool(self, tool: Tool) -> None:
        """
        Validate tool has required properties.

        Raises:
            ToolRegistryError: If tool is invalid
        """
        if not tool.name or not isinstance(tool.name, str):
            raise ToolRegistryError(f"Tool must have a valid name: {tool}")

        if not tool.description or not isinstance(tool.description, str):
            raise ToolRegistryError(f"Tool '{tool.name}' must have a description")

        schema = tool.input_schema
        if not isinstance(schema, dict):
            raise ToolRegistryError(f"Tool '{tool.name}' input_schema must be a dict")

        if schema.get("type") != "object":
            raise ToolRegistryError(f"Tool '{tool.name}' input_schema must have type: 'object'")

        if "properties" not in schema:
            raise ToolRegistryError(f"Tool '{tool.name}' input_schema must have 'properties'")

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __repr__(self) -> str:
        return f"<ToolRegistry tools={list(self._tools.keys())}>"
