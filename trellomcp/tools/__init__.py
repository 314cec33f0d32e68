"""
Tools exposed over the protocol server.

MCP Alignment:
    Tool interface follows Model Context Protocol standards.
    See: https://modelcontextprotocol.io/specification/

Usage:
    registry = ToolRegistry()
    registry.register(MyTool())

    result = await registry.call("my_tool", {"arg": "value"})
"""

from .base import Tool, ToolAnnotations, ToolResult
from .registry import ToolRegistry, ToolRegistryError

__all__ = [
    "Tool",
    "ToolAnnotations",
    "ToolRegistry",
    "ToolRegistryError",
    "ToolResult",
]
