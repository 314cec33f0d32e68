"""
Tool contract for the protocol server.

- Tool: One callable operation with a JSON Schema for its arguments
- ToolResult: JSON text returned to the caller, flagged when it is an error
- ToolAnnotations: Advisory behavior hints (read-only, destructive, ...)

Errors are results, not exceptions: a failed call returns
ToolResult.error(message), whose text is {"error": message}.

Usage:
    class EchoTool(Tool):
        name = "echo"
        description = "Returns its input"
        input_schema = {"type": "object", "properties": {"text": {"type": "string"}}}

        async def execute(self, arguments: dict) -> ToolResult:
            return ToolResult.from_data({"text": arguments.get("text")})
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ToolAnnotations:
    """
    Behavior hints advertised with a tool. Advisory only.

    Serialized with the protocol's camelCase keys; hints equal to the
    protocol defaults are left out.
    """

    title: str | None = None
    read_only_hint: bool = False
    destructive_hint: bool = True
    idempotent_hint: bool = False
    open_world_hint: bool = False

    def to_dict(self) -> dict[str, Any]:
        hints: dict[str, Any] = {}
        if self.title is not None:
            hints["title"] = self.title
        if self.read_only_hint:
            hints["readOnlyHint"] = True
        if not self.destructive_hint:
            hints["destructiveHint"] = False
        if self.idempotent_hint:
            hints["idempotentHint"] = True
        if self.open_world_hint:
            hints["openWorldHint"] = True
        return hints


@dataclass(frozen=True, slots=True)
class ToolResult:
    """
    Text sent back for one tool call.

    Example:
        ToolResult.from_data([{"id": "card-1", "name": "My Card"}])
        ToolResult.error("List not found: abc")
    """

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> ToolResult:
        return cls(text=text)

    @classmethod
    def from_data(cls, payload: Any) -> ToolResult:
        """Serialize a JSON-compatible payload as the result text."""
        return cls(text=json.dumps(payload, ensure_ascii=False))

    @classmethod
    def error(cls, message: str) -> ToolResult:
        """Error result; the text is the JSON object {"error": message}."""
        return cls(text=json.dumps({"error": message}, ensure_ascii=False), is_error=True)


class Tool(ABC):
    """
    One operation advertised to the calling model.

    Trello tools are named "trello_<operation>" and take camelCase
    arguments described by `input_schema`.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Shown to the calling model when it picks a tool."""
        ...

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema object ("type": "object" with "properties")."""
        ...

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations()

    @abstractmethod
    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """Run the tool; expected failures come back as ToolResult.error()."""
        ...

    def to_mcp_schema(self) -> dict[str, Any]:
        """Tool listing entry: name, description, inputSchema, annotations."""
        schema: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }
        hints = self.annotations.to_dict()
        if hints:
            schema["annotations"] = hints
        return schema

    def __repr__(self) -> str:
        return f"<Tool {self.name}>"
