"""
Shared plumbing for Trello tools.

TrelloTool turns every failure into an error ToolResult whose text is
{"error": "<message>"}, so the calling model always receives JSON.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import TYPE_CHECKING, Any

from trellomcp.integrations.base import IntegrationError
from trellomcp.tools.base import Tool, ToolResult

if TYPE_CHECKING:
    from trellomcp.integrations.trello import TrelloClient

logger = logging.getLogger(__name__)


class ToolArgumentError(ValueError):
    """Raised when a tool call is missing or has malformed arguments."""


def require(arguments: dict[str, Any], *names: str) -> list[Any]:
    """
    Return the named arguments, raising if any is missing or empty.

    Raises:
        ToolArgumentError: "Missing required argument(s): a, b"
    """
    missing = [name for name in names if not arguments.get(name)]
    if missing:
        noun = "argument" if len(missing) == 1 else "arguments"
        raise ToolArgumentError(f"Missing required {noun}: {', '.join(missing)}")
    return [arguments[name] for name in names]


def optional_int(arguments: dict[str, Any], name: str, default: int) -> int:
    value = arguments.get(name)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ToolArgumentError(f"Argument '{name}' must be a number")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ToolArgumentError(f"Argument '{name}' must be a number") from e


def optional_str_list(arguments: dict[str, Any], name: str) -> list[str] | None:
    value = arguments.get(name)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ToolArgumentError(f"Argument '{name}' must be an array of strings")
    return value


class TrelloTool(Tool):
    """
    Base class for tools backed by TrelloClient.

    Subclasses implement `run()` and return JSON-serializable data.
    """

    def __init__(self, client: TrelloClient):
        self._client = client

    @abstractmethod
    async def run(self, arguments: dict[str, Any]) -> Any:
        """Perform the call and return the payload to serialize."""
        ...

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            payload = await self.run(arguments)
        except ToolArgumentError as e:
            return ToolResult.error(str(e))
        except IntegrationError as e:
            logger.error(f"[{self.name}] Trello API error: {e}")
            return ToolResult.error(f"Trello API error: {e.message}")
        except Exception as e:
            logger.error(f"[{self.name}] Failed: {e}", exc_info=True)
            return ToolResult.error(str(e))

        return ToolResult.from_data(payload)


def dump_all(models: list[Any]) -> list[dict[str, Any]]:
    """Serialize a list of Trello models in wire format."""
    return [model.to_api_dict() for model in models]
