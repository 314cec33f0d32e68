"""
Board-level tools: lists, activity feed and cross-board search.
"""

from __future__ import annotations

from typing import Any

from trellomcp.tools.base import ToolAnnotations
from trellomcp.tools.trello.common import TrelloTool, dump_all, optional_int, require

_READ_ONLY = {
    "read_only_hint": True,
    "destructive_hint": False,
    "idempotent_hint": True,
    "open_world_hint": True,
}


class GetListsTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_get_lists"

    @property
    def description(self) -> str:
        return "Retrieves all lists in the specified board."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "boardId": {
                    "type": "string",
                    "description": "The ID of the Trello board to get lists from",
                },
            },
            "required": ["boardId"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Get Lists", **_READ_ONLY)

    async def run(self, arguments: dict[str, Any]) -> Any:
        (board_id,) = require(arguments, "boardId")
        return dump_all(await self._client.get_lists(board_id))


class AddListTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_add_list"

    @property
    def description(self) -> str:
        return "Adds a new list to the specified board."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "boardId": {
                    "type": "string",
                    "description": "The ID of the Trello board to add the list to",
                },
                "name": {"type": "string", "description": "Name of the list"},
            },
            "required": ["boardId", "name"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Add List", destructive_hint=False, open_world_hint=True)

    async def run(self, arguments: dict[str, Any]) -> Any:
        board_id, name = require(arguments, "boardId", "name")
        board_list = await self._client.add_list(board_id, name)
        return board_list.to_api_dict()


class ArchiveListTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_archive_list"

    @property
    def description(self) -> str:
        return "Archives (closes) the specified list."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "listId": {"type": "string", "description": "The ID of the list to archive"},
            },
            "required": ["listId"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title="Archive List",
            destructive_hint=True,
            idempotent_hint=True,
            open_world_hint=True,
        )

    async def run(self, arguments: dict[str, Any]) -> Any:
        (list_id,) = require(arguments, "listId")
        board_list = await self._client.archive_list(list_id)
        return board_list.to_api_dict()


class GetRecentActivityTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_get_recent_activity"

    @property
    def description(self) -> str:
        return (
            "Retrieves the most recent activity for a specified board. "
            "The 'limit' argument can specify how many to retrieve."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "boardId": {
                    "type": "string",
                    "description": "The ID of the Trello board to get activity from",
                },
                "limit": {
                    "type": "number",
                    "description": "Number of activities to retrieve (default: 10)",
                },
            },
            "required": ["boardId"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Get Recent Activity", **_READ_ONLY)

    async def run(self, arguments: dict[str, Any]) -> Any:
        (board_id,) = require(arguments, "boardId")
        limit = optional_int(arguments, "limit", 10)
        return dump_all(await self._client.get_recent_activity(board_id, limit))


class SearchAllBoardsTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_search_all_boards"

    @property
    def description(self) -> str:
        return (
            "Performs a cross-board search across all boards in the workspace "
            "(organization), depending on plan and permissions."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search keyword"},
                "limit": {
                    "type": "number",
                    "description": "Maximum number of results to retrieve (default: 10)",
                },
            },
            "required": ["query"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Search All Boards", **_READ_ONLY)

    async def run(self, arguments: dict[str, Any]) -> Any:
        (query,) = require(arguments, "query")
        limit = optional_int(arguments, "limit", 10)
        return await self._client.search_all_boards(query, limit)
