"""
Trello Watch Board Tool.

Blocks until something changes on a board (card added, moved, relabeled,
description edited, or commented) or the timeout elapses. Trello has no
native long-poll, so this polls through WatchLoop.

Usage:
    tool = WatchBoardTool(client=trello_client, store=snapshot_store)

    result = await tool.execute({
        "boardId": "board-1",
        "listIds": ["list-todo", "list-doing"],
        "timeoutMs": 60000,
    })
    # {"changes": [{"type": "moved", "cardId": ...}], "timedOut": false}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from trellomcp.tools.base import ToolAnnotations
from trellomcp.tools.trello.common import TrelloTool, optional_int, optional_str_list, require
from trellomcp.watch import DEFAULT_POLL_INTERVAL_MS, DEFAULT_TIMEOUT_MS, WatchLoop

if TYPE_CHECKING:
    from trellomcp.integrations.trello import TrelloClient
    from trellomcp.watch import SnapshotStore


class WatchBoardTool(TrelloTool):
    """Waits for the next change on a board."""

    def __init__(self, client: TrelloClient, store: SnapshotStore):
        super().__init__(client)
        self._loop = WatchLoop(client, store)

    @property
    def name(self) -> str:
        return "trello_watch_board"

    @property
    def description(self) -> str:
        return (
            "Waits until something changes on a board, then returns the changes. "
            "Detects cards that were added, moved between lists, relabeled, had "
            "their description edited, or received comments. Comments containing "
            "the automation marker are flagged with isClaudeComment. Returns "
            "timedOut=true with no changes if nothing happens before the timeout."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "boardId": {"type": "string", "description": "The ID of the board to watch"},
                "listIds": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Only track cards in these lists (default: all lists)",
                },
                "pollIntervalMs": {
                    "type": "number",
                    "description": f"Milliseconds between polls (default: {DEFAULT_POLL_INTERVAL_MS})",
                },
                "timeoutMs": {
                    "type": "number",
                    "description": f"Maximum milliseconds to wait (default: {DEFAULT_TIMEOUT_MS})",
                },
            },
            "required": ["boardId"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title="Watch Board",
            read_only_hint=True,
            destructive_hint=False,
            open_world_hint=True,
        )

    async def run(self, arguments: dict[str, Any]) -> Any:
        (board_id,) = require(arguments, "boardId")
        result = await self._loop.watch(
            board_id,
            optional_str_list(arguments, "listIds"),
            poll_interval_ms=optional_int(arguments, "pollIntervalMs", DEFAULT_POLL_INTERVAL_MS),
            timeout_ms=optional_int(arguments, "timeoutMs", DEFAULT_TIMEOUT_MS),
        )
        return result.to_dict()
