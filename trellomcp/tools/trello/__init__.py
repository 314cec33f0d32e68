"""
Trello Tools.

These tools wrap TrelloClient operations for the protocol server:
- Cards: get by list, get mine, add, update, archive
- Boards: lists, add/archive list, recent activity, search
- Attachments: list, download, delete local download
- Watch: wait for the next change on a board

Usage:
    from trellomcp.tools.trello import build_trello_registry

    registry = build_trello_registry(client, SnapshotStore())
    result = await registry.call("trello_get_lists", {"boardId": "abc"})
"""

from .attachments import DeleteLocalAttachmentTool, DownloadAttachmentTool, GetCardAttachmentsTool
from .boards import (
    AddListTool,
    ArchiveListTool,
    GetListsTool,
    GetRecentActivityTool,
    SearchAllBoardsTool,
)
from .cards import AddCardTool, ArchiveCardTool, GetCardsByListTool, GetMyCardsTool, UpdateCardTool
from .common import ToolArgumentError, TrelloTool
from .factory import build_trello_registry
from .watch import WatchBoardTool

__all__ = [
    "AddCardTool",
    "AddListTool",
    "ArchiveCardTool",
    "ArchiveListTool",
    "DeleteLocalAttachmentTool",
    "DownloadAttachmentTool",
    "GetCardAttachmentsTool",
    "GetCardsByListTool",
    "GetListsTool",
    "GetMyCardsTool",
    "GetRecentActivityTool",
    "SearchAllBoardsTool",
    "ToolArgumentError",
    "TrelloTool",
    "UpdateCardTool",
    "WatchBoardTool",
    "build_trello_registry",
]
