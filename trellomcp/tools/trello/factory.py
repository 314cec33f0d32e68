"""
Registry construction for the Trello tool set.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from trellomcp.tools.registry import ToolRegistry
from trellomcp.tools.trello.attachments import (
    DeleteLocalAttachmentTool,
    DownloadAttachmentTool,
    GetCardAttachmentsTool,
)
from trellomcp.tools.trello.boards import (
    AddListTool,
    ArchiveListTool,
    GetListsTool,
    GetRecentActivityTool,
    SearchAllBoardsTool,
)
from trellomcp.tools.trello.cards import (
    AddCardTool,
    ArchiveCardTool,
    GetCardsByListTool,
    GetMyCardsTool,
    UpdateCardTool,
)
from trellomcp.tools.trello.watch import WatchBoardTool

if TYPE_CHECKING:
    from trellomcp.integrations.trello import AttachmentStorage, TrelloClient
    from trellomcp.watch import SnapshotStore

logger = logging.getLogger(__name__)


def build_trello_registry(
    client: TrelloClient,
    store: SnapshotStore,
    *,
    storage: AttachmentStorage | None = None,
) -> ToolRegistry:
    """
    Register every Trello tool.

    Args:
        client: Shared, rate-limited Trello client
        store: Latest snapshot per board for the watch tool
        storage: Local attachment directory (enables saving and deletion)
    """
    registry = ToolRegistry()

    for tool in (
        GetCardsByListTool(client),
        GetListsTool(client),
        GetRecentActivityTool(client),
        AddCardTool(client),
        UpdateCardTool(client),
        ArchiveCardTool(client),
        AddListTool(client),
        ArchiveListTool(client),
        GetMyCardsTool(client),
        SearchAllBoardsTool(client),
        GetCardAttachmentsTool(client),
        DownloadAttachmentTool(client, storage),
        WatchBoardTool(client, store),
    ):
        registry.register(tool)

    if storage is not None:
        registry.register(DeleteLocalAttachmentTool(storage))

    logger.info(f"[tool_registry] {len(registry)} Trello tools registered")
    return registry
