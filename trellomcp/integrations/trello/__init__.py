"""
Trello Integration.

Trello organizes work as boards of lists of cards. This integration provides:
- List and card management
- Board activity feed
- Cross-board search
- Attachment listing, download and local storage

Usage:
    from trellomcp.integrations.trello import TrelloClient, TrelloConfig

    client = TrelloClient(TrelloConfig(api_key="...", token="..."))

    cards = await client.get_cards_by_list("list-123")
    await client.update_card(cards[0].id, description="Updated")

API Reference:
    https://developer.atlassian.com/cloud/trello/rest/
"""

from trellomcp.integrations.trello.attachments import AttachmentStorage
from trellomcp.integrations.trello.client import TrelloClient, TrelloConfig
from trellomcp.integrations.trello.schemas import (
    COMMENT_CARD_ACTION,
    Action,
    ActionData,
    ActionRef,
    Attachment,
    AttachmentDownload,
    BoardList,
    Card,
    Label,
    Member,
)

__all__ = [
    "COMMENT_CARD_ACTION",
    "Action",
    "ActionData",
    "ActionRef",
    "Attachment",
    "AttachmentDownload",
    "AttachmentStorage",
    "BoardList",
    "Card",
    "Label",
    "Member",
    "TrelloClient",
    "TrelloConfig",
]
