"""
Pydantic schemas for the Trello API.

Models accept Trello's camelCase payloads and expose snake_case fields.
Unknown fields are kept (extra="allow") so tool output round-trips the
full upstream object via `to_api_dict()`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Action type emitted when someone comments on a card
COMMENT_CARD_ACTION = "commentCard"


class TrelloModel(BaseModel):
    """Base model for Trello resources."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_api_dict(self) -> dict[str, Any]:
        """Dump in Trello's wire format (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Boards, Lists, Cards
# =============================================================================


class BoardList(TrelloModel):
    """A column on a board."""

    id: str
    name: str = ""
    closed: bool = False
    id_board: str | None = None
    pos: float | None = None


class Card(TrelloModel):
    """A card; belongs to exactly one list at a time."""

    id: str
    name: str = ""
    desc: str = ""
    due: str | None = None
    id_list: str = ""
    id_labels: list[str] = Field(default_factory=list)
    closed: bool = False
    url: str | None = None
    date_last_activity: str | None = None


class Label(TrelloModel):
    id: str
    name: str = ""
    color: str | None = None


class Member(TrelloModel):
    id: str
    full_name: str = ""
    username: str = ""
    avatar_url: str | None = None


# =============================================================================
# Activity
# =============================================================================


class ActionRef(TrelloModel):
    """Reference to a card, list or board inside an action payload."""

    id: str
    name: str = ""


class ActionData(TrelloModel):
    text: str | None = None
    card: ActionRef | None = None
    list_ref: ActionRef | None = Field(None, alias="list")
    board: ActionRef | None = None


class Action(TrelloModel):
    """
    One entry of a board's activity feed.

    Ids are Mongo ObjectIds: fixed-width hex strings whose ordering follows
    creation time, so plain string comparison orders them.
    """

    id: str
    type: str
    date: str | None = None
    id_member_creator: str | None = None
    data: ActionData = Field(default_factory=ActionData)
    member_creator: Member | None = None

    @property
    def is_comment(self) -> bool:
        return self.type == COMMENT_CARD_ACTION

    @property
    def card_id(self) -> str | None:
        return self.data.card.id if self.data.card else None


# =============================================================================
# Attachments
# =============================================================================


class Attachment(TrelloModel):
    """
    A card attachment.

    Either a file uploaded to Trello (`is_upload`) or a link to an
    external resource.
    """

    id: str
    name: str = ""
    url: str = ""
    size: int | None = Field(None, alias="bytes")
    mime_type: str | None = None
    date: str | None = None
    id_member: str | None = None
    is_upload: bool = False
    file_name: str | None = None


class AttachmentDownload(BaseModel):
    """Result of downloading an attachment's content."""

    attachment: Attachment
    content: str | None = None  # base64
    url: str
    error: str | None = None
    saved_path: str | None = None

    def to_api_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "attachment": self.attachment.to_api_dict(),
            "content": self.content,
            "url": self.url,
        }
        if self.error is not None:
            data["error"] = self.error
        if self.saved_path is not None:
            data["savedPath"] = self.saved_path
        return data
