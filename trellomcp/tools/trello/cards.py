"""
Card tools: read, create, update and archive cards.
"""

from __future__ import annotations

from typing import Any

from trellomcp.tools.base import ToolAnnotations
from trellomcp.tools.trello.common import TrelloTool, dump_all, optional_str_list, require

_CARD_FIELDS: dict[str, Any] = {
    "name": {"type": "string", "description": "The title of the card"},
    "description": {"type": "string", "description": "Details of the card (optional)"},
    "dueDate": {
        "type": "string",
        "description": "Due date (ISO 8601 or any format Trello accepts, optional)",
    },
    "labels": {
        "type": "array",
        "description": "Array of label IDs (optional)",
        "items": {"type": "string"},
    },
}


class GetCardsByListTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_get_cards_by_list"

    @property
    def description(self) -> str:
        return "Retrieves a list of cards contained in the specified list ID."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"listId": {"type": "string", "description": "Trello list ID"}},
            "required": ["listId"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title="Get Cards by List",
            read_only_hint=True,
            destructive_hint=False,
            idempotent_hint=True,
            open_world_hint=True,
        )

    async def run(self, arguments: dict[str, Any]) -> Any:
        (list_id,) = require(arguments, "listId")
        return dump_all(await self._client.get_cards_by_list(list_id))


class GetMyCardsTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_get_my_cards"

    @property
    def description(self) -> str:
        return "Retrieves all cards related to your account."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {"type": "object", "properties": {}}

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title="Get My Cards",
            read_only_hint=True,
            destructive_hint=False,
            idempotent_hint=True,
            open_world_hint=True,
        )

    async def run(self, arguments: dict[str, Any]) -> Any:
        return dump_all(await self._client.get_my_cards())


class AddCardTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_add_card"

    @property
    def description(self) -> str:
        return "Adds a card to the specified list."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "listId": {"type": "string", "description": "The ID of the list to add to"},
                **_CARD_FIELDS,
            },
            "required": ["listId", "name"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Add Card", destructive_hint=False, open_world_hint=True)

    async def run(self, arguments: dict[str, Any]) -> Any:
        list_id, name = require(arguments, "listId", "name")
        card = await self._client.add_card(
            list_id,
            name,
            description=arguments.get("description"),
            due_date=arguments.get("dueDate"),
            labels=optional_str_list(arguments, "labels"),
        )
        return card.to_api_dict()


class UpdateCardTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_update_card"

    @property
    def description(self) -> str:
        return "Updates the content of a card. Only the provided fields are changed."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "cardId": {"type": "string", "description": "The ID of the card to be updated"},
                **_CARD_FIELDS,
            },
            "required": ["cardId"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title="Update Card",
            destructive_hint=False,
            idempotent_hint=True,
            open_world_hint=True,
        )

    async def run(self, arguments: dict[str, Any]) -> Any:
        (card_id,) = require(arguments, "cardId")
        card = await self._client.update_card(
            card_id,
            name=arguments.get("name"),
            description=arguments.get("description"),
            due_date=arguments.get("dueDate"),
            labels=optional_str_list(arguments, "labels"),
        )
        return card.to_api_dict()


class ArchiveCardTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_archive_card"

    @property
    def description(self) -> str:
        return "Archives (closes) the specified card."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "cardId": {"type": "string", "description": "The ID of the card to archive"},
            },
            "required": ["cardId"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title="Archive Card",
            destructive_hint=True,
            idempotent_hint=True,
            open_world_hint=True,
        )

    async def run(self, arguments: dict[str, Any]) -> Any:
        (card_id,) = require(arguments, "cardId")
        card = await self._client.archive_card(card_id)
        return card.to_api_dict()
