"""
Attachment tools: list, download, and remove local downloads.

When an AttachmentStorage is configured, downloaded uploads are written
to disk and the result carries `savedPath` instead of inline base64.
"""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING, Any

from trellomcp.tools.base import Tool, ToolAnnotations, ToolResult
from trellomcp.tools.trello.common import ToolArgumentError, TrelloTool, dump_all, require

if TYPE_CHECKING:
    from trellomcp.integrations.trello import AttachmentStorage, TrelloClient

logger = logging.getLogger(__name__)


class GetCardAttachmentsTool(TrelloTool):
    @property
    def name(self) -> str:
        return "trello_get_card_attachments"

    @property
    def description(self) -> str:
        return (
            "Retrieves all attachments from a specified card. Returns attachment "
            "metadata including name, file size, MIME type, and URL. Use this to "
            "discover what attachments exist on a card before downloading."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "cardId": {
                    "type": "string",
                    "description": "The ID of the Trello card to get attachments from",
                },
            },
            "required": ["cardId"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title="Get Card Attachments",
            read_only_hint=True,
            destructive_hint=False,
            idempotent_hint=True,
            open_world_hint=True,
        )

    async def run(self, arguments: dict[str, Any]) -> Any:
        (card_id,) = require(arguments, "cardId")
        return dump_all(await self._client.get_card_attachments(card_id))


class DownloadAttachmentTool(TrelloTool):
    def __init__(self, client: TrelloClient, storage: AttachmentStorage | None = None):
        super().__init__(client)
        self._storage = storage

    @property
    def name(self) -> str:
        return "trello_download_attachment"

    @property
    def description(self) -> str:
        target = (
            "saves it to the local attachment directory and returns the saved path"
            if self._storage is not None
            else "returns the content as base64-encoded data"
        )
        return (
            "Downloads a specific attachment from a Trello card. For files uploaded "
            f"directly to Trello, {target}. For external links, returns the URL. "
            "Use trello_get_card_attachments first to get the attachment ID."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "cardId": {
                    "type": "string",
                    "description": "The ID of the Trello card containing the attachment",
                },
                "attachmentId": {
                    "type": "string",
                    "description": (
                        "The ID of the attachment to download "
                        "(obtained from trello_get_card_attachments)"
                    ),
                },
            },
            "required": ["cardId", "attachmentId"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title="Download Attachment",
            read_only_hint=self._storage is None,
            destructive_hint=False,
            idempotent_hint=True,
            open_world_hint=True,
        )

    async def run(self, arguments: dict[str, Any]) -> Any:
        card_id, attachment_id = require(arguments, "cardId", "attachmentId")
        download = await self._client.download_attachment(card_id, attachment_id)

        if self._storage is not None and download.content is not None:
            path = self._storage.save(
                card_id,
                download.attachment,
                base64.b64decode(download.content),
            )
            download = download.model_copy(update={"content": None, "saved_path": str(path)})

        return download.to_api_dict()


class DeleteLocalAttachmentTool(Tool):
    """Removes a file previously saved by trello_download_attachment."""

    def __init__(self, storage: AttachmentStorage):
        self._storage = storage

    @property
    def name(self) -> str:
        return "trello_delete_local_attachment"

    @property
    def description(self) -> str:
        return (
            "Deletes a locally saved attachment file (a savedPath returned by "
            "trello_download_attachment). Does not touch the card on Trello."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "The savedPath of the downloaded attachment",
                },
            },
            "required": ["path"],
        }

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title="Delete Local Attachment",
            destructive_hint=True,
            idempotent_hint=True,
        )

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            (path,) = require(arguments, "path")
            deleted = self._storage.delete(path)
        except (ToolArgumentError, ValueError, OSError) as e:
            logger.error(f"[{self.name}] Failed: {e}")
            return ToolResult.error(str(e))

        return ToolResult.from_data({"path": path, "deleted": deleted})
