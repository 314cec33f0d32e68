"""
Trello API Client.

This client provides async access to Trello's REST API for boards, lists,
cards, activity and attachments. It handles authentication (key/token
query parameters), rate limiting and error mapping.

Usage:
    async with TrelloClient(config) as client:
        lists = await client.get_lists("board-id")
        cards = await client.get_cards_by_list(lists[0].id)

        card = await client.add_card(
            list_id=lists[0].id,
            name="Fix bug",
            description="Users cannot log in with SSO",
        )

API Reference:
    https://developer.atlassian.com/cloud/trello/rest/
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from trellomcp.integrations.base import IntegrationClient, IntegrationConfig
from trellomcp.integrations.trello.schemas import (
    Action,
    Attachment,
    AttachmentDownload,
    BoardList,
    Card,
)
from trellomcp.resilience import RateLimiter, create_trello_rate_limiter

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.trello.com/1"
DOWNLOAD_TIMEOUT = 60.0
DOWNLOAD_MAX_REDIRECTS = 5


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class TrelloConfig(IntegrationConfig):
    """Configuration for Trello client."""

    # Required
    api_key: str = ""
    token: str = ""

    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self):
        """Validate configuration."""
        if not self.api_key:
            raise ValueError("Trello API key is required")
        if not self.token:
            raise ValueError("Trello token is required")


# =============================================================================
# Client
# =============================================================================


class TrelloClient(IntegrationClient):
    """
    Async client for the Trello API.

    Provides methods for:
    - Lists and cards (read, create, update, archive)
    - Board activity feed
    - Cross-board search
    - Attachment listing and download

    Every request waits on the dual key/token rate limiter; quota
    rejections (429) are retried with a fixed 1s delay up to
    `max_rate_limit_retries` times.
    """

    def __init__(
        self,
        config: TrelloConfig,
        *,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize Trello client.

        Args:
            config: Trello configuration with API key and token
            rate_limiter: Override the default Trello quota limiter
            transport: Optional httpx transport (tests)
        """
        super().__init__(
            config,
            rate_limiter=rate_limiter or create_trello_rate_limiter(config.api_key, config.token),
            transport=transport,
        )
        self._config: TrelloConfig = config

    @property
    def name(self) -> str:
        """Integration name."""
        return "trello"

    def _get_auth_params(self) -> dict[str, str]:
        """Return Trello key/token query parameters."""
        return {"key": self._config.api_key, "token": self._config.token}

    def _oauth_header(self) -> str:
        return (
            f'OAuth oauth_consumer_key="{self._config.api_key}", '
            f'oauth_token="{self._config.token}"'
        )

    # =========================================================================
    # Lists
    # =========================================================================

    async def get_lists(self, board_id: str) -> list[BoardList]:
        """
        Get all lists on a board.

        Args:
            board_id: Board ID

        Returns:
            Lists in board order
        """
        response = await self._request("GET", f"/boards/{board_id}/lists")
        return [BoardList.model_validate(item) for item in response.json()]

    async def add_list(self, board_id: str, name: str) -> BoardList:
        """Create a list on a board."""
        logger.info(f"[trello] Adding list '{name}' to board {board_id}")
        response = await self._request(
            "POST",
            "/lists",
            json={"name": name, "idBoard": board_id},
        )
        return BoardList.model_validate(response.json())

    async def archive_list(self, list_id: str) -> BoardList:
        """Archive (close) a list."""
        logger.info(f"[trello] Archiving list {list_id}")
        response = await self._request(
            "PUT",
            f"/lists/{list_id}/closed",
            json={"value": True},
        )
        return BoardList.model_validate(response.json())

    # =========================================================================
    # Cards
    # =========================================================================

    async def get_cards_by_list(self, list_id: str) -> list[Card]:
        """
        Get the open cards of a list.

        Args:
            list_id: List ID

        Returns:
            Cards in list order
        """
        response = await self._request("GET", f"/lists/{list_id}/cards")
        return [Card.model_validate(item) for item in response.json()]

    async def get_my_cards(self) -> list[Card]:
        """Get every card the token's member belongs to."""
        response = await self._request("GET", "/members/me/cards")
        return [Card.model_validate(item) for item in response.json()]

    async def add_card(
        self,
        list_id: str,
        name: str,
        *,
        description: str | None = None,
        due_date: str | None = None,
        labels: list[str] | None = None,
    ) -> Card:
        """
        Create a card.

        Args:
            list_id: List to add the card to
            name: Card title
            description: Card description (markdown)
            due_date: Due date (ISO 8601)
            labels: Label IDs

        Returns:
            Created card
        """
        body = _drop_none(
            {
                "idList": list_id,
                "name": name,
                "desc": description,
                "due": due_date,
                "idLabels": labels,
            }
        )

        logger.info(f"[trello] Creating card: {name} in list {list_id}")
        response = await self._request("POST", "/cards", json=body)

        card = Card.model_validate(response.json())
        logger.info(f"[trello] Created card: {card.id}")
        return card

    async def update_card(
        self,
        card_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        due_date: str | None = None,
        labels: list[str] | None = None,
    ) -> Card:
        """
        Update a card.

        Only provided fields will be updated.
        """
        body = _drop_none(
            {
                "name": name,
                "desc": description,
                "due": due_date,
                "idLabels": labels,
            }
        )

        logger.info(f"[trello] Updating card: {card_id}")
        response = await self._request("PUT", f"/cards/{card_id}", json=body)
        return Card.model_validate(response.json())

    async def archive_card(self, card_id: str) -> Card:
        """Archive (close) a card."""
        logger.info(f"[trello] Archiving card: {card_id}")
        response = await self._request("PUT", f"/cards/{card_id}", json={"closed": True})
        return Card.model_validate(response.json())

    # =========================================================================
    # Activity & Search
    # =========================================================================

    async def get_recent_activity(self, board_id: str, limit: int = 10) -> list[Action]:
        """
        Get a board's most recent actions, newest first.

        Args:
            board_id: Board ID
            limit: Maximum number of actions to return
        """
        response = await self._request(
            "GET",
            f"/boards/{board_id}/actions",
            params={"limit": limit},
        )
        return [Action.model_validate(item) for item in response.json()]

    async def search_all_boards(self, query: str, limit: int = 10) -> dict[str, Any]:
        """
        Search boards, cards and other models across the member's workspaces.

        Returns Trello's raw search payload (boards, cards, members, ...).
        """
        response = await self._request(
            "GET",
            "/search",
            params={
                "query": query,
                "modelTypes": "all",
                "boards_limit": limit,
                "cards_limit": limit,
                "organization": "true",
            },
        )
        return response.json()

    # =========================================================================
    # Attachments
    # =========================================================================

    async def get_card_attachments(self, card_id: str) -> list[Attachment]:
        """List a card's attachments (uploads and external links)."""
        response = await self._request("GET", f"/cards/{card_id}/attachments")
        return [Attachment.model_validate(item) for item in response.json()]

    async def get_attachment(self, card_id: str, attachment_id: str) -> Attachment:
        response = await self._request("GET", f"/cards/{card_id}/attachments/{attachment_id}")
        return Attachment.model_validate(response.json())

    async def download_attachment(self, card_id: str, attachment_id: str) -> AttachmentDownload:
        """
        Download an attachment's content as base64.

        External links are not fetched; only their URL is returned. A failed
        content download is reported in `error` rather than raised, so the
        caller still gets the metadata and URL.
        """
        attachment = await self.get_attachment(card_id, attachment_id)

        if not attachment.is_upload:
            return AttachmentDownload(attachment=attachment, url=attachment.url)

        try:
            async with httpx.AsyncClient(
                timeout=DOWNLOAD_TIMEOUT,
                follow_redirects=True,
                max_redirects=DOWNLOAD_MAX_REDIRECTS,
                transport=self._transport,
            ) as downloader:
                response = await downloader.get(
                    attachment.url,
                    headers={"Accept": "*/*", "Authorization": self._oauth_header()},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            reason = f"HTTP {e.response.status_code}: {e.response.reason_phrase}"
            return self._failed_download(attachment, reason)
        except httpx.HTTPError as e:
            reason = f"Network error: {type(e).__name__} - {e}"
            return self._failed_download(attachment, reason)

        return AttachmentDownload(
            attachment=attachment,
            content=base64.b64encode(response.content).decode("ascii"),
            url=attachment.url,
        )

    def _failed_download(self, attachment: Attachment, reason: str) -> AttachmentDownload:
        logger.error(f"[trello] Failed to download attachment {attachment.id}: {reason}")
        return AttachmentDownload(
            attachment=attachment,
            url=attachment.url,
            error=f"Download failed: {reason}",
        )


def _drop_none(body: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in body.items() if value is not None}
