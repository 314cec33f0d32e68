"""
Upstream Integrations Layer.

Each integration follows a consistent pattern:

1. Client: Handles authentication and API communication
2. Schemas: Pydantic models for response validation

Directory Structure:
    integrations/
    ├── base.py           # Error taxonomy, config, rate-limited HTTP client
    └── trello/           # Trello boards, lists, cards, attachments
        ├── client.py     # TrelloClient
        ├── schemas.py    # Pydantic models
        └── attachments.py  # Local attachment storage

Usage:
    from trellomcp.integrations.trello import TrelloClient, TrelloConfig

    async with TrelloClient(TrelloConfig(api_key="...", token="...")) as client:
        lists = await client.get_lists("board-123")
"""

from trellomcp.integrations.base import (
    AuthenticationError,
    IntegrationClient,
    IntegrationConfig,
    IntegrationError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "IntegrationClient",
    "IntegrationConfig",
    "IntegrationError",
    "NotFoundError",
    "RateLimitError",
    "ValidationError",
]
