"""
Configuration for the Trello MCP server.

Settings come from environment variables:
    TRELLO_API_KEY, TRELLO_TOKEN          (required)
    TRELLO_ATTACHMENT_DIR                 (optional local download dir)
    TRELLO_BASE_URL, TRELLO_MCP_LOG_LEVEL, TRELLO_MAX_RATE_LIMIT_RETRIES,
    TRELLO_MCP_LOG_HTTP
"""

from .settings import SettingsError, TrelloSettings, get_settings, load_settings

__all__ = [
    "SettingsError",
    "TrelloSettings",
    "get_settings",
    "load_settings",
]
