"""
Application settings for the Trello MCP server.

Security:
    The API key and token use SecretStr to prevent accidental logging
    of credentials. Access the value with `.get_secret_value()`.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from pydantic import BaseModel, Field, SecretStr

from trellomcp.integrations.trello.client import DEFAULT_BASE_URL, TrelloConfig

logger = logging.getLogger(__name__)


_TRUTHY = {"1", "true", "yes", "on"}


class SettingsError(ValueError):
    """Raised when required settings are missing or invalid."""


class TrelloSettings(BaseModel):
    """
    Server settings, read from TRELLO_* environment variables.

    Security:
        Credentials use SecretStr; they never appear in repr or logs.
    """

    api_key: SecretStr = Field(..., description="Trello API key")
    token: SecretStr = Field(..., description="Trello access token")
    base_url: str = Field(DEFAULT_BASE_URL, description="Trello REST API root")
    attachment_dir: str | None = Field(None, description="Directory for downloaded attachments")
    log_level: str = Field("INFO", description="Logging level name")
    max_rate_limit_retries: int = Field(10, ge=0, description="Retries of 429 responses per call")
    log_http: bool = Field(False, description="Log every Trello request and response at DEBUG")

    def to_client_config(self) -> TrelloConfig:
        return TrelloConfig(
            api_key=self.api_key.get_secret_value(),
            token=self.token.get_secret_value(),
            base_url=self.base_url,
            max_rate_limit_retries=self.max_rate_limit_retries,
            log_requests=self.log_http,
            log_responses=self.log_http,
        )


def load_settings(environ: dict[str, str] | None = None) -> TrelloSettings:
    """
    Build settings from environment variables.

    Raises:
        SettingsError: If TRELLO_API_KEY or TRELLO_TOKEN is missing
    """
    env = os.environ if environ is None else environ

    api_key = env.get("TRELLO_API_KEY", "")
    token = env.get("TRELLO_TOKEN", "")
    if not api_key or not token:
        raise SettingsError("TRELLO_API_KEY / TRELLO_TOKEN are not set.")

    retries = env.get("TRELLO_MAX_RATE_LIMIT_RETRIES", "10")
    try:
        max_retries = int(retries)
    except ValueError as e:
        raise SettingsError(f"TRELLO_MAX_RATE_LIMIT_RETRIES must be an integer: {retries}") from e

    return TrelloSettings(
        api_key=api_key,
        token=token,
        base_url=env.get("TRELLO_BASE_URL", DEFAULT_BASE_URL),
        attachment_dir=env.get("TRELLO_ATTACHMENT_DIR") or None,
        log_level=env.get("TRELLO_MCP_LOG_LEVEL", "INFO").upper(),
        max_rate_limit_retries=max_retries,
        log_http=env.get("TRELLO_MCP_LOG_HTTP", "").lower() in _TRUTHY,
    )


@lru_cache()
def get_settings() -> TrelloSettings:
    """
    Get settings from the process environment.

    Uses lru_cache for singleton pattern.
    """
    return load_settings()
