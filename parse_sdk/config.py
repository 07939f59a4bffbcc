"""
Client configuration for the Parse SDK.

Settings are a pydantic model so that values are validated once, at
construction, and secrets never show up in logs or reprs.

Security:
    The master key uses SecretStr. Access the value with
    `settings.master_key.get_secret_value()`.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from pydantic import BaseModel, Field, SecretStr

from parse_sdk import __version__

logger = logging.getLogger(__name__)


class ClientSettings(BaseModel):
    """
    Connection and identity settings shared by every controller.

    Attributes:
        application_id: Application identity sent with every request
        javascript_key: Optional client key
        master_key: Optional elevated credential
        server_url: Base server URL (e.g. "https://api.example.com/parse")
        version: Client library version reported as _ClientVersion
        use_master_key: Default for requests that do not say otherwise
        force_revocable_session: Ask the server to upgrade to revocable sessions
        timeout: Transport timeout in seconds
        installation_storage_key: Storage key under which the installation id lives
    """

    application_id: str = Field(..., min_length=1, description="Application ID")
    javascript_key: str | None = Field(None, description="Client (JavaScript) key")
    master_key: SecretStr | None = Field(None, description="Master key")
    server_url: str = Field("https://api.parse.com/1", description="Base server URL")
    version: str = Field(default=f"python{__version__}", description="Client version")
    use_master_key: bool = False
    force_revocable_session: bool = False
    timeout: float = Field(30.0, gt=0)
    installation_storage_key: str = "installationId"

    @property
    def has_master_key(self) -> bool:
        return self.master_key is not None and bool(self.master_key.get_secret_value())

    def build_url(self, path: str) -> str:
        """
        Join the server URL and a request path with exactly one slash.

        No other normalization is applied: no percent-encoding and no
        query-string handling.
        """
        url = self.server_url
        if not url.endswith("/"):
            url += "/"
        return url + path


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() in ("1", "true", "yes")


@lru_cache()
def load_settings() -> ClientSettings:
    """
    Load client settings from PARSE_* environment variables.

    Uses lru_cache for singleton pattern; call `load_settings.cache_clear()`
    to pick up changed variables.
    """
    settings = ClientSettings(
        application_id=os.getenv("PARSE_APPLICATION_ID", ""),
        javascript_key=os.getenv("PARSE_JAVASCRIPT_KEY") or None,
        master_key=os.getenv("PARSE_MASTER_KEY") or None,
        server_url=os.getenv("PARSE_SERVER_URL", "https://api.parse.com/1"),
        use_master_key=_env_flag("PARSE_USE_MASTER_KEY"),
        force_revocable_session=_env_flag("PARSE_FORCE_REVOCABLE_SESSION"),
        timeout=float(os.getenv("PARSE_TIMEOUT", "30")),
    )
    logger.debug(f"[config] Loaded settings for application {settings.application_id}")
    return settings
