"""
User session controller for the Parse SDK.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class ParseUser:
    """Authenticated end user as far as request signing is concerned."""

    object_id: str | None = None
    username: str | None = None
    session_token: str | None = None

    def get_session_token(self) -> str | None:
        return self.session_token


class CurrentUserController:
    """Keeps the current user in memory."""

    def __init__(self, user: ParseUser | None = None):
        self._current_user = user

    def set_current_user(self, user: ParseUser | None) -> None:
        self._current_user = user
        if user is not None:
            logger.debug(f"[user] Current user set to {user.object_id}")

    def log_out(self) -> None:
        self._current_user = None

    async def current_user_async(self) -> ParseUser | None:
        return self._current_user
