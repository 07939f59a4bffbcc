"""
Installation identity for the Parse SDK.

The installation id is generated once per install and persisted in the
bound storage controller, so it is stable across process restarts.
"""

from __future__ import annotations

import logging
import uuid

from .controllers.protocol import StorageController

logger = logging.getLogger(__name__)


class StorageInstallationController:
    """Stores a uuid4 installation id under a fixed storage key."""

    def __init__(self, storage: StorageController, key: str = "installationId"):
        self._storage = storage
        self._key = key
        self._installation_id: str | None = None

    async def current_installation_id(self) -> str:
        if self._installation_id is not None:
            return self._installation_id

        stored = self._storage.get_item(self._key)
        if stored:
            self._installation_id = stored
        else:
            self._installation_id = str(uuid.uuid4())
            self._storage.set_item(self._key, self._installation_id)
            logger.info(f"[installation] Generated installation id {self._installation_id}")
        return self._installation_id
