"""
Client construction for the Parse SDK.

Adapters are chosen explicitly by the caller; nothing is inferred from
the environment. The transport is mandatory. Storage, installation
identity and file uploads get explicit defaults; the user slot stays
empty unless a controller is supplied.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .config import ClientSettings
from .controllers.protocol import (
    FileController,
    InstallationController,
    StorageController,
    Transport,
    UserController,
)
from .controllers.registry import Capability, ControllerRegistry
from .errors import ConfigurationError
from .file import FileChooser, HttpFileController, ParseFile
from .installation import StorageInstallationController
from .rest import RequestOptions, RESTController
from .storage import MemoryStorageController

logger = logging.getLogger(__name__)


class ParseClient:
    """
    A configured SDK instance: settings, bound controllers and the REST pipeline.

    Example:
        client = ClientBuilder(settings).with_transport(HttpxTransport()).build()
        note = await client.request("POST", "classes/Note", {"text": "hi"})
    """

    def __init__(self, settings: ClientSettings, registry: ControllerRegistry):
        self.settings = settings
        self.registry = registry
        self.rest = RESTController(settings, registry)

    async def request(
        self,
        method: str,
        path: str,
        data: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> Any:
        return await self.rest.request(method, path, data, options)

    def new_file(
        self,
        name: str,
        data: bytes | None = None,
        content_type: str | None = None,
    ) -> ParseFile:
        """Create a file handle bound to this client's registry."""
        return ParseFile(name, data, content_type, registry=self.registry)

    async def aclose(self) -> None:
        """Close the transport if it holds resources."""
        close = getattr(self.registry.get_optional(Capability.REQUEST), "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "ParseClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


class ClientBuilder:
    """
    Builder for constructing a ParseClient with fluent API.

    Example:
        client = (
            ClientBuilder(settings)
            .with_transport(HttpxTransport(timeout=settings.timeout))
            .with_storage(FileStorageController("~/.parse/storage.json"))
            .with_user_controller(CurrentUserController())
            .build()
        )
    """

    def __init__(self, settings: ClientSettings) -> None:
        self._settings = settings
        self._transport: Transport | None = None
        self._files: FileController | None = None
        self._storage: StorageController | None = None
        self._installation: InstallationController | None = None
        self._users: UserController | None = None
        self._chooser: FileChooser | None = None

    def with_transport(self, transport: Transport) -> "ClientBuilder":
        self._transport = transport
        return self

    def with_file_controller(self, controller: FileController) -> "ClientBuilder":
        self._files = controller
        return self

    def with_file_chooser(self, chooser: FileChooser) -> "ClientBuilder":
        """Picker used by the default file controller for files without data."""
        self._chooser = chooser
        return self

    def with_storage(self, storage: StorageController) -> "ClientBuilder":
        self._storage = storage
        return self

    def with_installation(self, controller: InstallationController) -> "ClientBuilder":
        self._installation = controller
        return self

    def with_user_controller(self, controller: UserController) -> "ClientBuilder":
        self._users = controller
        return self

    def build(self) -> ParseClient:
        """
        Bind every controller into a fresh registry and return the client.

        Raises:
            ConfigurationError: If no transport was supplied
        """
        if self._transport is None:
            raise ConfigurationError("A transport is required; call with_transport() first")

        registry = ControllerRegistry()
        storage = self._storage or MemoryStorageController()

        registry.bind(Capability.REQUEST, self._transport)
        registry.bind(Capability.STORAGE, storage)
        registry.bind(
            Capability.INSTALLATION,
            self._installation
            or StorageInstallationController(storage, self._settings.installation_storage_key),
        )
        registry.bind(
            Capability.FILE,
            self._files or HttpFileController(self._settings, registry, self._chooser),
        )
        if self._users is not None:
            registry.bind(Capability.USER, self._users)

        logger.info(f"[builder] Built client for application {self._settings.application_id}")
        return ParseClient(self._settings, registry)
