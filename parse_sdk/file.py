"""
File Save Pipeline for the Parse SDK.

A ParseFile is a local handle for a file stored on the server. Saving
uploads the content once through the bound FileController and then
rewrites the handle in place with the server-assigned name and URL.

Concurrent save() calls on the same handle share one upload: the
in-flight task is memoized on the instance.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from .config import ClientSettings
from .controllers.registry import Capability, ControllerRegistry, get_registry
from .errors import MasterKeyNotConfiguredError, ParseError, normalize_error
from .rest import RequestOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileSource:
    """Bytes to upload and their content type."""

    data: bytes
    content_type: str | None = None


# Host-supplied picker: receives the file name, returns the chosen content
FileChooser = Callable[[str], Awaitable[FileSource]]


class ParseFile:
    """
    Local representation of a file saved to the server.

    Before save() completes, name() is the caller's name and url() is None.
    After a successful save, name() is the server-assigned name and url()
    is populated.

    Example:
        photo = ParseFile("photo.jpg", data=b"...", content_type="image/jpeg")
        await photo.save()
        print(photo.url())
    """

    __hash__ = None  # mutable value equality

    def __init__(
        self,
        name: str,
        data: bytes | None = None,
        content_type: str | None = None,
        *,
        registry: ControllerRegistry | None = None,
    ):
        self._name = name
        self._url: str | None = None
        self._source = FileSource(data, content_type) if data is not None else None
        self._registry = registry
        self._previous_save: asyncio.Future[ParseFile] | None = None

    def name(self) -> str:
        return self._name

    def url(self, force_secure: bool = False) -> str | None:
        """
        Get the file URL, available only after a successful save.

        Args:
            force_secure: Rewrite an http:// URL to https://
        """
        if not self._url:
            return None
        if force_secure:
            return re.sub(r"^http://", "https://", self._url, flags=re.IGNORECASE)
        return self._url

    def save(self, options: RequestOptions | None = None) -> asyncio.Future[ParseFile]:
        """
        Upload the file, or join the upload already started for this handle.

        Must be called with a running event loop. Every call on the same
        handle returns the same future, including after it has finished.

        Raises:
            ControllerNotConfiguredError: If no FileController is bound
        """
        if self._previous_save is None:
            registry = self._registry or get_registry()
            controller = registry.get(Capability.FILE)
            self._previous_save = asyncio.ensure_future(self._upload(controller, options))
        return self._previous_save

    async def _upload(self, controller: Any, options: RequestOptions | None) -> ParseFile:
        result = await controller.save_file(self._name, self._source, options)
        self._name = result["name"]
        self._url = result["url"]
        logger.info(f"[file] Saved {self._name}")
        return self

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ParseFile):
            return NotImplemented
        # Unsaved files are never equal, since they will be saved to different URLs
        return (
            self._url is not None
            and self._name == other._name
            and self._url == other._url
        )

    def __repr__(self) -> str:
        return f"ParseFile(name={self._name!r}, url={self._url!r})"


class HttpFileController:
    """
    Uploads files to `<server_url>/files/<name>` through the bound Transport.

    When a file has no in-memory content, the host's `chooser` is asked to
    provide it (e.g. a native file picker).
    """

    def __init__(
        self,
        settings: ClientSettings,
        registry: ControllerRegistry | None = None,
        chooser: FileChooser | None = None,
    ):
        self._settings = settings
        self._registry = registry or get_registry()
        self._chooser = chooser

    def _uses_master_key(self, options: RequestOptions) -> bool:
        """
        Decide whether this upload is signed with the master key.

        Raises:
            MasterKeyNotConfiguredError: If the master key is requested but absent
        """
        use_master_key = options.use_master_key
        if use_master_key is None:
            use_master_key = self._settings.use_master_key
        if use_master_key and not self._settings.has_master_key:
            raise MasterKeyNotConfiguredError()
        return bool(use_master_key)

    def build_headers(
        self,
        source: FileSource,
        options: RequestOptions,
        use_master_key: bool = False,
    ) -> dict[str, str]:
        headers = {"X-Parse-Application-Id": self._settings.application_id}

        if use_master_key:
            headers["X-Parse-Master-Key"] = self._settings.master_key.get_secret_value()
        elif self._settings.javascript_key:
            headers["X-Parse-JavaScript-Key"] = self._settings.javascript_key

        if options.session_token:
            headers["X-Parse-Session-Token"] = options.session_token
        headers["Content-Type"] = source.content_type or "application/octet-stream"
        return headers

    async def _resolve_source(self, name: str, source: FileSource | None) -> FileSource:
        if source is not None:
            return source
        if self._chooser is None:
            raise ParseError(ParseError.FILE_SAVE_ERROR, f"No content available for file: {name}")
        return await self._chooser(name)

    async def _resolve_session_token(self, options: RequestOptions) -> RequestOptions:
        if options.session_token is not None or self._registry.users is None:
            return options
        user = await self._registry.users.current_user_async()
        token = user.get_session_token() if user is not None else None
        return RequestOptions(
            use_master_key=options.use_master_key,
            session_token=token,
            installation_id=options.installation_id,
        )

    async def save_file(
        self,
        name: str,
        source: FileSource | None,
        options: RequestOptions | None = None,
    ) -> dict[str, Any]:
        """
        Upload one file.

        Returns:
            The server's {"name": ..., "url": ...} record

        Raises:
            MasterKeyNotConfiguredError: Before I/O, if the master key is requested but absent
            ParseError: INVALID_FILE_NAME before I/O for an empty name,
                otherwise the normalized upload failure
        """
        if not name:
            raise ParseError(ParseError.INVALID_FILE_NAME, "Filename is required.")

        options = options or RequestOptions()
        use_master_key = self._uses_master_key(options)
        transport = self._registry.get(Capability.REQUEST)
        url = self._settings.build_url(f"files/{name}")

        try:
            source = await self._resolve_source(name, source)
            options = await self._resolve_session_token(options)
            response = await transport.send(
                "POST", url, source.data, self.build_headers(source, options, use_master_key)
            )
        except Exception as e:
            error = normalize_error(e)
            logger.warning(f"[file] Upload of {name} failed: {error}")
            if error is e:
                raise
            raise error from e

        body = response.body
        if not isinstance(body, dict) or "name" not in body or "url" not in body:
            raise ParseError(
                ParseError.FILE_SAVE_ERROR,
                f"Unexpected upload response for file: {name}",
            )
        return body
