"""
Capability interfaces for the Parse SDK.

Each capability the SDK depends on is a structural protocol. Any object
with the right methods can be bound in the ControllerRegistry; conformance
is only checked when a method is actually called.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from parse_sdk.file import FileSource
    from parse_sdk.rest import RequestOptions


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """
    Result of a single raw network exchange.

    Attributes:
        status: HTTP status code
        body: Parsed response body (JSON value, or raw text if not JSON)
        headers: Response headers
    """

    status: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class Transport(Protocol):
    """
    Performs one network exchange.

    Implementations must raise parse_sdk.errors.TransportError (not
    return an error value) on failure, with `response_text` set when the
    server answered and left as None when it was never reached.
    """

    async def send(
        self,
        method: str,
        url: str,
        body: str | bytes | None,
        headers: dict[str, str],
    ) -> TransportResponse:
        ...


@runtime_checkable
class FileController(Protocol):
    """Uploads a file and returns the server's {"name", "url"} record."""

    async def save_file(
        self,
        name: str,
        source: FileSource | None,
        options: RequestOptions | None = None,
    ) -> dict[str, Any]:
        ...


@runtime_checkable
class StorageController(Protocol):
    """
    Best-effort key/value store.

    get_item never raises; set_item silently drops values it cannot store.
    """

    is_async: bool

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...


@runtime_checkable
class InstallationController(Protocol):
    """Provides an identifier that is stable for the life of the install."""

    async def current_installation_id(self) -> str:
        ...


@runtime_checkable
class SessionUser(Protocol):
    def get_session_token(self) -> str | None:
        ...


@runtime_checkable
class UserController(Protocol):
    """Resolves the currently authenticated user, if any."""

    async def current_user_async(self) -> SessionUser | None:
        ...
