"""
Request Pipeline for the Parse SDK.

Turns a logical call (verb, path, data, options) into a signed request,
dispatches it through the bound Transport, and normalizes the outcome.

Flow of one request():
    1. Non-POST verbs are tunnelled as `_method` inside a POST body
    2. Caller data is shallow-copied into a fresh payload
    3. Application id, client key and client version are injected
    4. Master key replaces the client key when requested
    5. Revocable-session marker is added when forced by settings
    6. Installation id is resolved (first suspension point)
    7. Session token is resolved (second suspension point, strictly after 6)
    8. Payload is serialized to JSON
    9. Transport is called with POST, server_url + path, body
   10. Response body is unwrapped
   11. Any failure in 6-10 is normalized to a ParseError

There is no retry and no timeout handling here; the Transport owns both.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .config import ClientSettings, load_settings
from .controllers.registry import (
    Capability,
    ControllerNotConfiguredError,
    ControllerRegistry,
    get_registry,
)
from .errors import MasterKeyNotConfiguredError, normalize_error

logger = logging.getLogger(__name__)

JOB_STATUS_HEADER = "X-Parse-Job-Status-Id"


# =============================================================================
# Request records
# =============================================================================


@dataclass
class RequestOptions:
    """
    Per-call overrides.

    Attributes:
        use_master_key: Use the master key for this call; None defers to settings
        session_token: Explicit session token instead of the current user's
        installation_id: Explicit installation id instead of the stored one
    """

    use_master_key: bool | None = None
    session_token: str | None = None
    installation_id: str | None = None


@dataclass
class RequestPayload:
    """
    Body of one outgoing request.

    Holds the caller's data plus every field the pipeline injects.
    Built fresh per call and never reused.
    """

    application_id: str
    client_version: str
    data: dict[str, Any] = field(default_factory=dict)
    method: str | None = None
    javascript_key: str | None = None
    master_key: str | None = None
    revocable_session: bool = False
    installation_id: str | None = None
    session_token: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render wire field names, omitting unset optional fields."""
        payload = dict(self.data)
        if self.method is not None:
            payload["_method"] = self.method
        payload["_ApplicationId"] = self.application_id
        if self.javascript_key:
            payload["_JavaScriptKey"] = self.javascript_key
        payload["_ClientVersion"] = self.client_version
        if self.master_key:
            payload["_MasterKey"] = self.master_key
        if self.revocable_session:
            payload["_RevocableSession"] = "1"
        if self.installation_id is not None:
            payload["_InstallationId"] = self.installation_id
        if self.session_token:
            payload["_SessionToken"] = self.session_token
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


def _header_value(headers: Mapping[str, str], name: str) -> str | None:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


# =============================================================================
# Controller
# =============================================================================


class RESTController:
    """
    Builds, dispatches and normalizes REST calls.

    Example:
        rest = RESTController(settings, registry)
        result = await rest.request("GET", "classes/GameScore/abc123")
    """

    def __init__(
        self,
        settings: ClientSettings,
        registry: ControllerRegistry | None = None,
    ):
        self._settings = settings
        self._registry = registry or get_registry()

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def registry(self) -> ControllerRegistry:
        return self._registry

    def build_payload(
        self,
        method: str,
        data: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> tuple[str, RequestPayload]:
        """
        Build the payload for a call, without any I/O.

        Returns:
            (wire_method, payload); wire_method is always "POST"

        Raises:
            MasterKeyNotConfiguredError: If the master key is requested but absent
            TypeError: If data is not a mapping
        """
        options = options or RequestOptions()

        if data is None:
            data = {}
        elif not isinstance(data, Mapping):
            raise TypeError(f"Request data must be a mapping, got {type(data).__name__}")

        payload = RequestPayload(
            application_id=self._settings.application_id,
            client_version=self._settings.version,
            data=dict(data),
            javascript_key=self._settings.javascript_key or None,
        )

        if method != "POST":
            payload.method = method
            method = "POST"

        use_master_key = options.use_master_key
        if use_master_key is None:
            use_master_key = self._settings.use_master_key
        if use_master_key:
            if not self._settings.has_master_key:
                raise MasterKeyNotConfiguredError()
            payload.javascript_key = None
            payload.master_key = self._settings.master_key.get_secret_value()

        if self._settings.force_revocable_session:
            payload.revocable_session = True

        return method, payload

    def build_headers(self, payload: RequestPayload) -> dict[str, str]:
        """Headers sent with every request; the client key is omitted under the master key."""
        headers = {
            "Content-Type": "application/json",
            "X-Parse-Application-Id": payload.application_id,
        }
        if payload.javascript_key:
            headers["X-Parse-JavaScript-Key"] = payload.javascript_key
        return headers

    def _check_wiring(self, options: RequestOptions) -> None:
        """Raise for an empty slot before anything is awaited."""
        required = [Capability.REQUEST]
        if not (isinstance(options.installation_id, str) and options.installation_id):
            required.append(Capability.INSTALLATION)
        for capability in required:
            if not self._registry.has(capability):
                raise ControllerNotConfiguredError(
                    capability, self._registry.bound_capabilities
                )

    async def _resolve_installation_id(self, options: RequestOptions) -> str:
        if isinstance(options.installation_id, str) and options.installation_id:
            return options.installation_id
        return await self._registry.installation.current_installation_id()

    async def _resolve_session_token(self, options: RequestOptions) -> str | None:
        if isinstance(options.session_token, str):
            return options.session_token
        users = self._registry.users
        if users is None:
            return None
        user = await users.current_user_async()
        if user is None:
            return None
        return user.get_session_token()

    async def ajax(
        self,
        method: str,
        url: str,
        body: str | None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Send one raw request through the bound Transport.

        Returns the job status id when the server reports one, otherwise
        the parsed response body. Transport failures propagate unchanged.
        """
        transport = self._registry.rest
        response = await transport.send(method, url, body, headers or {})
        logger.debug(f"[rest] {method} {url} -> {response.status}")
        job_status_id = _header_value(response.headers, JOB_STATUS_HEADER)
        if job_status_id:
            return job_status_id
        return response.body

    async def request(
        self,
        method: str,
        path: str,
        data: Mapping[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> Any:
        """
        Execute a logical API call.

        Args:
            method: HTTP verb ("GET", "POST", "PUT", "DELETE", ...)
            path: Path relative to the server URL (e.g. "classes/Note")
            data: Request fields; copied, never mutated
            options: Per-call overrides

        Returns:
            The unwrapped response body

        Raises:
            MasterKeyNotConfiguredError: Before any I/O, if the master key is missing
            ControllerNotConfiguredError: Before any I/O, if a required slot is empty
            ParseError: For every failure once identity resolution has started
        """
        options = options or RequestOptions()
        wire_method, payload = self.build_payload(method, data, options)
        url = self._settings.build_url(path)

        self._check_wiring(options)

        try:
            payload.installation_id = await self._resolve_installation_id(options)
            payload.session_token = await self._resolve_session_token(options)
            logger.debug(
                f"[rest] {method} {path} payload keys={sorted(payload.to_dict().keys())}"
            )
            return await self.ajax(
                wire_method, url, payload.to_json(), self.build_headers(payload)
            )
        except Exception as e:
            error = normalize_error(e)
            logger.warning(f"[rest] {method} {path} failed: {error}")
            if error is e:
                raise
            raise error from e


async def request(
    method: str,
    path: str,
    data: Mapping[str, Any] | None = None,
    options: RequestOptions | None = None,
) -> Any:
    """Run a request against the default registry with environment settings."""
    return await RESTController(load_settings(), get_registry()).request(
        method, path, data, options
    )


async def ajax(
    method: str,
    url: str,
    body: str | None,
    headers: dict[str, str] | None = None,
) -> Any:
    """Send a raw request through the default registry's Transport."""
    return await RESTController(load_settings(), get_registry()).ajax(
        method, url, body, headers
    )
