"""
httpx Transport for the Parse SDK.

Performs exactly one HTTP exchange per send(). No retries: a failure is
raised as TransportError so the request pipeline can classify it.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..controllers.protocol import TransportResponse
from ..errors import TransportError

logger = logging.getLogger(__name__)


class HttpxTransport:
    """
    Transport backed by httpx.AsyncClient.

    Example:
        async with HttpxTransport(timeout=10.0) as transport:
            response = await transport.send("POST", url, body, headers)
    """

    def __init__(
        self,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the transport.

        Args:
            timeout: Request timeout in seconds (ignored when client is given)
            client: Pre-configured client, e.g. one using httpx.MockTransport.
                The caller keeps ownership; close() leaves it open.
        """
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def send(
        self,
        method: str,
        url: str,
        body: str | bytes | None,
        headers: dict[str, str],
    ) -> TransportResponse:
        """
        Send one request.

        Raises:
            TransportError: With response_text set for non-2xx answers and
                left as None when the server could not be reached.
        """
        client = await self._get_client()
        try:
            response = await client.request(method, url, content=body, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"[transport] {method} {url} timed out")
            raise TransportError(f"Request timeout: {e}") from e
        except httpx.TransportError as e:
            logger.warning(f"[transport] {method} {url} network error: {e}")
            raise TransportError(f"Network error: {e}") from e

        if not response.is_success:
            logger.debug(
                f"[transport] {method} {url} -> {response.status_code} "
                f"body={response.text[:500] if response.text else 'empty'}"
            )
            raise TransportError(
                f"Request failed with status {response.status_code}",
                response_text=response.text or None,
                status=response.status_code,
            )

        return TransportResponse(
            status=response.status_code,
            body=self._parse_body(response),
            headers=dict(response.headers),
        )

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
