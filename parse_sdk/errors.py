"""
Error taxonomy for the Parse SDK.

Every failure the request pipeline can produce converges to a single
ParseError carrying a numeric code and a human-readable message:

- Configuration errors (e.g. master key requested but not provided) are
  raised before any I/O and are never normalized.
- Transport errors (no connectivity, DNS, timeout) become CONNECTION_FAILED.
- Protocol errors (server answered, body is not JSON) become INVALID_JSON.
- Application errors (server answered with {"code", "error"}) pass through.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class ParseError(Exception):
    """Normalized error returned by every SDK operation that talks to the server."""

    OTHER_CAUSE = -1
    INTERNAL_SERVER_ERROR = 1
    CONNECTION_FAILED = 100
    OBJECT_NOT_FOUND = 101
    INVALID_QUERY = 102
    INVALID_JSON = 107
    COMMAND_UNAVAILABLE = 108
    NOT_INITIALIZED = 109
    INVALID_FILE_NAME = 122
    FILE_SAVE_ERROR = 130
    INVALID_SESSION_TOKEN = 209

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"ParseError(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "error": self.message}


class ConfigurationError(Exception):
    """Raised when the client is used in a way its configuration cannot support."""

    pass


class MasterKeyNotConfiguredError(ConfigurationError):
    """Raised when a request asks for the master key but none was provided."""

    def __init__(self, message: str = "Cannot use the Master Key, it has not been provided."):
        super().__init__(message)


class TransportError(Exception):
    """
    Raised by transport adapters when a network exchange fails.

    Attributes:
        response_text: Raw body returned by the server, or None when the
            server was never reached (connectivity, DNS, timeout).
        status: HTTP status code when a response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        response_text: str | None = None,
        status: int | None = None,
    ):
        super().__init__(message)
        self.response_text = response_text
        self.status = status

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": str(self),
            "status": self.status,
            "responseText": self.response_text,
        }


# =============================================================================
# Normalization
# =============================================================================


def _describe_failure(failure: Any) -> str:
    """Serialize a failure for embedding in a CONNECTION_FAILED message."""
    to_dict = getattr(failure, "to_dict", None)
    if callable(to_dict):
        try:
            return json.dumps(to_dict(), default=str)
        except (TypeError, ValueError):
            pass
    if isinstance(failure, BaseException):
        return json.dumps({"type": type(failure).__name__, "message": str(failure)})
    return json.dumps(failure, default=repr)


def normalize_error(failure: Any) -> ParseError:
    """
    Convert any pipeline failure into exactly one ParseError.

    Args:
        failure: The exception (or raw rejection value) raised while
            resolving identity, dispatching, or unwrapping a response.

    Returns:
        ParseError classified as pass-through, INVALID_JSON or
        CONNECTION_FAILED.
    """
    if isinstance(failure, ParseError):
        return failure

    response_text = getattr(failure, "response_text", None)
    if response_text:
        try:
            error_json = json.loads(response_text)
        except ValueError:
            error_json = None

        if isinstance(error_json, dict) and "code" in error_json and "error" in error_json:
            return ParseError(error_json["code"], error_json["error"])

        logger.debug(f"[errors] Unparseable error body: {response_text[:200]}")
        return ParseError(
            ParseError.INVALID_JSON,
            f"Received an error with invalid JSON from Parse: {response_text}",
        )

    return ParseError(
        ParseError.CONNECTION_FAILED,
        f"Request failed: {_describe_failure(failure)}",
    )
