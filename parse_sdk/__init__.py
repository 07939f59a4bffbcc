"""
Parse SDK - client-side request orchestration for a Parse backend.

Turns logical operations (call an API path, save a file) into signed
requests and turns responses back into results or a normalized ParseError.

Quick Start:
    >>> from parse_sdk import ClientBuilder, ClientSettings
    >>> from parse_sdk.transports import HttpxTransport
    >>>
    >>> settings = ClientSettings(application_id="myAppId", server_url="https://example.com/parse")
    >>> client = ClientBuilder(settings).with_transport(HttpxTransport()).build()
    >>> score = await client.request("POST", "classes/GameScore", {"score": 1337})
"""

__version__ = "0.1.0"
__license__ = "MIT"

from parse_sdk.builder import ClientBuilder, ParseClient
from parse_sdk.config import ClientSettings, load_settings
from parse_sdk.controllers import Capability, ControllerNotConfiguredError, ControllerRegistry
from parse_sdk.errors import (
    ConfigurationError,
    MasterKeyNotConfiguredError,
    ParseError,
    TransportError,
    normalize_error,
)
from parse_sdk.file import FileSource, HttpFileController, ParseFile
from parse_sdk.rest import RequestOptions, RequestPayload, RESTController

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Client
    "ClientBuilder",
    "ClientSettings",
    "ParseClient",
    "load_settings",
    # Controllers
    "Capability",
    "ControllerNotConfiguredError",
    "ControllerRegistry",
    # Errors
    "ConfigurationError",
    "MasterKeyNotConfiguredError",
    "ParseError",
    "TransportError",
    "normalize_error",
    # Pipelines
    "FileSource",
    "HttpFileController",
    "ParseFile",
    "RequestOptions",
    "RequestPayload",
    "RESTController",
]
