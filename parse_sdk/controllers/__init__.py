"""
Controller layer for the Parse SDK.

Core Components:
- Capability: the fixed set of roles a controller can fill
- ControllerRegistry: one bound implementation per capability
- Protocols: Transport, FileController, StorageController,
  InstallationController, UserController

Usage:
    from parse_sdk.controllers import Capability, ControllerRegistry

    registry = ControllerRegistry()
    registry.bind(Capability.REQUEST, HttpxTransport())
    transport = registry.get(Capability.REQUEST)
"""

from .protocol import (
    FileController,
    InstallationController,
    SessionUser,
    StorageController,
    Transport,
    TransportResponse,
    UserController,
)
from .registry import (
    Capability,
    ControllerNotConfiguredError,
    ControllerRegistry,
    get_registry,
    reset_registry,
    set_registry,
)

__all__ = [
    # Registry
    "Capability",
    "ControllerNotConfiguredError",
    "ControllerRegistry",
    "get_registry",
    "reset_registry",
    "set_registry",
    # Protocols
    "FileController",
    "InstallationController",
    "SessionUser",
    "StorageController",
    "Transport",
    "TransportResponse",
    "UserController",
]
