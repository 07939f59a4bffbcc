"""
Controller Registry for the Parse SDK.

Maps each capability (request transport, files, storage, installation
identity, user session) to exactly one bound implementation.

Bindings are expected to happen once, during startup, from a single
thread. Concurrent reads are safe; rebinding while requests are in flight
is not guarded and must be avoided by the caller.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .protocol import (
        FileController,
        InstallationController,
        StorageController,
        Transport,
        UserController,
    )

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """Named roles that can be bound in the registry."""

    REQUEST = "request"
    FILE = "file"
    STORAGE = "storage"
    INSTALLATION = "installation"
    USER = "user"


class ControllerNotConfiguredError(Exception):
    """
    Raised when a capability is used before anything was bound to it.

    This indicates a startup wiring problem, not a runtime failure.
    """

    def __init__(self, capability: Capability, bound: list[Capability]):
        available = ", ".join(c.value for c in bound) or "(none)"
        super().__init__(
            f"No controller bound for capability: {capability.value}. "
            f"Bound: {available}"
        )
        self.capability = capability


class ControllerRegistry:
    """
    Registry of capability implementations.

    Example:
        registry = ControllerRegistry()
        registry.bind(Capability.REQUEST, HttpxTransport())
        registry.bind(Capability.STORAGE, MemoryStorageController())

        transport = registry.get(Capability.REQUEST)
    """

    def __init__(self) -> None:
        self._controllers: dict[Capability, Any] = {}

    def bind(self, capability: Capability, controller: Any) -> None:
        """
        Bind an implementation to a capability.

        Last writer wins. No interface validation happens here; a
        non-conforming implementation fails when it is first called.
        """
        capability = Capability(capability)
        if capability in self._controllers:
            logger.warning(f"[registry] Replacing controller for {capability.value}")
        self._controllers[capability] = controller
        logger.debug(
            f"[registry] Bound {capability.value} -> {type(controller).__name__}"
        )

    def get(self, capability: Capability) -> Any:
        """
        Get the implementation bound to a capability.

        Raises:
            ControllerNotConfiguredError: If nothing was ever bound
        """
        capability = Capability(capability)
        controller = self._controllers.get(capability)
        if controller is None:
            raise ControllerNotConfiguredError(capability, self.bound_capabilities)
        return controller

    def get_optional(self, capability: Capability) -> Any | None:
        """Get the bound implementation, or None if the slot is empty."""
        return self._controllers.get(Capability(capability))

    def has(self, capability: Capability) -> bool:
        return self._controllers.get(Capability(capability)) is not None

    def unbind(self, capability: Capability) -> bool:
        """Remove a binding. Returns True if something was removed."""
        capability = Capability(capability)
        if capability in self._controllers:
            del self._controllers[capability]
            logger.debug(f"[registry] Unbound {capability.value}")
            return True
        return False

    def clear(self) -> None:
        """Remove every binding (for testing)."""
        self._controllers.clear()

    @property
    def bound_capabilities(self) -> list[Capability]:
        return [c for c, impl in self._controllers.items() if impl is not None]

    # ==================== Typed accessors ====================

    @property
    def rest(self) -> Transport:
        return self.get(Capability.REQUEST)

    @property
    def files(self) -> FileController:
        return self.get(Capability.FILE)

    @property
    def storage(self) -> StorageController:
        return self.get(Capability.STORAGE)

    @property
    def installation(self) -> InstallationController:
        return self.get(Capability.INSTALLATION)

    @property
    def users(self) -> UserController | None:
        return self.get_optional(Capability.USER)

    def __repr__(self) -> str:
        bound = ", ".join(
            f"{c.value}={type(impl).__name__}" for c, impl in self._controllers.items()
        )
        return f"ControllerRegistry({bound})"


# Global registry instance (can be replaced in tests)
_registry: ControllerRegistry | None = None


def get_registry() -> ControllerRegistry:
    """
    Get the process-wide default registry.

    Creates the registry on first access (lazy initialization).
    """
    global _registry
    if _registry is None:
        _registry = ControllerRegistry()
    return _registry


def set_registry(registry: ControllerRegistry) -> None:
    """Replace the process-wide default registry."""
    global _registry
    _registry = registry


def reset_registry() -> None:
    """Reset the process-wide default registry (for testing)."""
    global _registry
    if _registry is not None:
        _registry.clear()
    _registry = None
