"""
Tests for the Controller Registry.
"""

import pytest

from parse_sdk.controllers import (
    Capability,
    ControllerNotConfiguredError,
    ControllerRegistry,
    FileController,
    InstallationController,
    StorageController,
    Transport,
    UserController,
    get_registry,
    reset_registry,
    set_registry,
)
from parse_sdk.storage import MemoryStorageController
from parse_sdk.user import CurrentUserController

from conftest import FixedInstallation, RecordingTransport

# =============================================================================
# ControllerRegistry Tests
# =============================================================================


class TestControllerRegistry:
    def test_bind_and_get(self):
        registry = ControllerRegistry()
        transport = RecordingTransport()

        registry.bind(Capability.REQUEST, transport)

        assert registry.get(Capability.REQUEST) is transport
        assert registry.rest is transport

    def test_get_raises_when_not_bound(self):
        registry = ControllerRegistry()

        with pytest.raises(ControllerNotConfiguredError) as exc_info:
            registry.get(Capability.FILE)

        assert exc_info.value.capability is Capability.FILE
        assert "file" in str(exc_info.value)
        assert "Bound:" in str(exc_info.value)

    def test_last_writer_wins(self):
        registry = ControllerRegistry()
        first = RecordingTransport()
        second = RecordingTransport()

        registry.bind(Capability.REQUEST, first)
        registry.bind(Capability.REQUEST, second)

        assert registry.get(Capability.REQUEST) is second

    def test_bind_accepts_capability_value(self):
        registry = ControllerRegistry()
        storage = MemoryStorageController()

        registry.bind("storage", storage)

        assert registry.get(Capability.STORAGE) is storage

    def test_bind_rejects_unknown_capability(self):
        registry = ControllerRegistry()
        with pytest.raises(ValueError):
            registry.bind("push", object())

    def test_bind_does_not_validate_interface(self):
        registry = ControllerRegistry()
        registry.bind(Capability.REQUEST, object())
        assert registry.has(Capability.REQUEST)

    def test_slot_bound_to_none_is_empty(self):
        registry = ControllerRegistry()
        registry.bind(Capability.INSTALLATION, None)

        assert registry.has(Capability.INSTALLATION) is False
        assert registry.bound_capabilities == []
        with pytest.raises(ControllerNotConfiguredError):
            registry.get(Capability.INSTALLATION)

    def test_get_optional(self):
        registry = ControllerRegistry()
        assert registry.get_optional(Capability.USER) is None
        assert registry.users is None

        users = CurrentUserController()
        registry.bind(Capability.USER, users)
        assert registry.users is users

    def test_unbind(self):
        registry = ControllerRegistry()
        registry.bind(Capability.STORAGE, MemoryStorageController())

        assert registry.unbind(Capability.STORAGE) is True
        assert registry.unbind(Capability.STORAGE) is False
        assert registry.has(Capability.STORAGE) is False

    def test_bound_capabilities_and_clear(self):
        registry = ControllerRegistry()
        registry.bind(Capability.REQUEST, RecordingTransport())
        registry.bind(Capability.INSTALLATION, FixedInstallation())

        assert registry.bound_capabilities == [Capability.REQUEST, Capability.INSTALLATION]

        registry.clear()
        assert registry.bound_capabilities == []

    def test_repr(self):
        registry = ControllerRegistry()
        registry.bind(Capability.REQUEST, RecordingTransport())
        assert "request=RecordingTransport" in repr(registry)


# =============================================================================
# Default registry Tests
# =============================================================================


class TestDefaultRegistry:
    def test_get_registry_is_singleton(self):
        assert get_registry() is get_registry()

    def test_set_registry(self):
        registry = ControllerRegistry()
        set_registry(registry)
        assert get_registry() is registry

    def test_reset_registry(self):
        registry = get_registry()
        registry.bind(Capability.STORAGE, MemoryStorageController())

        reset_registry()

        assert get_registry() is not registry
        assert get_registry().bound_capabilities == []


# =============================================================================
# Protocol conformance Tests
# =============================================================================


class TestProtocols:
    def test_builtin_controllers_conform(self):
        assert isinstance(RecordingTransport(), Transport)
        assert isinstance(MemoryStorageController(), StorageController)
        assert isinstance(FixedInstallation(), InstallationController)
        assert isinstance(CurrentUserController(), UserController)

    def test_non_conforming_object(self):
        assert not isinstance(object(), FileController)
