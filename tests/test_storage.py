"""
Tests for storage and installation controllers.
"""

import uuid
from unittest.mock import MagicMock

import pytest

from parse_sdk.installation import StorageInstallationController
from parse_sdk.storage import FileStorageController, MemoryStorageController

# =============================================================================
# MemoryStorageController Tests
# =============================================================================


class TestMemoryStorageController:
    def test_set_get_remove(self):
        storage = MemoryStorageController()

        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"

        storage.remove_item("k")
        assert storage.get_item("k") is None

    def test_missing_key(self):
        assert MemoryStorageController().get_item("nope") is None

    def test_remove_missing_key_is_silent(self):
        MemoryStorageController().remove_item("nope")

    def test_clear(self):
        storage = MemoryStorageController()
        storage.set_item("a", "1")
        storage.set_item("b", "2")

        storage.clear()

        assert storage.get_item("a") is None
        assert storage.used_bytes == 0

    def test_over_capacity_write_is_dropped(self):
        storage = MemoryStorageController(capacity_bytes=10)

        storage.set_item("k", "12345")
        storage.set_item("big", "x" * 50)

        assert storage.get_item("k") == "12345"
        assert storage.get_item("big") is None

    def test_overwrite_reuses_capacity(self):
        storage = MemoryStorageController(capacity_bytes=10)

        storage.set_item("k", "12345678")
        storage.set_item("k", "87654321")

        assert storage.get_item("k") == "87654321"

    def test_is_sync(self):
        assert MemoryStorageController.is_async is False


# =============================================================================
# FileStorageController Tests
# =============================================================================


class TestFileStorageController:
    def test_persists_between_instances(self, tmp_path):
        path = tmp_path / "storage.json"
        FileStorageController(path).set_item("k", "v")

        assert FileStorageController(path).get_item("k") == "v"

    def test_missing_file(self, tmp_path):
        assert FileStorageController(tmp_path / "none.json").get_item("k") is None

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json")

        storage = FileStorageController(path)

        assert storage.get_item("k") is None
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"

    def test_remove_and_clear(self, tmp_path):
        path = tmp_path / "storage.json"
        storage = FileStorageController(path)
        storage.set_item("a", "1")
        storage.set_item("b", "2")

        storage.remove_item("a")
        assert storage.get_item("a") is None
        assert storage.get_item("b") == "2"

        storage.clear()
        assert not path.exists()
        storage.clear()

    def test_over_capacity_write_is_dropped(self, tmp_path):
        storage = FileStorageController(tmp_path / "storage.json", capacity_bytes=20)

        storage.set_item("k", "x" * 100)

        assert storage.get_item("k") is None

    def test_unwritable_path_is_silent(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not directory")
        storage = FileStorageController(blocker / "storage.json")

        storage.set_item("k", "v")

        assert storage.get_item("k") is None


# =============================================================================
# StorageInstallationController Tests
# =============================================================================


class TestStorageInstallationController:
    @pytest.mark.asyncio
    async def test_generates_and_persists(self):
        storage = MemoryStorageController()
        controller = StorageInstallationController(storage, "installationId")

        installation_id = await controller.current_installation_id()

        assert uuid.UUID(installation_id).version == 4
        assert storage.get_item("installationId") == installation_id

    @pytest.mark.asyncio
    async def test_stable_across_calls(self):
        controller = StorageInstallationController(MemoryStorageController())

        first = await controller.current_installation_id()
        second = await controller.current_installation_id()

        assert first == second

    @pytest.mark.asyncio
    async def test_reuses_stored_id(self):
        storage = MemoryStorageController()
        storage.set_item("installationId", "existing-id")

        controller = StorageInstallationController(storage)

        assert await controller.current_installation_id() == "existing-id"

    @pytest.mark.asyncio
    async def test_cached_after_first_resolution(self):
        storage = MagicMock()
        storage.get_item.return_value = "stored"
        controller = StorageInstallationController(storage)

        await controller.current_installation_id()
        await controller.current_installation_id()

        storage.get_item.assert_called_once_with("installationId")
