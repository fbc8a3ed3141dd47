"""Tests for durable storage backends."""

import json

import pytest

from pharma_pitch.exceptions import StorageError
from pharma_pitch.storage.backends import JsonDirectoryBackend, LocalStoreBackend, MemoryBackend


class TestJsonDirectoryBackend:
    @pytest.mark.asyncio
    async def test_missing_key_reads_none(self, tmp_path):
        backend = JsonDirectoryBackend(tmp_path / "store")
        assert await backend.read("pharma_brands") is None

    @pytest.mark.asyncio
    async def test_write_read_delete(self, tmp_path):
        backend = JsonDirectoryBackend(tmp_path / "store")
        await backend.write("pharma_brands", "[]")
        assert (tmp_path / "store" / "pharma_brands.json").read_text() == "[]"
        assert await backend.read("pharma_brands") == "[]"
        await backend.delete("pharma_brands")
        assert await backend.read("pharma_brands") is None
        await backend.delete("pharma_brands")

    @pytest.mark.asyncio
    async def test_no_temp_file_left(self, tmp_path):
        backend = JsonDirectoryBackend(tmp_path)
        await backend.write("k", "v1")
        await backend.write("k", "v2")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    @pytest.mark.asyncio
    async def test_invalid_key(self, tmp_path):
        backend = JsonDirectoryBackend(tmp_path)
        with pytest.raises(StorageError):
            await backend.read("../escape")

    @pytest.mark.asyncio
    async def test_undecodable_file_wrapped(self, tmp_path):
        (tmp_path / "pharma_brands.json").write_bytes(b"\xff\xfe[]")
        with pytest.raises(StorageError, match="Failed to read"):
            await JsonDirectoryBackend(tmp_path).read("pharma_brands")

    @pytest.mark.asyncio
    async def test_write_failure_wrapped(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        backend = JsonDirectoryBackend(blocker / "store")
        with pytest.raises(StorageError, match="Failed to write"):
            await backend.write("pharma_brands", "[]")


class TestLocalStoreBackend:
    def test_items_are_raw_strings(self, tmp_path):
        backend = LocalStoreBackend(tmp_path / "local.json")
        assert backend.get_item("k") is None
        backend.set_item("k", '[{"id": "x"}]')
        backend.set_item("other", "1")
        assert backend.get_item("k") == '[{"id": "x"}]'
        backend.remove_item("k")
        assert backend.get_item("k") is None
        assert json.loads((tmp_path / "local.json").read_text()) == {"other": "1"}

    @pytest.mark.asyncio
    async def test_async_interface(self, tmp_path):
        backend = LocalStoreBackend(tmp_path / "local.json")
        await backend.write("k", "v")
        assert await backend.read("k") == "v"
        await backend.delete("k")
        assert await backend.read("k") is None

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "local.json"
        path.write_text("{not json")
        with pytest.raises(StorageError, match="Corrupt"):
            LocalStoreBackend(path).get_item("k")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "local.json"
        path.write_bytes(b"\xff{}")
        with pytest.raises(StorageError, match="Corrupt"):
            LocalStoreBackend(path).get_item("k")

    def test_non_string_values_ignored(self, tmp_path):
        path = tmp_path / "local.json"
        path.write_text(json.dumps({"a": "ok", "b": [1, 2]}))
        backend = LocalStoreBackend(path)
        assert backend.get_item("a") == "ok"
        assert backend.get_item("b") is None


@pytest.mark.asyncio
async def test_memory_backend_records_writes():
    backend = MemoryBackend({"k": "v0"})
    assert await backend.read("k") == "v0"
    await backend.write("k", "v1")
    assert backend.writes == [("k", "v1")]
    assert backend.reads == ["k"]
    await backend.delete("k")
    assert backend.data == {}
