"""Tests for the persistence adapters."""

import json

import pytest

from finance_core.exceptions import PersistenceError
from finance_core.storage import JSONStorage, MemoryStorage


class TestJSONStorage:
    def test_load_missing_key_returns_none(self, tmp_path):
        assert JSONStorage(tmp_path).load("finance-storage") is None

    def test_save_then_load_preserves_record(self, tmp_path):
        storage = JSONStorage(tmp_path)
        record = {"transactions": [], "categories": [{"id": "c1", "name": "工资", "type": "income"}]}
        storage.save("finance-storage", record)

        assert storage.load("finance-storage") == record
        raw = (tmp_path / "finance-storage.json").read_text(encoding="utf-8")
        assert "工资" in raw
        assert not (tmp_path / "finance-storage.json.tmp").exists()

    def test_creates_base_directory(self, tmp_path):
        target = tmp_path / "nested" / "data"
        JSONStorage(target)
        assert target.is_dir()

    def test_corrupted_file_raises(self, tmp_path):
        (tmp_path / "finance-storage.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(PersistenceError, match="Corrupted"):
            JSONStorage(tmp_path).load("finance-storage")

    def test_non_object_payload_raises(self, tmp_path):
        (tmp_path / "finance-storage.json").write_text(json.dumps([1, 2]), encoding="utf-8")
        with pytest.raises(PersistenceError, match="Expected object"):
            JSONStorage(tmp_path).load("finance-storage")

    def test_failed_write_removes_temp_file(self, tmp_path):
        # A directory in the target's place makes the final rename fail.
        (tmp_path / "finance-storage.json").mkdir()
        with pytest.raises(PersistenceError, match="Unable to write"):
            JSONStorage(tmp_path).save("finance-storage", {"categories": []})
        assert not (tmp_path / "finance-storage.json.tmp").exists()

    @pytest.mark.parametrize("key", ["", "../escape", ".hidden"])
    def test_rejects_unsafe_keys(self, tmp_path, key):
        with pytest.raises(PersistenceError):
            JSONStorage(tmp_path).save(key, {})


class TestMemoryStorage:
    def test_load_returns_copy(self):
        storage = MemoryStorage()
        storage.save("k", {"categories": []})
        loaded = storage.load("k")
        loaded["categories"].append("mutated")
        assert storage.load("k") == {"categories": []}

    def test_contains(self):
        storage = MemoryStorage()
        assert "k" not in storage
        storage.save("k", {})
        assert "k" in storage
