"""Tests for the key-value storage backends."""

import json

import pytest

from spendmate.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StorageError,
)


class TestInMemoryStorage:
    """Dict-backed storage."""

    def test_get_missing_returns_none(self):
        assert InMemoryStorage().get_item("nope") is None

    def test_set_get_remove(self):
        storage = InMemoryStorage()
        storage.set_item("a", "1")
        assert storage.get_item("a") == "1"
        assert storage.keys() == ["a"]
        storage.remove_item("a")
        assert storage.get_item("a") is None

    def test_remove_missing_is_noop(self):
        InMemoryStorage().remove_item("nope")

    def test_initial_data_is_copied(self):
        initial = {"a": "1"}
        storage = InMemoryStorage(initial)
        storage.set_item("b", "2")
        assert "b" not in initial


class TestJsonFileStorage:
    """Single-file JSON storage."""

    def test_missing_file_is_empty(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "storage.json")
        assert storage.get_item("anything") is None
        assert storage.keys() == []

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        JsonFileStorage(path).set_item("spendmate-theme", "dark")
        assert JsonFileStorage(path).get_item("spendmate-theme") == "dark"

    def test_file_is_plain_json_object(self, tmp_path):
        path = tmp_path / "storage.json"
        storage = JsonFileStorage(path)
        storage.set_item("spendmate-budget", "1500.00")
        assert json.loads(path.read_text(encoding="utf-8")) == {"spendmate-budget": "1500.00"}

    def test_no_temp_file_left_behind(self, tmp_path):
        path = tmp_path / "storage.json"
        JsonFileStorage(path).set_item("k", "v")
        assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]

    def test_remove_item(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "storage.json")
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        storage.remove_item("a")
        assert storage.keys() == ["b"]

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonFileStorage(path).get_item("gemini-expenses-data") is None

    def test_non_object_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonFileStorage(path).keys() == []

    def test_non_string_values_come_back_as_json(self, tmp_path):
        """Hand-edited files may hold raw JSON values."""
        path = tmp_path / "storage.json"
        path.write_text(json.dumps({"spendmate-budget": 1500}), encoding="utf-8")
        assert JsonFileStorage(path).get_item("spendmate-budget") == "1500"

    def test_unwritable_location_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("I am a file", encoding="utf-8")
        storage = JsonFileStorage(blocker / "storage.json")
        with pytest.raises(StorageError):
            storage.set_item("k", "v")

    def test_invalid_utf8_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_bytes(b'{"gemini-expenses-data": "\xff\xfe"}')
        storage = JsonFileStorage(path)
        assert storage.get_item("gemini-expenses-data") is None
        assert storage.keys() == []

    def test_write_after_invalid_utf8_replaces_file(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        storage = JsonFileStorage(path)
        storage.set_item("spendmate-theme", "dark")
        assert JsonFileStorage(path).get_item("spendmate-theme") == "dark"
