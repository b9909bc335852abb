"""Tests for the key-value stores."""

import json

from crisiswatch.infrastructure.storage.json_file_store import InMemoryStore, JsonFileStore


def test_round_trip(tmp_path):
    path = tmp_path / "nested" / "state.json"
    store = JsonFileStore(str(path))

    store.set_item("crisiswatch-history", "[]")
    store.set_item("crisiswatch-gamification", "{}")

    assert store.get_item("crisiswatch-history") == "[]"
    assert json.loads(path.read_text()) == {"crisiswatch-history": "[]", "crisiswatch-gamification": "{}"}
    assert JsonFileStore(str(path)).get_item("crisiswatch-gamification") == "{}"


def test_missing_file_reads_as_empty(tmp_path):
    store = JsonFileStore(str(tmp_path / "absent.json"))
    assert store.get_item("anything") is None


def test_corrupt_file_reads_as_empty(tmp_path):
    """Test that a corrupt file is treated as empty and overwritten on write."""
    path = tmp_path / "state.json"
    path.write_text("{definitely not json")
    store = JsonFileStore(str(path))

    assert store.get_item("key") is None
    store.set_item("key", "value")
    assert json.loads(path.read_text()) == {"key": "value"}


def test_non_object_file_reads_as_empty(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("[1, 2, 3]")
    assert JsonFileStore(str(path)).get_item("key") is None


def test_remove_item(tmp_path):
    store = JsonFileStore(str(tmp_path / "state.json"))
    store.set_item("a", "1")
    store.remove_item("a")
    store.remove_item("never-set")

    assert store.get_item("a") is None
    assert list(tmp_path.glob(".state-*")) == []


def test_in_memory_store():
    store = InMemoryStore({"a": "1"})
    store.set_item("b", "2")
    store.remove_item("a")

    assert store.get_item("a") is None
    assert store.get_item("b") == "2"
