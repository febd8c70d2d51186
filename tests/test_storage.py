"""Tests for storage.py module.

Tests the JSON-file and in-memory option and meta stores.
"""

import json

import pytest

from content_assist.storage import (
    JsonMetaStore,
    JsonOptionStore,
    MemoryMetaStore,
    load_json,
    save_json,
)


class TestJsonOptionStore:
    """Tests for JsonOptionStore."""

    def test_missing_file_reads_empty(self, tmp_path):
        """Should return the default when the file doesn't exist."""
        store = JsonOptionStore(tmp_path / "options.json")

        assert store.get_option("anything", "default") == "default"

    def test_update_writes_file(self, tmp_path):
        """Should persist options to disk."""
        path = tmp_path / "nested" / "options.json"
        store = JsonOptionStore(path)

        assert store.update_option("name", "value") is True

        assert json.loads(path.read_text()) == {"name": "value"}

    def test_values_survive_new_instance(self, tmp_path):
        """Should read values written by another instance."""
        path = tmp_path / "options.json"
        JsonOptionStore(path).update_option("name", "value")

        assert JsonOptionStore(path).get_option("name") == "value"

    def test_update_same_value_returns_false(self, tmp_path):
        """Should report no change for an equal value."""
        store = JsonOptionStore(tmp_path / "options.json")
        store.update_option("name", "value")

        assert store.update_option("name", "value") is False

    def test_delete_option(self, tmp_path):
        """Should remove an option."""
        store = JsonOptionStore(tmp_path / "options.json")
        store.update_option("name", "value")

        assert store.delete_option("name") is True
        assert store.get_option("name") is None
        assert store.delete_option("name") is False


class TestJsonMetaStore:
    """Tests for JsonMetaStore."""

    def test_meta_is_per_item(self, tmp_path):
        """Should keep values of different items apart."""
        store = JsonMetaStore(tmp_path / "meta.json")
        store.update_meta(1, "key", "one")
        store.update_meta(2, "key", "two")

        assert store.get_meta(1, "key") == "one"
        assert store.get_meta(2, "key") == "two"

    def test_int_and_str_ids_are_equivalent(self, tmp_path):
        """Should treat 42 and '42' as the same item."""
        store = JsonMetaStore(tmp_path / "meta.json")
        store.update_meta(42, "key", "value")

        assert store.get_meta("42", "key") == "value"

    def test_delete_meta_drops_empty_item(self, tmp_path):
        """Should remove an item once its last key is deleted."""
        path = tmp_path / "meta.json"
        store = JsonMetaStore(path)
        store.update_meta(1, "key", "value")

        assert store.delete_meta(1, "key") is True
        assert json.loads(path.read_text()) == {}

    def test_all_meta_returns_copy(self, tmp_path):
        """Should return all keys for an item."""
        store = JsonMetaStore(tmp_path / "meta.json")
        store.update_meta(1, "a", 1)
        store.update_meta(1, "b", 2)

        assert store.all_meta(1) == {"a": 1, "b": 2}
        assert store.all_meta(99) == {}


class TestMemoryMetaStore:
    """Tests for MemoryMetaStore."""

    def test_initial_data(self):
        """Should accept initial data keyed by int or str."""
        store = MemoryMetaStore({7: {"key": "value"}})

        assert store.get_meta("7", "key") == "value"

    def test_non_object_item_reads_empty(self, tmp_path):
        """Should treat an item that isn't an object as having no meta."""
        path = tmp_path / "meta.json"
        path.write_text('{"1": "oops"}')
        store = JsonMetaStore(path)

        assert store.get_meta(1, "key", "default") == "default"
        assert store.all_meta(1) == {}
        assert store.delete_meta(1, "key") is False

    def test_non_object_item_replaced_on_write(self, tmp_path):
        """Should replace a malformed item when writing to it."""
        path = tmp_path / "meta.json"
        path.write_text('{"1": ["oops"]}')
        store = JsonMetaStore(path)

        assert store.update_meta(1, "key", "value") is True
        assert json.loads(path.read_text()) == {"1": {"key": "value"}}


class TestLoadJson:
    """Tests for load_json."""

    def test_corrupt_file_reads_empty(self, tmp_path):
        """Should ignore files that aren't valid JSON."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        assert load_json(path) == {}

    def test_non_object_reads_empty(self, tmp_path):
        """Should ignore JSON that isn't an object."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        assert load_json(path) == {}

    def test_corrupt_file_moved_aside(self, tmp_path):
        """Should keep the corrupt contents in a .corrupt file."""
        path = tmp_path / "options.json"
        path.write_text("{not json")

        load_json(path)

        assert not path.exists()
        assert (tmp_path / "options.json.corrupt").read_text() == "{not json"

    def test_write_after_corruption_keeps_backup(self, tmp_path):
        """Should not destroy a corrupt store's contents on the next write."""
        path = tmp_path / "options.json"
        path.write_text('{"openai_api_key": "sk-abc",')

        JsonOptionStore(path).update_option("other", 1)

        assert json.loads(path.read_text()) == {"other": 1}
        assert "sk-abc" in (tmp_path / "options.json.corrupt").read_text()


class TestSaveJson:
    """Tests for save_json."""

    def test_leaves_no_temp_files(self, tmp_path):
        """Should rename the temp file over the target."""
        path = tmp_path / "data" / "meta.json"

        save_json(path, {"a": 1})
        save_json(path, {"a": 2})

        assert json.loads(path.read_text()) == {"a": 2}
        assert [p.name for p in path.parent.iterdir()] == ["meta.json"]

    def test_failed_write_keeps_old_file(self, tmp_path):
        """Should leave the previous contents if serialization fails."""
        path = tmp_path / "meta.json"
        save_json(path, {"a": 1})

        with pytest.raises(TypeError):
            save_json(path, {"a": object()})

        assert json.loads(path.read_text()) == {"a": 1}
        assert [p.name for p in tmp_path.iterdir()] == ["meta.json"]
