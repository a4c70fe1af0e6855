"""
Unit tests for table preference storage.
"""

from __future__ import annotations

from atacdash.core.preferences import (
    JsonFilePreferenceStore,
    NullPreferenceStore,
    open_preference_store,
    storage_available,
)


class TestNullPreferenceStore:
    def test_forgets_writes(self):
        store = NullPreferenceStore()
        store.set("table:reads", {"search": "x"})
        assert store.get("table:reads") is None
        store.remove("table:reads")


class TestJsonFilePreferenceStore:
    """Tests for file-backed preferences."""

    def test_round_trip_across_instances(self, temp_dir):
        path = temp_dir / "prefs.json"
        JsonFilePreferenceStore(path).set("table:reads", {"order": [[1, "desc"]], "search": ""})

        assert JsonFilePreferenceStore(path).get("table:reads") == {
            "order": [[1, "desc"]],
            "search": "",
        }

    def test_remove(self, temp_dir):
        path = temp_dir / "prefs.json"
        store = JsonFilePreferenceStore(path)
        store.set("table:reads", {"search": "x"})
        store.set("table:peaks", {"search": "y"})

        store.remove("table:reads")

        reopened = JsonFilePreferenceStore(path)
        assert reopened.get("table:reads") is None
        assert reopened.get("table:peaks") == {"search": "y"}

    def test_returned_values_are_copies(self, temp_dir):
        store = JsonFilePreferenceStore(temp_dir / "prefs.json")
        store.set("table:reads", {"search": "x"})
        store.get("table:reads")["search"] = "changed"
        assert store.get("table:reads") == {"search": "x"}

    def test_unreadable_file_ignored(self, temp_dir):
        path = temp_dir / "prefs.json"
        path.write_text("{not json")
        store = JsonFilePreferenceStore(path)
        assert store.get("table:reads") is None

    def test_non_object_file_ignored(self, temp_dir):
        path = temp_dir / "prefs.json"
        path.write_text("[1, 2, 3]")
        assert JsonFilePreferenceStore(path).get("table:reads") is None


class TestOpenPreferenceStore:
    """Tests for storage capability detection."""

    def test_no_path(self):
        assert isinstance(open_preference_store(None), NullPreferenceStore)

    def test_writable_path(self, temp_dir):
        path = temp_dir / "nested" / "prefs.json"
        assert storage_available(path)
        assert isinstance(open_preference_store(path), JsonFilePreferenceStore)
        assert not (temp_dir / "nested" / "prefs.json.probe").exists()

    def test_unwritable_path_falls_back(self, temp_dir):
        blocker = temp_dir / "blocker"
        blocker.write_text("not a directory")
        path = blocker / "prefs.json"

        assert not storage_available(path)
        assert isinstance(open_preference_store(path), NullPreferenceStore)
