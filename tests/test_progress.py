"""
ProgressStore tests: persistence, corruption tolerance and stats.
"""

import sqlite3

from pagelab.classroom import ProgressStore, get_completion_stats


def write_raw_payload(store: ProgressStore, set_key: str, payload: str):
    conn = sqlite3.connect(str(store.db_path))
    try:
        conn.execute(
            "INSERT OR REPLACE INTO progress_records (set_key, payload, updated_at) VALUES (?, ?, NULL)",
            (set_key, payload),
        )
        conn.commit()
    finally:
        conn.close()


class TestProgressStore:
    """Test save/load/delete round trips."""

    def test_missing_record_is_empty(self, progress_store):
        assert progress_store.available
        assert progress_store.load("html") == set()
        assert progress_store.get_record("html") is None

    def test_save_and_load(self, progress_store):
        assert progress_store.save("html", {2, 0, 5})
        assert progress_store.load("html") == {0, 2, 5}

    def test_save_replaces(self, progress_store):
        progress_store.save("html", [1, 2])
        progress_store.save("html", [3])
        assert progress_store.load("html") == {3}

    def test_sets_are_independent(self, progress_store):
        progress_store.save("html", [1])
        progress_store.save("css", [4])
        assert progress_store.load("html") == {1}
        assert progress_store.list_set_keys() == ["css", "html"]

    def test_persists_across_instances(self, tmp_path):
        ProgressStore(tmp_path / "p.db").save("dom", [0, 1])
        assert ProgressStore(tmp_path / "p.db").load("dom") == {0, 1}

    def test_delete(self, progress_store):
        progress_store.save("html", [1])
        assert progress_store.delete("html")
        assert progress_store.load("html") == set()
        assert progress_store.get_record("html") is None

    def test_record(self, progress_store):
        progress_store.save("html", [3, 1])
        record = progress_store.get_record("html")
        assert record.set_key == "html"
        assert record.completed == [1, 3]
        assert record.updated_at is not None

    def test_creates_parent_directory(self, tmp_path):
        store = ProgressStore(tmp_path / "nested" / "dir" / "progress.db")
        assert store.available
        assert store.db_path.exists()


class TestCorruptRecords:
    """Corrupt storage loads as empty and never raises."""

    def test_invalid_json(self, progress_store):
        write_raw_payload(progress_store, "html", "{not json")
        assert progress_store.load("html") == set()
        assert progress_store.get_record("html") is None

    def test_non_list_payload(self, progress_store):
        write_raw_payload(progress_store, "html", '{"a": 1}')
        assert progress_store.load("html") == set()

    def test_bad_entries_dropped(self, progress_store):
        write_raw_payload(progress_store, "html", '[1, -2, "3", 4.5, true, 7]')
        assert progress_store.load("html") == {1, 7}

    def test_unusable_database_file(self, tmp_path):
        path = tmp_path / "progress.db"
        path.write_bytes(b"this is not a sqlite database at all" * 10)
        store = ProgressStore(path)
        assert not store.available
        assert store.load("html") == set()
        assert not store.save("html", [1])
        assert not store.delete("html")
        assert store.list_set_keys() == []

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        store = ProgressStore(blocker / "progress.db")
        assert not store.available
        assert store.load("html") == set()


class TestCompletionStats:
    """Test aggregate helper."""

    def test_counts(self):
        stats = get_completion_stats({0, 1}, 4)
        assert stats == {"total": 4, "completed": 2, "remaining": 2, "completion_percent": 50.0}

    def test_out_of_range_ignored(self):
        assert get_completion_stats({0, 9}, 3)["completed"] == 1

    def test_empty_set(self):
        assert get_completion_stats(set(), 0)["completion_percent"] == 0
