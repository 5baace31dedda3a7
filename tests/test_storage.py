"""
Storage backend tests.
"""

import sqlite3

import pytest

from cpattrainer.classroom import STORAGE_ERRORS, MemoryStorage, SqliteStorage


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, tmp_path):
    if request.param == "memory":
        return MemoryStorage()
    return SqliteStorage(tmp_path / "data" / "progress.db")


class TestStorageBackends:

    def test_missing_key(self, backend):
        assert backend.get_item("absent") is None

    def test_set_and_get(self, backend):
        backend.set_item("key", '{"a": 1}')
        assert backend.get_item("key") == '{"a": 1}'

    def test_overwrite(self, backend):
        backend.set_item("key", "first")
        backend.set_item("key", "second")
        assert backend.get_item("key") == "second"

    def test_remove(self, backend):
        backend.set_item("key", "value")
        backend.remove_item("key")
        assert backend.get_item("key") is None

    def test_remove_missing_is_noop(self, backend):
        backend.remove_item("absent")
        assert backend.get_item("absent") is None


class TestSqliteStorage:

    def test_constructor_does_not_touch_disk(self, tmp_path):
        db_path = tmp_path / "nested" / "progress.db"
        SqliteStorage(db_path)
        assert not db_path.parent.exists()

    def test_creates_parent_directory_on_first_use(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "progress.db"
        storage = SqliteStorage(db_path)
        assert storage.get_item("key") is None
        assert db_path.exists()

    def test_not_a_database(self, tmp_path):
        db_path = tmp_path / "progress.db"
        db_path.write_bytes(b"this is not sqlite" * 100)
        storage = SqliteStorage(db_path)
        with pytest.raises(STORAGE_ERRORS):
            storage.get_item("key")

    def test_uncreatable_directory(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        storage = SqliteStorage(blocker / "sub" / "progress.db")
        with pytest.raises(STORAGE_ERRORS):
            storage.set_item("key", "value")

    def test_values_survive_new_instance(self, tmp_path):
        db_path = tmp_path / "progress.db"
        SqliteStorage(db_path).set_item("key", "value")
        assert SqliteStorage(db_path).get_item("key") == "value"

    def test_one_row_per_key(self, tmp_path):
        db_path = tmp_path / "progress.db"
        storage = SqliteStorage(db_path)
        storage.set_item("key", "a")
        storage.set_item("key", "b")

        conn = sqlite3.connect(str(db_path))
        try:
            count = conn.execute("SELECT COUNT(*) FROM storage").fetchone()[0]
        finally:
            conn.close()
        assert count == 1
