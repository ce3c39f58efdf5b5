"""Tests for the in-memory and SQLite post stores."""

import sqlite3
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from app.adapters.storage.factory import create_post_store
from app.adapters.storage.in_memory import InMemoryPostStore
from app.adapters.storage.sqlite import SQLitePostStore
from app.core.config import StorageSettings
from app.core.errors import StorageAppError, ValidationAppError
from app.models.post import Post


@pytest.fixture
def sqlite_store(tmp_path: Path) -> SQLitePostStore:
    store = SQLitePostStore(str(tmp_path / "posts.db"))
    store.initialize()
    return store


class TestInMemoryPostStore:
    def test_empty_store_lists_nothing(self) -> None:
        assert InMemoryPostStore().list() == []

    def test_lists_in_append_order(self) -> None:
        store = InMemoryPostStore()
        store.create(Post(id="1", title="first", content="a"))
        store.create(Post(id="2", title="second", content="b"))

        assert [p.id for p in store.list()] == ["1", "2"]
        assert len(store) == 2

    def test_list_returns_a_copy(self) -> None:
        store = InMemoryPostStore()
        store.create(Post(id="1", title="t", content="c"))

        listed = store.list()
        listed.clear()

        assert len(store.list()) == 1

    def test_duplicate_id_raises_storage_error(self) -> None:
        store = InMemoryPostStore()
        store.create(Post(id="dup", title="t", content="c"))

        with pytest.raises(StorageAppError) as exc_info:
            store.create(Post(id="dup", title="t2", content="c2"))

        assert exc_info.value.code == "duplicate_post_id"
        assert len(store) == 1

    def test_concurrent_creates_are_all_kept(self) -> None:
        store = InMemoryPostStore()

        def writer(start: int) -> None:
            for i in range(start, start + 50):
                store.create(Post(id=str(i), title="t", content="c"))
                store.list()

        threads = [threading.Thread(target=writer, args=(n * 50,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({p.id for p in store.list()}) == 400


class TestSQLitePostStore:
    def test_each_call_opens_and_closes_its_own_connection(
        self, sqlite_store: SQLitePostStore
    ) -> None:
        opened: list[sqlite3.Connection] = []
        real_connect = sqlite3.connect

        def tracking_connect(*args, **kwargs):
            conn = real_connect(*args, **kwargs)
            opened.append(conn)
            return conn

        with patch("app.adapters.storage.sqlite.sqlite3.connect", side_effect=tracking_connect):
            sqlite_store.create(Post(id="1", title="t", content="c"))
            sqlite_store.list()
            sqlite_store.list()

        assert len(opened) == 3
        assert len({id(conn) for conn in opened}) == 3
        for conn in opened:
            with pytest.raises(sqlite3.ProgrammingError):
                conn.execute("SELECT 1")

    def test_empty_store_lists_nothing(self, sqlite_store: SQLitePostStore) -> None:
        assert sqlite_store.list() == []

    def test_lists_most_recent_first(self, sqlite_store: SQLitePostStore) -> None:
        sqlite_store.create(Post(id="a", title="first", content="1"))
        sqlite_store.create(Post(id="b", title="second", content="2"))
        sqlite_store.create(Post(id="c", title="third", content="3"))

        assert [p.id for p in sqlite_store.list()] == ["c", "b", "a"]

    def test_round_trips_fields(self, sqlite_store: SQLitePostStore) -> None:
        post = Post(id="id-1", title="&lt;T&gt;", content="Ünïcødé")
        sqlite_store.create(post)

        assert sqlite_store.list() == [post]

    def test_initialize_is_idempotent(self, sqlite_store: SQLitePostStore) -> None:
        sqlite_store.create(Post(id="keep", title="t", content="c"))

        sqlite_store.initialize()
        sqlite_store.initialize()

        assert [p.id for p in sqlite_store.list()] == ["keep"]

    def test_posts_survive_a_new_store_instance(self, tmp_path: Path) -> None:
        path = str(tmp_path / "durable.db")
        first = SQLitePostStore(path)
        first.initialize()
        first.create(Post(id="persisted", title="t", content="c"))

        second = SQLitePostStore(path)
        second.initialize()

        assert [p.id for p in second.list()] == ["persisted"]

    def test_schema_matches_single_posts_table(self, sqlite_store: SQLitePostStore) -> None:
        conn = sqlite3.connect(sqlite_store.database_path)
        try:
            columns = conn.execute("PRAGMA table_info(posts)").fetchall()
        finally:
            conn.close()

        names = [(col[1], col[2], col[5]) for col in columns]
        assert names == [("id", "TEXT", 1), ("title", "TEXT", 0), ("content", "TEXT", 0)]

    def test_duplicate_id_raises_storage_error(self, sqlite_store: SQLitePostStore) -> None:
        sqlite_store.create(Post(id="dup", title="t", content="c"))

        with pytest.raises(StorageAppError) as exc_info:
            sqlite_store.create(Post(id="dup", title="other", content="other"))

        assert exc_info.value.code == "storage_insert_failed"
        assert len(sqlite_store.list()) == 1

    def test_list_without_schema_raises_storage_error(self, tmp_path: Path) -> None:
        store = SQLitePostStore(str(tmp_path / "no-schema.db"))

        with pytest.raises(StorageAppError) as exc_info:
            store.list()

        assert exc_info.value.code == "storage_query_failed"

    def test_initialize_failure_raises_storage_error(self, tmp_path: Path) -> None:
        store = SQLitePostStore(str(tmp_path / "missing-dir" / "posts.db"))

        with pytest.raises(StorageAppError) as exc_info:
            store.initialize()

        assert exc_info.value.code == "storage_schema_failed"

    @pytest.mark.parametrize("path", ["", ":memory:"])
    def test_rejects_unusable_paths(self, path: str) -> None:
        with pytest.raises(ValueError):
            SQLitePostStore(path)


class TestCreatePostStore:
    def test_builds_sqlite_store(self, tmp_path: Path) -> None:
        store = create_post_store(
            StorageSettings(backend="sqlite", database_path=str(tmp_path / "x.db"))
        )
        assert isinstance(store, SQLitePostStore)

    def test_builds_memory_store_case_insensitively(self) -> None:
        store = create_post_store(StorageSettings(backend="MEMORY"))
        assert isinstance(store, InMemoryPostStore)

    def test_unknown_backend_raises(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_post_store(StorageSettings(backend="postgres"))
        assert exc_info.value.code == "storage_unknown_backend"

    def test_in_memory_sqlite_path_is_rejected(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_post_store(StorageSettings(backend="sqlite", database_path=":memory:"))
        assert exc_info.value.code == "storage_invalid_path"
