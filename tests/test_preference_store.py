"""Tests for the SQLite typed preference store.

Covers:
  - Database file creation
  - Typed get / set for every kind
  - Kind checks on read and write
  - remove / contains / keys / clear
  - StoreUnavailable on a broken database
"""

import sqlite3
from datetime import datetime, timedelta

import pytest

from crypted_prefs.core.db import connect
from crypted_prefs.core.preference_store import SQLitePreferenceStore
from crypted_prefs.exceptions import PreferenceTypeError, StoreUnavailable


class TestSQLitePreferenceStore:
    """Core preference store operations."""

    def test_creates_db_file(self, tmp_path):
        SQLitePreferenceStore(db_path=tmp_path / "prefs.db")
        assert (tmp_path / "prefs.db").exists()

    def test_creates_parent_dirs(self, tmp_path):
        SQLitePreferenceStore(db_path=tmp_path / "sub" / "dir" / "prefs.db")
        assert (tmp_path / "sub" / "dir" / "prefs.db").exists()

    @pytest.mark.asyncio
    async def test_string(self, store):
        await store.set_string("theme", "dark")
        assert await store.get_string("theme") == "dark"

    @pytest.mark.asyncio
    async def test_string_list(self, store):
        await store.set_string_list("recent", ["a", "b"])
        assert await store.get_string_list("recent") == ["a", "b"]

    @pytest.mark.asyncio
    async def test_bool_int_double(self, store):
        await store.set_bool("flag", False)
        await store.set_int("count", -7)
        await store.set_double("ratio", 3)
        assert await store.get_bool("flag") is False
        assert await store.get_int("count") == -7
        ratio = await store.get_double("ratio")
        assert ratio == 3.0 and isinstance(ratio, float)

    @pytest.mark.asyncio
    async def test_upsert_can_change_kind(self, store):
        await store.set_string("x", "text")
        await store.set_int("x", 1)
        assert await store.get_int("x") == 1

    @pytest.mark.asyncio
    async def test_missing_returns_none(self, store):
        assert await store.get_string("nope") is None
        assert await store.get_string_list("nope") is None
        assert await store.get_bool("nope") is None

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "prefs.db"
        await SQLitePreferenceStore(path).set_string("k", "v")
        assert await SQLitePreferenceStore(path).get_string("k") == "v"

    @pytest.mark.asyncio
    async def test_remove_contains_keys_clear(self, store):
        await store.set_string("a", "1")
        await store.set_bool("b", True)
        assert await store.contains("a")
        assert await store.keys() == {"a", "b"}
        await store.remove("a")
        await store.remove("a")
        assert not await store.contains("a")
        await store.clear()
        assert await store.keys() == set()


class TestKindChecks:
    @pytest.mark.asyncio
    async def test_read_as_wrong_kind(self, store):
        await store.set_bool("flag", True)
        with pytest.raises(PreferenceTypeError):
            await store.get_int("flag")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("setter,value", [
        ("set_int", True),
        ("set_int", 1.5),
        ("set_bool", 1),
        ("set_string", 5),
        ("set_string_list", ["ok", 3]),
        ("set_string_list", "not a list"),
        ("set_double", "1.0"),
    ])
    async def test_write_rejects_wrong_type(self, store, setter, value):
        with pytest.raises(PreferenceTypeError):
            await getattr(store, setter)("k", value)

    def test_preference_type_error_is_type_error(self):
        assert issubclass(PreferenceTypeError, TypeError)


class TestStoreUnavailable:
    @pytest.mark.asyncio
    async def test_dropped_table_raises(self, store):
        conn = sqlite3.connect(str(store.db_path))
        conn.execute("DROP TABLE preferences")
        conn.commit()
        conn.close()
        with pytest.raises(StoreUnavailable):
            await store.get_string("k")
        with pytest.raises(StoreUnavailable):
            await store.set_string("k", "v")

    def test_unopenable_path_raises(self, tmp_path):
        # A directory cannot be opened as a database file
        (tmp_path / "is_a_dir").mkdir()
        with pytest.raises(StoreUnavailable):
            SQLitePreferenceStore(db_path=tmp_path / "is_a_dir")


class TestConnections:
    @pytest.mark.asyncio
    async def test_every_connection_is_closed(self, store, monkeypatch):
        opened = []
        original = store._connect

        def tracking_connect():
            conn = original()
            opened.append(conn)
            return conn

        monkeypatch.setattr(store, "_connect", tracking_connect)
        await store.set_string("k", "v")
        await store.get_string("k")
        await store.keys()
        await store.remove("k")

        assert len(opened) == 4
        for conn in opened:
            with pytest.raises(sqlite3.ProgrammingError):
                conn.execute("SELECT 1")

    @pytest.mark.asyncio
    async def test_updated_at_is_timezone_aware(self, store):
        await store.set_int("n", 1)
        conn = sqlite3.connect(str(store.db_path))
        (updated_at,) = conn.execute(
            "SELECT updated_at FROM preferences WHERE key = 'n'"
        ).fetchone()
        conn.close()
        assert datetime.fromisoformat(updated_at).utcoffset() == timedelta(0)

    def test_connect_helper_enables_wal(self, tmp_path):
        conn = connect(tmp_path / "wal.db", row_factory=True)
        try:
            (mode,) = conn.execute("PRAGMA journal_mode").fetchone()
            assert mode == "wal"
            assert conn.row_factory is sqlite3.Row
        finally:
            conn.close()
