# Preference Store
# SQLite-backed typed key/value store for application settings.
# Values are kept as JSON next to their kind, so a bool stays a bool and
# a string list stays a list. The file itself is NOT encrypted; anything
# secret must be encrypted before it gets here (see CryptedPreferences).
#
# All public methods are coroutines. sqlite3 is blocking, so each call
# runs on a worker thread with its own short-lived connection.

import asyncio
import json
import logging
import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Protocol, Set, Union

from ..exceptions import PreferenceTypeError, StoreUnavailable
from .db import connect as db_connect

logger = logging.getLogger(__name__)

# Stored kinds
KIND_STRING = "string"
KIND_STRING_LIST = "string_list"
KIND_BOOL = "bool"
KIND_INT = "int"
KIND_DOUBLE = "double"

KINDS = (KIND_STRING, KIND_STRING_LIST, KIND_BOOL, KIND_INT, KIND_DOUBLE)


class PreferenceStore(Protocol):
    """Typed async key/value store used by CryptedPreferences."""

    async def get_string(self, key: str) -> Optional[str]: ...

    async def set_string(self, key: str, value: str) -> None: ...

    async def get_string_list(self, key: str) -> Optional[List[str]]: ...

    async def set_string_list(self, key: str, value: List[str]) -> None: ...

    async def get_bool(self, key: str) -> Optional[bool]: ...

    async def set_bool(self, key: str, value: bool) -> None: ...

    async def get_int(self, key: str) -> Optional[int]: ...

    async def set_int(self, key: str, value: int) -> None: ...

    async def get_double(self, key: str) -> Optional[float]: ...

    async def set_double(self, key: str, value: float) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def contains(self, key: str) -> bool: ...

    async def keys(self) -> Set[str]: ...

    async def clear(self) -> None: ...


def check_value(kind: str, value: Any) -> None:
    """Reject values that do not belong to ``kind``."""
    if kind == KIND_STRING:
        ok = isinstance(value, str)
    elif kind == KIND_STRING_LIST:
        ok = isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)
    elif kind == KIND_BOOL:
        ok = isinstance(value, bool)
    elif kind == KIND_INT:
        # bool is an int subclass but is stored as its own kind
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif kind == KIND_DOUBLE:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    else:
        raise ValueError(f"Unknown preference kind: {kind}")
    if not ok:
        raise PreferenceTypeError(
            f"Value of type {type(value).__name__} cannot be stored as {kind}"
        )


class SQLitePreferenceStore:
    """SQLite typed key/value store for preferences.

    Args:
        db_path: Path to SQLite file. Defaults to data/preferences.db.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self.db_path = Path(db_path) if db_path else Path("data/preferences.db")
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _init_database(self):
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS preferences (
                        key TEXT PRIMARY KEY,
                        kind TEXT NOT NULL,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot initialise {self.db_path}: {e}") from e

    def _connect(self) -> sqlite3.Connection:
        return db_connect(self.db_path, row_factory=True)

    # ── Blocking primitives (run on a worker thread) ─────────────────

    def _read(self, key: str, kind: str) -> Any:
        try:
            with closing(self._connect()) as conn, conn:
                row = conn.execute(
                    "SELECT kind, value FROM preferences WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to read preference '{key}': {e}") from e
        if row is None:
            return None
        if row["kind"] != kind:
            raise PreferenceTypeError(
                f"Preference '{key}' is stored as {row['kind']}, not {kind}"
            )
        return json.loads(row["value"])

    def _write(self, key: str, kind: str, value: Any) -> None:
        check_value(kind, value)
        if kind == KIND_STRING_LIST:
            value = list(value)
        elif kind == KIND_DOUBLE:
            value = float(value)
        now = datetime.now(timezone.utc).isoformat()
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    """INSERT INTO preferences (key, kind, value, updated_at)
                       VALUES (?, ?, ?, ?)
                       ON CONFLICT(key) DO UPDATE SET
                           kind = excluded.kind,
                           value = excluded.value,
                           updated_at = excluded.updated_at""",
                    (key, kind, json.dumps(value), now),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Failed to write preference '{key}': {e}") from e

    def _execute(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        try:
            with closing(self._connect()) as conn, conn:
                rows = conn.execute(sql, params).fetchall()
                conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Preference store query failed: {e}") from e
        return rows

    def raw_value(self, key: str) -> Optional[str]:
        """Return the JSON text stored for ``key`` exactly as persisted."""
        rows = self._execute("SELECT value FROM preferences WHERE key = ?", (key,))
        return rows[0]["value"] if rows else None

    # ── Typed accessors ──────────────────────────────────────────────

    async def get_string(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, key, KIND_STRING)

    async def set_string(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, KIND_STRING, value)

    async def get_string_list(self, key: str) -> Optional[List[str]]:
        return await asyncio.to_thread(self._read, key, KIND_STRING_LIST)

    async def set_string_list(self, key: str, value: List[str]) -> None:
        await asyncio.to_thread(self._write, key, KIND_STRING_LIST, value)

    async def get_bool(self, key: str) -> Optional[bool]:
        return await asyncio.to_thread(self._read, key, KIND_BOOL)

    async def set_bool(self, key: str, value: bool) -> None:
        await asyncio.to_thread(self._write, key, KIND_BOOL, value)

    async def get_int(self, key: str) -> Optional[int]:
        return await asyncio.to_thread(self._read, key, KIND_INT)

    async def set_int(self, key: str, value: int) -> None:
        await asyncio.to_thread(self._write, key, KIND_INT, value)

    async def get_double(self, key: str) -> Optional[float]:
        return await asyncio.to_thread(self._read, key, KIND_DOUBLE)

    async def set_double(self, key: str, value: float) -> None:
        await asyncio.to_thread(self._write, key, KIND_DOUBLE, value)

    async def remove(self, key: str) -> None:
        """Delete a preference of any kind. Missing keys are ignored."""
        await asyncio.to_thread(
            self._execute, "DELETE FROM preferences WHERE key = ?", (key,)
        )

    async def contains(self, key: str) -> bool:
        rows = await asyncio.to_thread(
            self._execute, "SELECT 1 FROM preferences WHERE key = ?", (key,)
        )
        return bool(rows)

    async def keys(self) -> Set[str]:
        rows = await asyncio.to_thread(self._execute, "SELECT key FROM preferences")
        return {row["key"] for row in rows}

    async def clear(self) -> None:
        await asyncio.to_thread(self._execute, "DELETE FROM preferences")
        logger.info("Cleared all preferences in %s", self.db_path)
