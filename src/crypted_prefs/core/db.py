# Core Module - SQLite Connection Helper
#
# Every crypted-preferences SQLite database is opened through `connect()`
# instead of raw `sqlite3.connect()`. This ensures:
#
#   - WAL journal mode (readers do not block the single writer)
#   - busy_timeout to avoid SQLITE_BUSY when several threads share a file
#   - a StoreUnavailable error when the file cannot be opened at all

import sqlite3
from pathlib import Path
from typing import Union

from ..exceptions import StoreUnavailable


def connect(
    db_path: Union[str, Path],
    *,
    row_factory: bool = False,
) -> sqlite3.Connection:
    """Open a SQLite connection with WAL mode and safe PRAGMAs.

    Args:
        db_path: Path to the database file.
        row_factory: If True, set conn.row_factory = sqlite3.Row.

    Returns:
        sqlite3.Connection with WAL mode and busy_timeout.

    Raises:
        StoreUnavailable: If the database cannot be opened.
    """
    try:
        conn = sqlite3.connect(str(db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
    except sqlite3.Error as e:
        raise StoreUnavailable(f"Cannot open preference database {db_path}: {e}") from e
    if row_factory:
        conn.row_factory = sqlite3.Row
    return conn
