# Core Module - Shared Utilities
#
# Core module provides shared functionality across crypted-preferences:
# - Structured logging
# - SQLite connection helper
# - Typed preference store

from .log_config import configure_logging, get_logger
from .preference_store import (
    KINDS,
    PreferenceStore,
    SQLitePreferenceStore,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Preference Store
    "KINDS",
    "PreferenceStore",
    "SQLitePreferenceStore",
]
