"""
Shared pytest fixtures for the crypted-preferences test suite.

Tests never touch the real OS keyring or the default data/ directory:
  - Vault       -> InMemoryVault        (dict, records every write)
  - Preferences -> temp SQLite file     (tmp_path)
"""

from typing import Dict, List, Optional, Tuple

import pytest

from crypted_prefs.core.preference_store import SQLitePreferenceStore
from crypted_prefs.crypted_preferences import CryptedPreferences, set_crypted_preferences


class InMemoryVault:
    """SecureVault fake that keeps secrets in a dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.writes: List[Tuple[str, str]] = []
        self.reads: List[str] = []

    async def read(self, name: str) -> Optional[str]:
        self.reads.append(name)
        return self.data.get(name)

    async def write(self, name: str, value: str) -> None:
        self.writes.append((name, value))
        self.data[name] = value

    async def delete(self, name: str) -> None:
        self.data.pop(name, None)


class RecordingDiagnostics:
    """Stand-in for a structlog logger that remembers warnings."""

    def __init__(self):
        self.events: List[Tuple[str, dict]] = []

    def warning(self, event: str, **kw):
        self.events.append((event, kw))

    def info(self, event: str, **kw):
        self.events.append((event, kw))


@pytest.fixture
def vault_factory():
    """The InMemoryVault class, for tests that seed or subclass it."""
    return InMemoryVault


@pytest.fixture
def vault():
    return InMemoryVault()


@pytest.fixture
def store(tmp_path):
    return SQLitePreferenceStore(db_path=tmp_path / "prefs.db")


@pytest.fixture
def diagnostics():
    return RecordingDiagnostics()


@pytest.fixture
def prefs(vault, store, diagnostics):
    return CryptedPreferences(vault=vault, prefs=store, diagnostics=diagnostics)


@pytest.fixture(autouse=True)
def _reset_singleton():
    """Make sure no test leaks a process-wide CryptedPreferences."""
    set_crypted_preferences(None)
    yield
    set_crypted_preferences(None)
