# Configuration
#
# Settings come from environment variables, with a .env file in the
# working directory loaded first (python-dotenv). Nothing here is
# secret: the key material itself lives in the OS keyring.

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .core.log_config import configure_logging, is_configured
from .core.preference_store import SQLitePreferenceStore
from .vault.secure_vault import DEFAULT_SERVICE_NAME, KeyringVault

ENV_DB_PATH = "CRYPTED_PREFS_DB_PATH"
ENV_KEYRING_SERVICE = "CRYPTED_PREFS_KEYRING_SERVICE"
ENV_LOG_LEVEL = "CRYPTED_PREFS_LOG_LEVEL"
ENV_LOG_JSON = "CRYPTED_PREFS_LOG_JSON"

DEFAULT_DB_PATH = "data/preferences.db"


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime settings for a CryptedPreferences instance."""
    db_path: Path = Path(DEFAULT_DB_PATH)
    keyring_service: str = DEFAULT_SERVICE_NAME
    log_level: str = "INFO"
    log_json: bool = True


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build Settings from the environment.

    Args:
        dotenv: Load .env from the working directory before reading os.environ
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    return Settings(
        db_path=Path(os.environ.get(ENV_DB_PATH, DEFAULT_DB_PATH)),
        keyring_service=os.environ.get(ENV_KEYRING_SERVICE, DEFAULT_SERVICE_NAME),
        log_level=os.environ.get(ENV_LOG_LEVEL, "INFO").upper(),
        log_json=_env_flag(os.environ.get(ENV_LOG_JSON, "true")),
    )


def build_crypted_preferences(settings: Settings):
    """Wire the keyring vault and SQLite store into a CryptedPreferences."""
    from .crypted_preferences import CryptedPreferences

    if not is_configured():
        configure_logging(settings.log_level, json_output=settings.log_json)
    return CryptedPreferences(
        vault=KeyringVault(settings.keyring_service),
        prefs=SQLitePreferenceStore(settings.db_path),
    )
