# Crypted Preferences - Main Package
#
# Encrypted key/value preferences: strings and string lists are stored
# AES-encrypted with key material kept in the OS keyring; bool, int and
# double values are stored as-is.

__version__ = "0.1.0"
__author__ = "Crypted Preferences Team"
__description__ = "Encrypted key/value preference storage"

from .crypted_preferences import (
    CryptedPreferences,
    get_crypted_preferences,
    set_crypted_preferences,
)
from .exceptions import (
    CryptedPreferencesError,
    KeyMaterialError,
    PreferenceTypeError,
    StoreUnavailable,
    VaultUnavailable,
)

__all__ = [
    "__version__",
    "CryptedPreferences",
    "get_crypted_preferences",
    "set_crypted_preferences",
    "CryptedPreferencesError",
    "KeyMaterialError",
    "PreferenceTypeError",
    "StoreUnavailable",
    "VaultUnavailable",
]
