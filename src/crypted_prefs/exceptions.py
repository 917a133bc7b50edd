"""
Crypted Preferences Exception Classes
"""


class CryptedPreferencesError(Exception):
    """Base exception for crypted preference operations"""
    pass


class VaultUnavailable(CryptedPreferencesError):
    """Raised when the secure vault cannot be read or written"""
    pass


class StoreUnavailable(CryptedPreferencesError):
    """Raised when the preference store cannot be read or written"""
    pass


class KeyMaterialError(CryptedPreferencesError):
    """Raised when key material read from the vault is malformed"""
    pass


class PreferenceTypeError(CryptedPreferencesError, TypeError):
    """Raised when a preference is read or written as the wrong kind"""
    pass
