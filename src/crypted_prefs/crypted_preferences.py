# Crypted Preferences
#
# Typed preference accessors that encrypt strings and string lists before
# they reach the (plain) preference store. Key material lives in the
# secure vault. bool / int / double values are stored as-is.
#
#   - String / List[str]: encrypted unless no_crypt=True
#   - bool / int / double: never encrypted
#
# There is no marker in the store saying whether an entry was encrypted:
# callers must pass the same no_crypt flag when reading a name as they did
# when writing it.

from typing import List, Optional, Set

from .core.log_config import get_logger
from .core.preference_store import (
    KIND_STRING,
    KIND_STRING_LIST,
    PreferenceStore,
    check_value,
)
from .vault.encryption import CipherAdapter, Decrypted
from .vault.key_material import KeyMaterialProvisioner
from .vault.secure_vault import SecureVault

logger = get_logger(__name__)


class CryptedPreferences:
    """
    Encrypt-on-write / decrypt-on-read wrapper around a PreferenceStore.

    Construct once at startup and pass it to whoever needs preferences.
    No locking is done here: concurrent writes to the same name are
    last-write-wins, as in the underlying store.

    Vault and store failures propagate. Decrypt failures do not: a single
    value reads as None and a failing list element is dropped.

    Args:
        vault: Secure storage for the key and IV
        prefs: Plain preference store for the values
        diagnostics: Logger receiving decrypt failures
    """

    def __init__(self, vault: SecureVault, prefs: PreferenceStore, diagnostics=None):
        self.vault = vault
        self.prefs = prefs
        self.diagnostics = diagnostics or logger
        self.provisioner = KeyMaterialProvisioner(vault)
        self.cipher = CipherAdapter(self.provisioner, diagnostics=self.diagnostics)

    # ── Strings ──────────────────────────────────────────────────────

    async def get_string(self, name: str, no_crypt: bool = False) -> Optional[str]:
        """Read a string, decrypting it unless ``no_crypt``."""
        stored = await self.prefs.get_string(name)
        if no_crypt or stored is None:
            return stored
        result = await self.cipher.decrypt(stored)
        if isinstance(result, Decrypted):
            return result.plaintext
        return None

    async def set_string(self, name: str, value: str, no_crypt: bool = False) -> None:
        """Store a string, encrypted unless ``no_crypt``."""
        check_value(KIND_STRING, value)
        if no_crypt:
            await self.prefs.set_string(name, value)
        else:
            await self.prefs.set_string(name, await self.cipher.encrypt(value))

    # ── String lists ─────────────────────────────────────────────────

    async def get_string_list(
        self, name: str, no_crypt: bool = False
    ) -> Optional[List[str]]:
        """
        Read a string list, decrypting each element unless ``no_crypt``.

        Elements that fail to decrypt are dropped, so the result may be
        shorter than what was stored. Order of the survivors is kept.
        """
        stored = await self.prefs.get_string_list(name)
        if no_crypt or stored is None:
            return stored

        values = []
        for index, encoded in enumerate(stored):
            result = await self.cipher.decrypt(encoded)
            if isinstance(result, Decrypted):
                values.append(result.plaintext)
            else:
                self.diagnostics.warning(
                    "string_list_element_dropped", name=name, index=index
                )
        return values

    async def set_string_list(
        self, name: str, values: List[str], no_crypt: bool = False
    ) -> None:
        """Store a string list, encrypting each element unless ``no_crypt``."""
        # Checked before list() so a bare str is not split into characters
        check_value(KIND_STRING_LIST, values)
        if no_crypt:
            await self.prefs.set_string_list(name, list(values))
        else:
            await self.prefs.set_string_list(
                name, [await self.cipher.encrypt(value) for value in values]
            )

    # ── Unencrypted kinds ────────────────────────────────────────────

    async def get_bool(self, name: str) -> Optional[bool]:
        return await self.prefs.get_bool(name)

    async def set_bool(self, name: str, value: bool) -> None:
        await self.prefs.set_bool(name, value)

    async def get_int(self, name: str) -> Optional[int]:
        return await self.prefs.get_int(name)

    async def set_int(self, name: str, value: int) -> None:
        await self.prefs.set_int(name, value)

    async def get_double(self, name: str) -> Optional[float]:
        return await self.prefs.get_double(name)

    async def set_double(self, name: str, value: float) -> None:
        await self.prefs.set_double(name, value)

    # ── Housekeeping ─────────────────────────────────────────────────

    async def remove(self, name: str) -> None:
        """Delete an entry of any kind. Missing names are ignored."""
        await self.prefs.remove(name)

    async def contains(self, name: str) -> bool:
        return await self.prefs.contains(name)

    async def keys(self) -> Set[str]:
        return await self.prefs.keys()

    async def clear(self) -> None:
        """Delete every preference. Vault key material is left alone."""
        await self.prefs.clear()


# ── Singleton ────────────────────────────────────────────────────────

_instance: Optional[CryptedPreferences] = None


def get_crypted_preferences() -> CryptedPreferences:
    """Get or create the process-wide CryptedPreferences from settings."""
    global _instance
    if _instance is None:
        from .config import build_crypted_preferences, load_settings

        _instance = build_crypted_preferences(load_settings())
    return _instance


def set_crypted_preferences(instance: Optional[CryptedPreferences]) -> None:
    """Replace the singleton (for testing)."""
    global _instance
    _instance = instance
