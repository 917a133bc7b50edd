# Vault - Secure Secret Storage
#
# Narrow async interface over OS-protected secret storage. Only the
# key material provisioner talks to it; preferences never go here.
#
# KeyringVault stores each secret as a keyring "password" under a single
# service name, so the entries show up together in the OS credential
# manager (Keychain, Secret Service, Windows Credential Locker).

import asyncio
from typing import Optional, Protocol

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ..exceptions import VaultUnavailable

DEFAULT_SERVICE_NAME = "crypted-preferences"


class SecureVault(Protocol):
    """Async read/write/delete of named secrets."""

    async def read(self, name: str) -> Optional[str]: ...

    async def write(self, name: str, value: str) -> None: ...

    async def delete(self, name: str) -> None: ...


class KeyringVault:
    """
    SecureVault backed by the ``keyring`` library.

    Args:
        service_name: Keyring service the secrets are filed under
    """

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME):
        self.service_name = service_name

    def _get(self, name: str) -> Optional[str]:
        try:
            return keyring.get_password(self.service_name, name)
        except KeyringError as e:
            raise VaultUnavailable(f"Cannot read '{name}' from keyring: {e}") from e

    def _set(self, name: str, value: str) -> None:
        try:
            keyring.set_password(self.service_name, name, value)
        except KeyringError as e:
            raise VaultUnavailable(f"Cannot write '{name}' to keyring: {e}") from e

    def _delete(self, name: str) -> None:
        try:
            keyring.delete_password(self.service_name, name)
        except PasswordDeleteError:
            # Nothing stored under this name
            return
        except KeyringError as e:
            raise VaultUnavailable(f"Cannot delete '{name}' from keyring: {e}") from e

    async def read(self, name: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, name)

    async def write(self, name: str, value: str) -> None:
        await asyncio.to_thread(self._set, name, value)

    async def delete(self, name: str) -> None:
        await asyncio.to_thread(self._delete, name)
