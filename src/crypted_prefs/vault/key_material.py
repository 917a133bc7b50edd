# Vault - Key Material Provisioning
#
# The AES key and IV live in the secure vault as base64 strings under the
# fixed names "key" and "iv". They are generated on first use and never
# rotated or erased here: every encrypt/decrypt in the process uses the
# same pair.

import asyncio
import base64
import binascii
import os
from dataclasses import dataclass

from ..core.log_config import get_logger
from ..exceptions import KeyMaterialError
from .secure_vault import SecureVault

logger = get_logger(__name__)

KEY_NAME = "key"
IV_NAME = "iv"
KEY_LENGTH = 32  # 256 bits for AES-256
IV_LENGTH = 16  # one AES block


@dataclass(frozen=True)
class KeyMaterial:
    """Symmetric key + IV pair used for every cipher operation."""
    key: bytes
    iv: bytes

    def __repr__(self) -> str:
        return f"KeyMaterial(key=<{len(self.key)} bytes>, iv=<{len(self.iv)} bytes>)"


class KeyMaterialProvisioner:
    """
    Lazily creates and reads key material from a SecureVault.

    Vault errors propagate to the caller; there is no local recovery.
    """

    def __init__(self, vault: SecureVault):
        self.vault = vault
        # Serialises read-generate-write so racing coroutines cannot
        # both generate a fresh secret on first use.
        self._lock = asyncio.Lock()

    async def _get_or_create(self, name: str, length: int) -> bytes:
        async with self._lock:
            encoded = await self.vault.read(name)
            if encoded is None:
                encoded = base64.b64encode(os.urandom(length)).decode("ascii")
                await self.vault.write(name, encoded)
                logger.info("key_material_generated", name=name, length=length)

        try:
            material = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise KeyMaterialError(f"Vault entry '{name}' is not valid base64") from e
        if len(material) != length:
            raise KeyMaterialError(
                f"Vault entry '{name}' is {len(material)} bytes, expected {length}"
            )
        return material

    async def get_key(self) -> bytes:
        """Return the 32-byte AES key, generating it on first use."""
        return await self._get_or_create(KEY_NAME, KEY_LENGTH)

    async def get_iv(self) -> bytes:
        """Return the 16-byte IV, generating it on first use."""
        return await self._get_or_create(IV_NAME, IV_LENGTH)

    async def get_key_material(self) -> KeyMaterial:
        return KeyMaterial(key=await self.get_key(), iv=await self.get_iv())
