# Vault - Cipher Adapter
#
# Text -> AES-256-CBC (PKCS#7) -> base64, and back.
#
# The IV is the fixed one from the vault, so identical plaintexts produce
# identical ciphertexts. Stored values are plain base64 with no IV prefix,
# which keeps existing preference files readable.

import base64
import binascii
from dataclasses import dataclass
from typing import Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..core.log_config import get_logger
from .key_material import KeyMaterial, KeyMaterialProvisioner

BLOCK_SIZE_BITS = algorithms.AES.block_size  # 128


@dataclass(frozen=True)
class Decrypted:
    """Successful decryption."""
    plaintext: str


@dataclass(frozen=True)
class DecryptFailure:
    """Ciphertext could not be turned back into text."""
    reason: str


DecryptResult = Union[Decrypted, DecryptFailure]


def _cipher(material: KeyMaterial) -> Cipher:
    return Cipher(algorithms.AES(material.key), modes.CBC(material.iv))


def encrypt_with(material: KeyMaterial, plaintext: str) -> str:
    """Encrypt ``plaintext`` with explicit key material, base64 out."""
    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
    encryptor = _cipher(material).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(ciphertext).decode("ascii")


def decrypt_with(material: KeyMaterial, encoded: str) -> str:
    """
    Decrypt base64 ``encoded`` with explicit key material.

    Raises:
        binascii.Error: malformed base64
        ValueError: wrong length, bad padding (wrong key or corrupt data)
        UnicodeDecodeError: plaintext is not UTF-8
    """
    ciphertext = base64.b64decode(encoded, validate=True)
    decryptor = _cipher(material).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
    data = unpadder.update(padded) + unpadder.finalize()
    return data.decode("utf-8")


class CipherAdapter:
    """
    Encrypts preference text with the vault's key material.

    Decryption never raises for bad input: it returns DecryptFailure and
    reports the reason to the diagnostic sink.

    Args:
        provisioner: Source of the key/IV pair
        diagnostics: structlog-style logger receiving decrypt failures
                     (defaults to this module's logger)
    """

    def __init__(self, provisioner: KeyMaterialProvisioner, diagnostics=None):
        self.provisioner = provisioner
        self.diagnostics = diagnostics or get_logger(__name__)

    async def encrypt(self, plaintext: str) -> str:
        material = await self.provisioner.get_key_material()
        return encrypt_with(material, plaintext)

    async def decrypt(self, encoded: str) -> DecryptResult:
        material = await self.provisioner.get_key_material()
        try:
            return Decrypted(decrypt_with(material, encoded))
        except (binascii.Error, ValueError) as e:
            # UnicodeDecodeError is a ValueError too
            reason = f"{type(e).__name__}: {e}"
            self.diagnostics.warning("decrypt_failed", reason=reason)
            return DecryptFailure(reason)
