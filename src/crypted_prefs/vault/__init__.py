# Vault Module - Key Material and Cipher
#
# AES-256-CBC encryption of preference text
# Key and IV kept in OS-protected storage (keyring)

from .encryption import CipherAdapter, Decrypted, DecryptFailure, DecryptResult
from .key_material import KeyMaterial, KeyMaterialProvisioner
from .secure_vault import KeyringVault, SecureVault

__all__ = [
    "CipherAdapter",
    "Decrypted",
    "DecryptFailure",
    "DecryptResult",
    "KeyMaterial",
    "KeyMaterialProvisioner",
    "KeyringVault",
    "SecureVault",
]
