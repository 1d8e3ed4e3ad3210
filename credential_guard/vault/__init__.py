"""Credential Vault — device-bound encryption for stored API keys.

Security Note (Threat Model):
    The key is derived from low-entropy environment signals and a fixed
    application salt. It protects secrets at rest against casual
    inspection of the settings file, not against a local attacker who
    can run code as the same user. Decrypted values exist in process
    memory during use; this is an accepted limitation.
"""

from .codec import ENCRYPTED_PREFIX, FORMAT_VERSION
from .config import VaultConfig
from .exceptions import (
    CredentialError,
    ConfigError,
    DerivationFailure,
    EncryptionFailure,
    DecryptionFailure,
    AuthenticationFailure,
    FormatFailure,
)
from .fingerprint import DeviceInfoProvider, SystemDeviceInfo, StaticDeviceInfo
from .keycache import KeyCache
from .guard import (
    CredentialGuard,
    get_default_guard,
    set_default_guard,
    encrypt,
    decrypt,
    is_encrypted,
    migrate,
)
from .migration import migrate_fields, encrypt_fields, decrypt_fields

__all__ = [
    "ENCRYPTED_PREFIX",
    "FORMAT_VERSION",
    "VaultConfig",
    "CredentialError",
    "ConfigError",
    "DerivationFailure",
    "EncryptionFailure",
    "DecryptionFailure",
    "AuthenticationFailure",
    "FormatFailure",
    "DeviceInfoProvider",
    "SystemDeviceInfo",
    "StaticDeviceInfo",
    "KeyCache",
    "CredentialGuard",
    "get_default_guard",
    "set_default_guard",
    "encrypt",
    "decrypt",
    "is_encrypted",
    "migrate",
    "migrate_fields",
    "encrypt_fields",
    "decrypt_fields",
]
