"""Credential Guard.

Encrypts third-party API keys before they are written to the local
settings store.
"""
from .version import __version__
from .vault import (
    CredentialGuard,
    VaultConfig,
    encrypt,
    decrypt,
    is_encrypted,
    migrate,
)
from .settings import ProtectedSettings

__all__ = (
    "__version__",
    "CredentialGuard",
    "VaultConfig",
    "ProtectedSettings",
    "encrypt",
    "decrypt",
    "is_encrypted",
    "migrate",
)
