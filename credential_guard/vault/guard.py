"""
CredentialGuard — string-in/string-out protection for stored API keys.

Public API:
- ``encrypt(plaintext)`` — seal and encode; plaintext kept on failure
- ``decrypt(encoded)`` — decode and open; ``""`` on failure
- ``is_encrypted(value)`` — prefix check
- ``migrate(value)`` — idempotent upgrade of legacy plaintext

Failures never propagate past these calls. Encryption failure keeps the
secret in plaintext (data availability first); decryption failure drops
it and the user has to re-enter the key.

Security Note:
    Never log plaintext or ciphertext values. Only log operations and
    error types.
"""
import asyncio
import logging
import threading
from typing import Any, Optional

from .codec import decode, encode, is_blank as _is_blank, is_encrypted as _has_prefix
from .config import VaultConfig
from .crypto import derive_key, get_cipher_cls, key_digest, open_sealed, seal
from .exceptions import (
    AuthenticationFailure,
    CredentialError,
    DecryptionFailure,
    FormatFailure,
)
from .fingerprint import DeviceInfoProvider, StaticDeviceInfo, SystemDeviceInfo
from .keycache import KeyCache
from . import migration

logger = logging.getLogger("credential_guard")


class CredentialGuard:
    """Encrypts and decrypts secrets with a device-bound key.

    The key is derived from the device fingerprint on first use and held
    in a :class:`KeyCache` for the life of this instance.
    """

    def __init__(
        self,
        config: Optional[VaultConfig] = None,
        device: Optional[DeviceInfoProvider] = None,
        cache: Optional[KeyCache] = None,
    ):
        self._config = config or VaultConfig()
        if device is None:
            if self._config.fingerprint:
                device = StaticDeviceInfo(self._config.fingerprint)
            else:
                device = SystemDeviceInfo()
        self._device = device
        self._cache = cache if cache is not None else KeyCache()
        self._cipher_cls = get_cipher_cls(self._config.cipher_backend)

    @property
    def config(self) -> VaultConfig:
        return self._config

    @property
    def cache(self) -> KeyCache:
        return self._cache

    # ------------------------------------------------------------------
    # Key handling
    # ------------------------------------------------------------------

    def _derive(self) -> bytes:
        return derive_key(
            self._device.fingerprint(),
            self._config.salt,
            self._config.iterations,
        )

    def get_key(self) -> bytes:
        """Return the session key, deriving it on a cache miss.

        Raises:
            DerivationFailure: If the KDF fails.
        """
        return self._cache.get_or_derive(self._derive)

    def key_id(self) -> str:
        """Short, non-secret identifier of the current key.

        Raises:
            DerivationFailure: If the KDF fails.
        """
        return key_digest(self.get_key())

    def clear(self) -> None:
        """End the session: forget the derived key."""
        self._cache.clear()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def is_encrypted(self, value: Any) -> bool:
        return _has_prefix(value)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a secret for persistence.

        Args:
            plaintext: Secret value. Blank input yields ``""``; input that
                is already encrypted is returned unchanged.

        Returns:
            ``enc:v1:`` string, or the original plaintext if encryption
            failed.
        """
        if _is_blank(plaintext):
            return ""
        if _has_prefix(plaintext):
            return plaintext
        try:
            sealed = seal(
                self.get_key(), plaintext.encode("utf-8"), self._cipher_cls
            )
            return encode(sealed)
        except CredentialError as err:
            logger.error(
                "Encryption failed (%s), keeping value in plaintext: %s",
                type(err).__name__, err,
            )
        except Exception as err:
            logger.exception(
                "Unexpected encryption error (%s), keeping value in plaintext",
                type(err).__name__,
            )
        return plaintext

    def decrypt(self, encoded: str) -> str:
        """Decrypt a stored secret.

        Args:
            encoded: Stored value. Blank input yields ``""``; values
                without the encrypted prefix are legacy plaintext and
                are returned unchanged.

        Returns:
            The plaintext, or ``""`` when the secret is unrecoverable.
        """
        if _is_blank(encoded):
            return ""
        if not _has_prefix(encoded):
            return encoded
        try:
            sealed = decode(encoded)
            plaintext = open_sealed(self.get_key(), sealed, self._cipher_cls)
            try:
                return plaintext.decode("utf-8")
            except UnicodeDecodeError as err:
                raise DecryptionFailure("Decrypted value is not UTF-8") from err
        except AuthenticationFailure as err:
            logger.warning(
                "Decryption failed (%s): %s. The device fingerprint may have "
                "changed since this secret was stored, or the value was "
                "altered; it must be re-entered.",
                type(err).__name__, err,
            )
        except (DecryptionFailure, FormatFailure) as err:
            logger.error(
                "Stored secret is corrupted (%s): %s", type(err).__name__, err,
            )
        except CredentialError as err:
            logger.error(
                "Decryption failed (%s): %s", type(err).__name__, err,
            )
        except Exception as err:
            logger.exception(
                "Unexpected decryption error (%s)", type(err).__name__,
            )
        return ""

    def migrate(self, value: str) -> str:
        """Encrypt legacy plaintext; blank and encrypted values pass through."""
        return migration.migrate(self, value)

    # ------------------------------------------------------------------
    # Async variants
    # ------------------------------------------------------------------

    async def aencrypt(self, plaintext: str) -> str:
        return await asyncio.to_thread(self.encrypt, plaintext)

    async def adecrypt(self, encoded: str) -> str:
        return await asyncio.to_thread(self.decrypt, encoded)

    async def amigrate(self, value: str) -> str:
        return await asyncio.to_thread(self.migrate, value)


# ---------------------------------------------------------------------------
# Default guard
# ---------------------------------------------------------------------------

_default_guard: Optional[CredentialGuard] = None
_default_lock = threading.Lock()


def get_default_guard() -> CredentialGuard:
    """Return the process-wide guard, creating it from the environment."""
    global _default_guard
    with _default_lock:
        if _default_guard is None:
            try:
                config = VaultConfig.from_env()
            except CredentialError as err:
                logger.error(
                    "Invalid vault configuration, using defaults: %s", err
                )
                config = VaultConfig()
            _default_guard = CredentialGuard(config=config)
        return _default_guard


def set_default_guard(guard: Optional[CredentialGuard]) -> None:
    """Replace (or reset, with None) the process-wide guard."""
    global _default_guard
    with _default_lock:
        _default_guard = guard


def encrypt(plaintext: str) -> str:
    return get_default_guard().encrypt(plaintext)


def decrypt(encoded: str) -> str:
    return get_default_guard().decrypt(encoded)


def is_encrypted(value: Any) -> bool:
    return _has_prefix(value)


def migrate(value: str) -> str:
    return get_default_guard().migrate(value)
