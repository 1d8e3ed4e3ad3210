"""
Vault Crypto Core — key derivation and authenticated encryption.

- Key derivation: PBKDF2-HMAC-SHA256(fingerprint, app salt) → 32-byte key
- Sealing: AES-256-GCM (or ChaCha20-Poly1305) → [nonce 12B][payload + tag 16B]

Security Note:
    Never log plaintext, ciphertext or key values.
    Nonces are random 96-bit; collision probability negligible under normal usage.
"""
import os
import hashlib
import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from .exceptions import (
    AuthenticationFailure,
    DecryptionFailure,
    DerivationFailure,
    EncryptionFailure,
)

logger = logging.getLogger("credential_guard.vault")

NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16
KEY_LENGTH = 32  # AES-256

_CIPHERS = {
    "aesgcm": AESGCM,
    "chacha20": ChaCha20Poly1305,
}


def get_cipher_cls(backend: str = "aesgcm") -> type:
    """Return the AEAD cipher class for a configured backend name."""
    try:
        return _CIPHERS[backend]
    except KeyError:
        raise ValueError(f"Unsupported cipher backend: {backend}") from None


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def derive_key(fingerprint: str, salt: bytes, iterations: int) -> bytes:
    """Derive a 32-byte encryption key using PBKDF2-HMAC-SHA256.

    Args:
        fingerprint: Device fingerprint used as password material.
        salt: Fixed application-level salt.
        iterations: PBKDF2 iteration count.

    Returns:
        32-byte derived key.

    Raises:
        DerivationFailure: If the KDF primitive is unavailable or fails.
    """
    try:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=iterations,
        )
        key = kdf.derive(fingerprint.encode("utf-8"))
    except Exception as err:
        raise DerivationFailure(f"Key derivation failed: {err}") from err
    logger.debug("Derived vault key (%d iterations)", iterations)
    return key


def key_digest(key: bytes) -> str:
    """Non-secret identifier of a key, safe to persist and log."""
    return hashlib.sha256(b"credential-guard-key-id:" + key).hexdigest()[:16]


# ---------------------------------------------------------------------------
# Authenticated encryption
# ---------------------------------------------------------------------------

def seal(key: bytes, plaintext: bytes, cipher_cls: type = AESGCM) -> bytes:
    """Encrypt plaintext under key with a fresh random nonce.

    Format: [nonce 12B][encrypted_payload + tag 16B]

    Raises:
        EncryptionFailure: If the cipher rejects the key or input.
    """
    try:
        cipher = cipher_cls(key)
        nonce = os.urandom(NONCE_SIZE)
        ct = cipher.encrypt(nonce, plaintext, None)
    except Exception as err:
        raise EncryptionFailure(f"Sealing failed: {err}") from err
    return nonce + ct


def open_sealed(key: bytes, sealed: bytes, cipher_cls: type = AESGCM) -> bytes:
    """Split nonce, decrypt and authenticate a sealed payload.

    Args:
        key: 32-byte key.
        sealed: Payload in format [nonce 12B][payload+tag].
        cipher_cls: AEAD class that produced the payload.

    Returns:
        Authenticated plaintext bytes.

    Raises:
        AuthenticationFailure: On tag mismatch.
        DecryptionFailure: On malformed input.
    """
    _min = NONCE_SIZE + TAG_SIZE
    if len(sealed) < _min:
        raise DecryptionFailure(
            f"sealed payload too short: {len(sealed)} bytes "
            f"(minimum {_min})"
        )
    nonce = sealed[:NONCE_SIZE]
    ct = sealed[NONCE_SIZE:]
    try:
        return cipher_cls(key).decrypt(nonce, ct, None)
    except InvalidTag as err:
        raise AuthenticationFailure("Authentication tag mismatch") from err
    except Exception as err:
        raise DecryptionFailure(f"Decryption failed: {err}") from err
