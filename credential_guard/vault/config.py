"""
Vault Configuration — KDF parameters and validated settings.

Reads optional overrides from environment variables:
    CREDENTIAL_GUARD_SALT = <application salt, utf-8 text>
    CREDENTIAL_GUARD_ITERATIONS = <integer, at least 100000>
    CREDENTIAL_GUARD_CIPHER = aesgcm | chacha20
    CREDENTIAL_GUARD_FINGERPRINT = <fixed device fingerprint>

Security Note:
    Never log key material or the fingerprint. Only log parameter names.
"""
import os
import logging
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError

logger = logging.getLogger("credential_guard.vault")

DEFAULT_SALT = b"credential-guard-api-keys"
DEFAULT_ITERATIONS = 100_000
MIN_ITERATIONS = 100_000
SUPPORTED_CIPHERS = ("aesgcm", "chacha20")


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    salt: bytes = Field(default=DEFAULT_SALT)
    iterations: int = Field(default=DEFAULT_ITERATIONS, ge=MIN_ITERATIONS)
    cipher_backend: str = Field(default="aesgcm")
    fingerprint: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("salt")
    @classmethod
    def validate_salt(cls, v: bytes) -> bytes:
        """Salt must not be empty."""
        if not v:
            raise ValueError("salt cannot be empty")
        return v

    @field_validator("cipher_backend")
    @classmethod
    def validate_cipher(cls, v: str) -> str:
        """Validate cipher backend is supported."""
        v = v.lower()
        if v not in SUPPORTED_CIPHERS:
            raise ValueError(f"Unsupported cipher backend: {v}")
        return v

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig from environment overrides.

        Returns:
            Populated VaultConfig instance.

        Raises:
            ConfigError: If any override is invalid.
        """
        values: dict = {}
        salt = os.environ.get("CREDENTIAL_GUARD_SALT")
        if salt is not None:
            values["salt"] = salt.encode("utf-8")
        iterations = os.environ.get("CREDENTIAL_GUARD_ITERATIONS")
        if iterations is not None:
            try:
                values["iterations"] = int(iterations)
            except ValueError as err:
                raise ConfigError(
                    f"CREDENTIAL_GUARD_ITERATIONS must be an integer, got {iterations!r}"
                ) from err
        cipher = os.environ.get("CREDENTIAL_GUARD_CIPHER")
        if cipher is not None:
            values["cipher_backend"] = cipher
        fingerprint = os.environ.get("CREDENTIAL_GUARD_FINGERPRINT")
        if fingerprint:
            values["fingerprint"] = fingerprint
        try:
            config = cls(**values)
        except ValidationError as err:
            raise ConfigError(str(err)) from err
        logger.debug(
            "Vault config loaded from env: overrides=%s", sorted(values.keys())
        )
        return config
