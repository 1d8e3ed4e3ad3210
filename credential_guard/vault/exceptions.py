"""Error taxonomy for the credential vault.

Internal layers raise these; the public guard functions catch them and
turn them into well-defined string results.
"""


class CredentialError(Exception):
    """Base class for every credential vault failure."""


class ConfigError(CredentialError):
    """Invalid vault configuration."""


class DerivationFailure(CredentialError):
    """The KDF primitive is unavailable or failed."""


class EncryptionFailure(CredentialError):
    """Sealing a plaintext failed."""


class DecryptionFailure(CredentialError):
    """Authentication failed, or the sealed payload is truncated or corrupted."""


class FormatFailure(CredentialError):
    """Stored value has a malformed prefix or base64 body."""


class AuthenticationFailure(DecryptionFailure):
    """Authentication tag mismatch: wrong key or altered ciphertext."""
