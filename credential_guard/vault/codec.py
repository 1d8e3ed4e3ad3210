"""
Format Codec — versioned wire representation of sealed secrets.

Stored form: ``enc:v1:<base64(nonce || ciphertext)>``. The prefix alone
tells whether a stored string is encrypted; the ``v1`` token is reserved
so later revisions can be told apart.
"""
import re
import base64
import binascii
from typing import Any, Optional

from .exceptions import FormatFailure

FORMAT_VERSION = "v1"
ENCRYPTED_PREFIX = f"enc:{FORMAT_VERSION}:"

_VERSION_PATTERN = re.compile(r"^enc:(v\d+):")


def is_blank(value: Any) -> bool:
    """True for non-strings and strings holding only whitespace."""
    return not isinstance(value, str) or value.strip() == ""


def is_encrypted(value: Any) -> bool:
    """True iff value is a string carrying the encrypted prefix."""
    return isinstance(value, str) and value.startswith(ENCRYPTED_PREFIX)


def format_version(value: Any) -> Optional[str]:
    """Return the version token of an ``enc:vN:`` string, or None."""
    if not isinstance(value, str):
        return None
    match = _VERSION_PATTERN.match(value)
    return match.group(1) if match else None


def encode(sealed: bytes) -> str:
    """Base64-encode sealed bytes and prepend the format prefix."""
    return ENCRYPTED_PREFIX + base64.b64encode(sealed).decode("ascii")


def decode(value: str) -> bytes:
    """Strip the prefix and base64-decode the body.

    Raises:
        FormatFailure: If the prefix is absent, names another version,
            or the body is not valid base64.
    """
    if not is_encrypted(value):
        version = format_version(value)
        if version is not None:
            raise FormatFailure(f"Unsupported format version: {version}")
        raise FormatFailure("Missing encrypted prefix")
    body = value[len(ENCRYPTED_PREFIX):]
    try:
        sealed = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as err:
        raise FormatFailure(f"Malformed base64 payload: {err}") from err
    # reject non-zero padding bits so every character change is detected
    if base64.b64encode(sealed).decode("ascii") != body:
        raise FormatFailure("Non-canonical base64 payload")
    return sealed
