"""
Migration Manager — upgrade legacy plaintext secrets to the encrypted format.

All helpers are idempotent: values already carrying the encrypted prefix
are never encrypted twice.
"""
import logging
from typing import TYPE_CHECKING, Any
from collections.abc import Iterable, Mapping

from .codec import is_blank as _is_blank, is_encrypted

if TYPE_CHECKING:
    from .guard import CredentialGuard

logger = logging.getLogger("credential_guard.vault")


def migrate(guard: "CredentialGuard", value: str) -> str:
    """Encrypt a legacy plaintext value; leave blank or encrypted values alone."""
    if _is_blank(value) or is_encrypted(value):
        return value
    return guard.encrypt(value)


def migrate_fields(
    guard: "CredentialGuard",
    record: Mapping[str, Any],
    fields: Iterable[str],
) -> dict[str, Any]:
    """Migrate the protected fields of a stored record.

    Args:
        guard: Guard used to encrypt legacy values.
        record: Stored record (e.g. a settings row).
        fields: Names of the fields holding secrets.

    Returns:
        Only the fields whose stored value changed; empty when
        nothing needs migrating.
    """
    updates: dict[str, Any] = {}
    for field in fields:
        value = record.get(field)
        if _is_blank(value):
            continue
        migrated = migrate(guard, value)
        if migrated != value:
            updates[field] = migrated
    if updates:
        logger.info(
            "Migrated %d plaintext field(s) to encrypted format: %s",
            len(updates), sorted(updates.keys()),
        )
    return updates


def encrypt_fields(
    guard: "CredentialGuard",
    record: Mapping[str, Any],
    fields: Iterable[str],
) -> dict[str, Any]:
    """Return a copy of record with every non-empty protected field encrypted."""
    encrypted = dict(record)
    for field in fields:
        value = encrypted.get(field)
        if isinstance(value, str) and value:
            encrypted[field] = guard.encrypt(value)
    return encrypted


def decrypt_fields(
    guard: "CredentialGuard",
    record: Mapping[str, Any],
    fields: Iterable[str],
) -> dict[str, Any]:
    """Return a copy of record with every non-empty protected field decrypted."""
    decrypted = dict(record)
    for field in fields:
        value = decrypted.get(field)
        if isinstance(value, str) and value:
            decrypted[field] = guard.decrypt(value)
    return decrypted
