"""
Tests for legacy plaintext migration.

Tests cover:
- Single value migration and idempotence
- Record-level helpers used by the settings layer
"""
import pytest

from credential_guard.vault import (
    decrypt_fields,
    encrypt_fields,
    migrate_fields,
)

API_KEY_FIELDS = ("polygonApiKey", "finnhubApiKey", "twelvedataApiKey")


class TestMigrate:
    """Tests for CredentialGuard.migrate."""

    def test_empty(self, shared_guard):
        assert shared_guard.migrate("") == ""

    def test_encrypted_unchanged(self, shared_guard):
        assert shared_guard.migrate("enc:v1:xyz") == "enc:v1:xyz"

    def test_plaintext_encrypted(self, shared_guard):
        migrated = shared_guard.migrate("ABCD1234")
        assert shared_guard.is_encrypted(migrated)
        assert shared_guard.decrypt(migrated) == "ABCD1234"

    @pytest.mark.parametrize("value", ["", "   ", "ABCD1234", "enc:v1:Zm9vYmFy"])
    def test_idempotent(self, shared_guard, value):
        """Test migrate(migrate(x)) == migrate(x)."""
        once = shared_guard.migrate(value)
        assert shared_guard.migrate(once) == once


class TestMigrateFields:
    """Tests for record-level migration."""

    def test_only_changed_fields_returned(self, shared_guard):
        already = shared_guard.encrypt("F1NNHUB")
        record = {
            "id": 1,
            "polygonApiKey": "P0LYG0N",
            "finnhubApiKey": already,
            "twelvedataApiKey": "",
            "theme": "dark",
        }
        updates = migrate_fields(shared_guard, record, API_KEY_FIELDS)
        assert set(updates) == {"polygonApiKey"}
        assert shared_guard.decrypt(updates["polygonApiKey"]) == "P0LYG0N"
        # the stored record is left untouched
        assert record["polygonApiKey"] == "P0LYG0N"

    def test_nothing_to_migrate(self, shared_guard):
        record = {"polygonApiKey": shared_guard.encrypt("P"), "theme": "dark"}
        assert migrate_fields(shared_guard, record, API_KEY_FIELDS) == {}

    def test_missing_and_non_string_fields(self, shared_guard):
        record = {"polygonApiKey": None, "finnhubApiKey": 42}
        assert migrate_fields(shared_guard, record, API_KEY_FIELDS) == {}


class TestFieldHelpers:
    """Tests for encrypt_fields/decrypt_fields."""

    def test_round_trip(self, shared_guard):
        settings = {
            "polygonApiKey": "P0LYG0N",
            "finnhubApiKey": "",
            "theme": "dark",
        }
        encrypted = encrypt_fields(shared_guard, settings, API_KEY_FIELDS)
        assert shared_guard.is_encrypted(encrypted["polygonApiKey"])
        assert encrypted["finnhubApiKey"] == ""
        assert encrypted["theme"] == "dark"
        assert settings["polygonApiKey"] == "P0LYG0N"
        assert decrypt_fields(shared_guard, encrypted, API_KEY_FIELDS) == settings

    def test_decrypt_legacy_values(self, shared_guard):
        record = {"polygonApiKey": "LEGACY"}
        assert decrypt_fields(shared_guard, record, API_KEY_FIELDS) == record
