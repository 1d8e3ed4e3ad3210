"""
Tests for the versioned wire format.

Tests cover:
- Prefix detection
- Encoding layout
- Decoding failures (missing prefix, other versions, bad base64)
"""
import base64
import pytest

from credential_guard.vault.codec import (
    ENCRYPTED_PREFIX,
    decode,
    encode,
    format_version,
    is_blank,
    is_encrypted,
)
from credential_guard.vault.exceptions import FormatFailure


class TestIsEncrypted:
    """Tests for prefix detection."""

    def test_prefixed_value(self):
        """Test a prefixed value is detected as encrypted."""
        assert is_encrypted("enc:v1:Zm9vYmFy") is True

    def test_plain_api_key(self):
        """Test a plain API key is not encrypted."""
        assert is_encrypted("ABCD1234") is False

    def test_empty_string(self):
        """Test the empty string is not encrypted."""
        assert is_encrypted("") is False

    def test_prefix_must_be_at_start(self):
        """Test the prefix in the middle of a value does not count."""
        assert is_encrypted("key-enc:v1:abc") is False

    def test_non_string(self):
        """Test non-string values are never encrypted."""
        assert is_encrypted(None) is False
        assert is_encrypted(b"enc:v1:abc") is False


class TestFormatVersion:
    """Tests for version token extraction."""

    def test_current_version(self):
        assert format_version("enc:v1:abc") == "v1"

    def test_future_version(self):
        """Test a future version is recognised but not treated as v1."""
        assert format_version("enc:v2:abc") == "v2"
        assert is_encrypted("enc:v2:abc") is False

    def test_plain_value(self):
        assert format_version("ABCD1234") is None


class TestEncodeDecode:
    """Tests for encode/decode."""

    def test_encode_layout(self):
        """Test encode is prefix + standard base64."""
        sealed = b"\x00" * 12 + b"payload"
        encoded = encode(sealed)
        assert encoded.startswith(ENCRYPTED_PREFIX)
        assert encoded[len(ENCRYPTED_PREFIX):] == base64.b64encode(sealed).decode()

    def test_decode_returns_sealed_bytes(self):
        sealed = bytes(range(40))
        assert decode(encode(sealed)) == sealed

    def test_decode_missing_prefix(self):
        """Test decoding a value without the prefix fails."""
        with pytest.raises(FormatFailure):
            decode("Zm9vYmFy")

    def test_decode_other_version(self):
        """Test decoding an unknown version fails."""
        with pytest.raises(FormatFailure, match="v2"):
            decode("enc:v2:Zm9vYmFy")

    def test_decode_bad_base64(self):
        """Test invalid base64 characters are rejected."""
        with pytest.raises(FormatFailure):
            decode("enc:v1:not*base64!")

    def test_decode_bad_padding(self):
        with pytest.raises(FormatFailure):
            decode("enc:v1:xyz")

    def test_decode_non_canonical(self):
        """Test non-zero padding bits are rejected."""
        # "Zh==" decodes to b"f" just like "Zg==" but is not canonical
        with pytest.raises(FormatFailure):
            decode("enc:v1:Zh==")


class TestIsBlank:
    """Tests for blank detection shared by the guard and migration."""

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", None, 42])
    def test_blank(self, value):
        assert is_blank(value) is True

    def test_not_blank(self):
        assert is_blank(" key ") is False
