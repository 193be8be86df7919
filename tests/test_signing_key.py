"""
Test suite for signing key derivation, expiration and signing primitives
"""

from datetime import datetime, timedelta, timezone

import pytest

from solarnetwork_sdk.signing import (
    SigningError,
    SigningErrorCodes,
    derive_signing_key,
    from_hex,
    hmac_sha256,
    is_signing_key_valid,
    percent_encode,
    sha256,
    signing_key_expiration,
    to_hex,
)

TEST_TOKEN_SECRET = "test-token-secret"
TEST_SIGNING_KEY_HEX = "bf7885e8bd107a79f5c6e13001a4fa15fbd43221ad39ca47fde96191d302dbf4"


class TestSigningKeyDerivation:
    """Test signing key derivation"""

    def test_derive(self):
        key = derive_signing_key(TEST_TOKEN_SECRET, datetime(2017, 4, 25, 14, 30, tzinfo=timezone.utc))
        assert to_hex(key) == TEST_SIGNING_KEY_HEX

    def test_derive_uses_utc_day(self):
        """Test that any time on the same UTC day derives the same key"""
        morning = derive_signing_key(TEST_TOKEN_SECRET, datetime(2017, 4, 25, 0, 0, tzinfo=timezone.utc))
        offset = derive_signing_key(
            TEST_TOKEN_SECRET,
            datetime(2017, 4, 25, 18, 0, tzinfo=timezone(timedelta(hours=-5)))
        )
        assert to_hex(morning) == TEST_SIGNING_KEY_HEX
        assert to_hex(offset) == TEST_SIGNING_KEY_HEX

    def test_derive_differs_by_day(self):
        key = derive_signing_key(TEST_TOKEN_SECRET, datetime(2017, 4, 26, tzinfo=timezone.utc))
        assert to_hex(key) != TEST_SIGNING_KEY_HEX

    def test_derive_matches_manual_steps(self):
        date_key = hmac_sha256("SNWS2" + TEST_TOKEN_SECRET, "20170425")
        expected = hmac_sha256(date_key, "snws2_request")
        assert derive_signing_key(TEST_TOKEN_SECRET, datetime(2017, 4, 25, tzinfo=timezone.utc)) == expected


class TestSigningKeyExpiration:
    """Test signing key expiration"""

    def test_expiration_midnight(self):
        signing_date = datetime(2017, 4, 25, tzinfo=timezone.utc)
        assert signing_key_expiration(signing_date) == datetime(2017, 5, 2, tzinfo=timezone.utc)

    def test_expiration_truncated_to_day(self):
        """Test that a key derived late in the day still expires at midnight"""
        signing_date = datetime(2017, 4, 25, 23, 59, 59, tzinfo=timezone.utc)
        assert signing_key_expiration(signing_date) == datetime(2017, 5, 2, tzinfo=timezone.utc)

    def test_validity_boundary(self):
        """Test validity just before and at the expiration instant"""
        signing_date = datetime(2017, 4, 25, tzinfo=timezone.utc)
        key = derive_signing_key(TEST_TOKEN_SECRET, signing_date)
        expiration = signing_key_expiration(signing_date)

        last_valid = signing_date + timedelta(days=6, hours=23, minutes=59, seconds=59, milliseconds=999)
        assert is_signing_key_valid(key, expiration, now=last_valid) is True
        assert is_signing_key_valid(key, expiration, now=signing_date + timedelta(days=7)) is False

    def test_validity_without_key(self):
        expiration = datetime(2017, 5, 2, tzinfo=timezone.utc)
        now = datetime(2017, 4, 26, tzinfo=timezone.utc)
        assert is_signing_key_valid(None, expiration, now=now) is False
        assert is_signing_key_valid(b"", expiration, now=now) is False
        assert is_signing_key_valid(b"key", None, now=now) is False

    def test_validity_naive_now(self):
        expiration = datetime(2017, 5, 2, tzinfo=timezone.utc)
        assert is_signing_key_valid(b"key", expiration, now=datetime(2017, 5, 1, 12, 0)) is True


class TestSigningUtilities:
    """Test hashing and encoding helpers"""

    def test_sha256(self):
        assert to_hex(sha256("")) == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        assert sha256("Hello.") == sha256(b"Hello.")

    def test_hmac_sha256(self):
        # RFC 4231 test case 2
        mac = hmac_sha256("Jefe", "what do ya want for nothing?")
        assert to_hex(mac) == "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"

    def test_from_hex(self):
        assert from_hex("00ff") == b"\x00\xff"

    def test_from_hex_invalid(self):
        with pytest.raises(SigningError) as exc_info:
            from_hex("xyz")
        assert exc_info.value.code == SigningErrorCodes.INVALID_DIGEST

    @pytest.mark.parametrize("value,expected", [
        ("abc-_.~", "abc-_.~"),
        ("a b", "a%20b"),
        ("/path/*", "%2Fpath%2F%2A"),
        ("!'()", "%21%27%28%29"),
        ("+&=", "%2B%26%3D"),
        ("ü", "%C3%BC"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
    ])
    def test_percent_encode(self, value, expected):
        assert percent_encode(value) == expected
