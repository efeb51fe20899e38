"""Tests for webhook signature verification."""

import hashlib
import hmac

from hypothesis import given, strategies as st

from botkit.services.signature import (
    compute_signature,
    strip_algorithm_prefix,
    verify_signature,
)

SECRET = "s3cr3t"
BODY = b'{"object":"page","entry":[]}'


def _hexdigest(body: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha1).hexdigest()


class TestComputeSignature:
    """Test compute_signature()."""

    def test_matches_hmac_sha1_hexdigest(self):
        assert compute_signature(BODY, SECRET) == _hexdigest(BODY, SECRET)

    def test_is_lowercase_hex_of_sha1_length(self):
        signature = compute_signature(BODY, SECRET)
        assert len(signature) == 40
        assert signature == signature.lower()


class TestStripAlgorithmPrefix:
    def test_strips_sha1_prefix(self):
        assert strip_algorithm_prefix("sha1=abc") == "abc"

    def test_leaves_bare_signature_untouched(self):
        assert strip_algorithm_prefix("abc") == "abc"


class TestVerifySignature:
    """Test verify_signature()."""

    def test_accepts_prefixed_signature(self):
        assert verify_signature(BODY, "sha1=" + _hexdigest(BODY, SECRET), SECRET)

    def test_accepts_bare_signature(self):
        assert verify_signature(BODY, _hexdigest(BODY, SECRET), SECRET)

    def test_rejects_signature_for_other_secret(self):
        assert not verify_signature(
            BODY, "sha1=" + _hexdigest(BODY, "other"), SECRET
        )

    def test_rejects_signature_for_modified_body(self):
        signature = "sha1=" + _hexdigest(BODY, SECRET)
        assert not verify_signature(BODY + b" ", signature, SECRET)

    def test_rejects_missing_signature(self):
        assert not verify_signature(BODY, None, SECRET)
        assert not verify_signature(BODY, "", SECRET)

    def test_rejects_uppercase_hex(self):
        """The hex digest is compared exactly, case included."""
        signature = "sha1=" + _hexdigest(BODY, SECRET).upper()
        assert not verify_signature(BODY, signature, SECRET)

    def test_returns_false_instead_of_raising_on_bad_secret(self):
        assert not verify_signature(BODY, "sha1=abc", None)

    def test_non_ascii_signature_returns_false(self):
        assert not verify_signature(BODY, "sha1=é", SECRET)

    @given(body=st.binary(max_size=512), secret=st.text(min_size=1, max_size=32))
    def test_own_signature_always_verifies(self, body, secret):
        """A signature computed with the same secret always verifies."""
        assert verify_signature(body, "sha1=" + compute_signature(body, secret), secret)
