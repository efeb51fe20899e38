"""Webhook payload signature verification."""

import hashlib
import hmac

from botkit.constants import SIGNATURE_ALGORITHM_PREFIX


def strip_algorithm_prefix(signature: str) -> str:
    """Remove a leading ``sha1=`` tag from a signature header value."""
    if signature.startswith(SIGNATURE_ALGORITHM_PREFIX):
        return signature[len(SIGNATURE_ALGORITHM_PREFIX):]
    return signature


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Hex HMAC-SHA1 of ``raw_body`` keyed with ``secret``."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha1).hexdigest()


def verify_signature(
    raw_body: bytes,
    signature: str | None,
    secret: str,
) -> bool:
    """Check a presented signature against the body.

    Args:
        raw_body: Exact bytes received in the request body
        signature: Value of the signature header, with or without ``sha1=``
        secret: App secret the platform signs payloads with

    Returns:
        True if the signature matches, False otherwise (including when the
        signature is missing or the inputs cannot be hashed)
    """
    if not signature:
        return False

    try:
        expected = compute_signature(raw_body, secret)
    except (TypeError, ValueError, AttributeError):
        return False

    presented = strip_algorithm_prefix(signature).encode("utf-8")
    return hmac.compare_digest(presented, expected.encode("ascii"))
