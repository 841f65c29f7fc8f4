"""
HMAC-SHA256 token generation and comparison.
"""

from __future__ import annotations

import base64
import hashlib
import hmac

from .canonical import CanonicalString

__all__ = ["sign", "tokens_match"]


def sign(secret_key: str, canonical: CanonicalString) -> str:
    """Return ``base64(HMAC-SHA256(secret_key, canonical))``."""
    digest = hmac.new(
        secret_key.encode("utf-8"),
        canonical.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def tokens_match(expected: str, supplied: object) -> bool:
    """
    Compare two tokens in constant time.

    ``supplied`` comes from the outside world, so anything that is not a
    string simply fails the comparison.
    """
    if not isinstance(supplied, str):
        return False
    try:
        supplied_bytes = supplied.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), supplied_bytes)
