"""Sync token generation and verification.

A sync token is the hex HMAC-SHA256 of a club slug under a shared secret, so
any device that knows the secret can sync a club without an account.
"""

import hashlib
import hmac
import re

from nosjoueurs.constants import CLUB_SLUG_PATTERN

_SLUG_RE = re.compile(CLUB_SLUG_PATTERN)


def is_valid_slug(slug):
    """Return True when ``slug`` matches the club slug format."""
    return isinstance(slug, str) and bool(_SLUG_RE.fullmatch(slug))


def generate_sync_token(slug, secret):
    """Return the hex HMAC-SHA256 of ``slug``."""
    return hmac.new(
        secret.encode("utf-8"), slug.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def verify_sync_token(slug, token, secret):
    """Compare ``token`` to the expected token in constant time."""
    if not token or not isinstance(token, str):
        return False
    expected = generate_sync_token(slug, secret)
    return hmac.compare_digest(expected.encode("utf-8"), token.encode("utf-8"))
