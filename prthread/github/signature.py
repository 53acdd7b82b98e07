"""Webhook signature verification.

GitHub signs every delivery with ``X-Hub-Signature: sha1=<hexdigest>``, the
HMAC-SHA1 of the raw request body keyed with the webhook secret.

Examples
--------
>>> import hashlib, hmac
>>> body = b'{"action": "opened"}'
>>> digest = hmac.new(b"s3cret", body, hashlib.sha1).hexdigest()
>>> verify_signature("s3cret", f"sha1={digest}", body)
True
>>> verify_signature(None, f"sha1={digest}", body)
False

"""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_PREFIX = "sha1="


def compute_signature(secret: str, raw_body: bytes) -> str:
    """Return the ``X-Hub-Signature`` value GitHub would send for a body."""
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha1).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(
    secret: str | None,
    signature: str | None,
    raw_body: bytes,
) -> bool:
    """Return whether ``signature`` authenticates ``raw_body``.

    Both an unconfigured secret and a missing header fail verification; the
    caller decides how to report each case.
    """
    if not secret:
        return False
    if signature is None:
        return False
    expected = compute_signature(secret, raw_body)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


__all__ = ["SIGNATURE_PREFIX", "compute_signature", "verify_signature"]
