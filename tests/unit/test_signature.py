"""Unit tests for webhook signature verification."""

from __future__ import annotations

import hashlib
import hmac

import pytest

from prthread.github.signature import compute_signature, verify_signature
from tests.helpers.github_events import SECRET, encode, pull_request_payload

_BODY = encode(pull_request_payload("opened"))


def test_compute_signature_is_sha1_hmac_of_body() -> None:
    """The header value is the prefixed HMAC-SHA1 hex digest."""
    digest = hmac.new(SECRET.encode(), _BODY, hashlib.sha1).hexdigest()
    assert compute_signature(SECRET, _BODY) == f"sha1={digest}"


def test_valid_signature_verifies() -> None:
    """A signature computed with the shared secret is accepted."""
    assert verify_signature(SECRET, compute_signature(SECRET, _BODY), _BODY)


def test_altered_body_fails() -> None:
    """Changing a single byte of the body invalidates the signature."""
    signature = compute_signature(SECRET, _BODY)
    tampered = bytes([_BODY[0] ^ 0x01]) + _BODY[1:]
    assert not verify_signature(SECRET, signature, tampered)


def test_wrong_secret_fails() -> None:
    """A signature made with another secret is rejected."""
    signature = compute_signature("other-secret", _BODY)
    assert not verify_signature(SECRET, signature, _BODY)


@pytest.mark.parametrize("secret", [None, ""])
def test_unconfigured_secret_fails(secret: str | None) -> None:
    """Verification fails closed without a configured secret."""
    assert not verify_signature(secret, compute_signature(SECRET, _BODY), _BODY)


def test_missing_header_fails() -> None:
    """Verification fails without a signature header."""
    assert not verify_signature(SECRET, None, _BODY)


def test_non_ascii_header_fails_without_raising() -> None:
    """Garbage headers are a mismatch, not an error."""
    assert not verify_signature(SECRET, "sha1=été", _BODY)
