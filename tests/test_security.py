"""Tests for docagent.security."""

from __future__ import annotations

import hashlib
import hmac

from docagent.security import compute_signature, verify_signature


def test_verify_signature_accepts_correct_hmac() -> None:
    body = b'{"ref":"refs/heads/main"}'
    digest = hmac.new(b"secret", body, hashlib.sha256).hexdigest()

    assert verify_signature(body, f"sha256={digest}", "secret") is True


def test_verify_signature_rejects_wrong_secret() -> None:
    body = b"{}"
    signature = compute_signature(body, "other-secret")

    assert verify_signature(body, signature, "secret") is False


def test_verify_signature_returns_false_on_length_mismatch() -> None:
    assert verify_signature(b"{}", "sha256=abc", "secret") is False


def test_verify_signature_rejects_missing_header_and_prefix() -> None:
    body = b"{}"
    digest = hmac.new(b"secret", body, hashlib.sha256).hexdigest()

    assert verify_signature(body, None, "secret") is False
    assert verify_signature(body, "", "secret") is False
    assert verify_signature(body, f"sha1={digest}", "secret") is False


def test_verify_signature_handles_non_ascii_header() -> None:
    assert verify_signature(b"{}", "sha256=" + "é" * 64, "secret") is False
