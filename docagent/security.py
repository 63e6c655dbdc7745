"""Webhook signature verification."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Return the ``sha256=<hex>`` signature GitHub sends for ``raw_body``."""
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(raw_body: bytes, signature_header: str | None, secret: str) -> bool:
    """Check an ``X-Hub-Signature-256`` header against the shared webhook secret.

    Missing headers, headers without the ``sha256=`` prefix and headers of the
    wrong length are rejected before the constant-time comparison runs.
    """
    if not signature_header or not signature_header.startswith(SIGNATURE_PREFIX):
        return False

    provided = signature_header.encode("utf-8")
    expected = compute_signature(raw_body, secret).encode("utf-8")
    if len(provided) != len(expected):
        return False

    return hmac.compare_digest(provided, expected)


__all__ = ["SIGNATURE_PREFIX", "compute_signature", "verify_signature"]
