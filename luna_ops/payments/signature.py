"""Paystack webhook signature check (HMAC-SHA512 of the raw body)."""

import hashlib
import hmac


def compute_signature(secret_key: str, body: bytes) -> str:
    return hmac.new(secret_key.encode("utf-8"), body, hashlib.sha512).hexdigest()


def verify_signature(secret_key: str, body: bytes, signature: str) -> bool:
    """Constant-time comparison of ``signature`` against the expected hex digest."""
    return hmac.compare_digest(compute_signature(secret_key, body), signature.strip().lower())
