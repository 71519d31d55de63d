"""
Razorpay payment signature checks.

Razorpay signs a completed checkout as
HMAC-SHA256(key_secret, "<order_id>|<payment_id>") rendered as hex. Every
input to these helpers is attacker-controlled.
"""

from __future__ import annotations

import hashlib
import hmac
import re

ORDER_ID_PATTERN = re.compile(r"^order_[A-Za-z0-9]{1,40}$")
PAYMENT_ID_PATTERN = re.compile(r"^pay_[A-Za-z0-9]{1,40}$")
MAX_SIGNATURE_LENGTH = 128


def identifiers_well_formed(order_id: str, payment_id: str, signature: str) -> bool:
    """Cheap shape check run before any HMAC work."""
    if not isinstance(order_id, str) or not ORDER_ID_PATTERN.fullmatch(order_id):
        return False
    if not isinstance(payment_id, str) or not PAYMENT_ID_PATTERN.fullmatch(payment_id):
        return False
    return isinstance(signature, str) and 0 < len(signature) <= MAX_SIGNATURE_LENGTH


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def signatures_match(expected: str, supplied: str) -> bool:
    """
    Constant-time comparison of two signatures.

    Lengths are compared first: a different length is a mismatch and never
    reaches hmac.compare_digest.
    """
    expected_bytes = expected.encode()
    supplied_bytes = supplied.encode()
    if len(expected_bytes) != len(supplied_bytes):
        return False
    return hmac.compare_digest(expected_bytes, supplied_bytes)


def redact(identifier: str, keep: int = 10) -> str:
    """Prefix of an identifier that is safe to log."""
    return identifier[:keep]
