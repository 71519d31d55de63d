"""
Tests for Razorpay signature helpers.
"""

import hashlib
import hmac

import pytest

from payments.signatures import (
    compute_signature,
    identifiers_well_formed,
    redact,
    signatures_match,
)

ORDER_ID = "order_NcXkQ2m1abc"
PAYMENT_ID = "pay_NcXl8d0qabc"


class TestIdentifiersWellFormed:
    def test_valid(self):
        assert identifiers_well_formed(ORDER_ID, PAYMENT_ID, "a" * 64) is True

    @pytest.mark.parametrize(
        "order_id,payment_id,signature",
        [
            ("", PAYMENT_ID, "abc"),
            ("ord_123", PAYMENT_ID, "abc"),
            ("order_" + "a" * 41, PAYMENT_ID, "abc"),
            ("order_abc;drop", PAYMENT_ID, "abc"),
            (ORDER_ID, "payment_123", "abc"),
            (ORDER_ID, "pay_", "abc"),
            (ORDER_ID, PAYMENT_ID, ""),
            (ORDER_ID, PAYMENT_ID, "a" * 129),
            (None, PAYMENT_ID, "abc"),
            (ORDER_ID, PAYMENT_ID, 123),
        ],
    )
    def test_malformed(self, order_id, payment_id, signature):
        assert identifiers_well_formed(order_id, payment_id, signature) is False

    def test_max_signature_length_accepted(self):
        assert identifiers_well_formed(ORDER_ID, PAYMENT_ID, "a" * 128) is True


class TestComputeSignature:
    def test_hmac_sha256_of_order_and_payment(self):
        expected = hmac.new(
            b"secret", f"{ORDER_ID}|{PAYMENT_ID}".encode(), hashlib.sha256
        ).hexdigest()

        assert compute_signature("secret", ORDER_ID, PAYMENT_ID) == expected

    def test_hex_encoded(self):
        signature = compute_signature("secret", ORDER_ID, PAYMENT_ID)

        assert len(signature) == 64
        int(signature, 16)

    def test_secret_changes_signature(self):
        assert compute_signature("a", ORDER_ID, PAYMENT_ID) != compute_signature(
            "b", ORDER_ID, PAYMENT_ID
        )


class TestSignaturesMatch:
    def test_equal(self):
        signature = compute_signature("secret", ORDER_ID, PAYMENT_ID)

        assert signatures_match(signature, signature) is True

    def test_single_character_differs(self):
        signature = compute_signature("secret", ORDER_ID, PAYMENT_ID)
        tampered = signature[:-1] + ("0" if signature[-1] != "0" else "1")

        assert signatures_match(signature, tampered) is False

    def test_length_mismatch(self):
        signature = compute_signature("secret", ORDER_ID, PAYMENT_ID)

        assert signatures_match(signature, signature[:10]) is False
        assert signatures_match(signature, signature + "00") is False


def test_redact_keeps_prefix():
    assert redact(ORDER_ID) == "order_NcXk"
    assert redact("pay_1", keep=3) == "pay"
