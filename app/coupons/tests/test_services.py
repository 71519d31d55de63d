"""
Tests for CouponService.

Tests cover:
- Discount arithmetic (percentage and fixed, rounding down, clamping)
- Check precedence and user-facing messages
- Case-insensitive codes
- Store failures reported as unavailable
- Guarded redemption counting
"""

import datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from coupons.exceptions import CouponUsageLimitError
from coupons.models import Coupon, DiscountType
from coupons.services import (
    MSG_EXPIRED,
    MSG_INVALID,
    MSG_NO_DISCOUNT,
    MSG_NOT_YET_VALID,
    MSG_UNAVAILABLE,
    MSG_USAGE_LIMIT,
    CouponService,
    CouponStatus,
    calculate_discount,
    format_amount,
)
from coupons.tests.factories import CouponFactory

NOW = datetime.datetime(2026, 6, 1, 12, 0, tzinfo=datetime.timezone.utc)


# =============================================================================
# Arithmetic
# =============================================================================


class TestCalculateDiscount:
    @pytest.mark.parametrize(
        "discount_type,value,amount,expected",
        [
            (DiscountType.PERCENTAGE, "10", 129900, 12990),
            (DiscountType.PERCENTAGE, "15", 89900, 13485),
            (DiscountType.PERCENTAGE, "33.33", 49900, 16631),
            (DiscountType.PERCENTAGE, "100", 129900, 129900),
            (DiscountType.PERCENTAGE, "150", 129900, 129900),
            (DiscountType.PERCENTAGE, "0", 129900, 0),
            (DiscountType.FIXED, "200", 129900, 20000),
            (DiscountType.FIXED, "5000", 129900, 129900),
            (DiscountType.FIXED, "0.015", 129900, 1),
            (DiscountType.PERCENTAGE, "10", 0, 0),
        ],
    )
    def test_discount(self, discount_type, value, amount, expected):
        assert calculate_discount(discount_type, Decimal(value), amount) == expected

    def test_discount_never_exceeds_amount(self):
        for value in ("99.99", "100", "250"):
            assert calculate_discount(DiscountType.PERCENTAGE, Decimal(value), 999) <= 999


class TestFormatAmount:
    def test_whole_rupees(self):
        assert format_amount(49900) == "₹499"

    def test_fractional(self):
        assert format_amount(49950) == "₹499.50"

    def test_dollars(self):
        assert format_amount(1600, "usd") == "$16"


# =============================================================================
# Evaluation
# =============================================================================


@pytest.mark.django_db
class TestEvaluate:
    def test_no_code(self):
        evaluation = CouponService.evaluate("", 129900)

        assert evaluation.status == CouponStatus.NOT_APPLICABLE
        assert evaluation.discount_amount == 0
        assert evaluation.message is None

    def test_whitespace_code_is_no_code(self):
        assert CouponService.evaluate("   ", 129900).status == CouponStatus.NOT_APPLICABLE

    def test_non_string_code_is_no_code(self):
        assert CouponService.evaluate(None, 129900).status == CouponStatus.NOT_APPLICABLE

    def test_applies_percentage(self):
        coupon = CouponFactory(code="WELCOME10")

        evaluation = CouponService.evaluate("WELCOME10", 129900, now=NOW)

        assert evaluation.applicable is True
        assert evaluation.discount_amount == 12990
        assert evaluation.coupon == coupon
        assert evaluation.coupon_id == coupon.id
        assert evaluation.message is None

    def test_code_is_case_insensitive_and_trimmed(self):
        CouponFactory(code="WELCOME10")

        evaluation = CouponService.evaluate("  welcome10 ", 129900, now=NOW)

        assert evaluation.applicable is True
        assert evaluation.code == "WELCOME10"

    def test_unknown_code(self):
        evaluation = CouponService.evaluate("NOPE", 129900, now=NOW)

        assert evaluation.status == CouponStatus.INVALID
        assert evaluation.message == MSG_INVALID
        assert evaluation.code == "NOPE"

    def test_inactive(self):
        CouponFactory(code="OLD", is_active=False)

        assert CouponService.evaluate("OLD", 129900, now=NOW).message == MSG_INVALID

    def test_not_yet_valid(self):
        CouponFactory(code="SOON", valid_from=NOW + datetime.timedelta(days=1))

        assert CouponService.evaluate("SOON", 129900, now=NOW).message == MSG_NOT_YET_VALID

    def test_expired(self):
        CouponFactory(code="GONE", valid_until=NOW - datetime.timedelta(seconds=1))

        assert CouponService.evaluate("GONE", 129900, now=NOW).message == MSG_EXPIRED

    def test_validity_bounds_are_inclusive(self):
        CouponFactory(code="EDGE", valid_from=NOW, valid_until=NOW)

        assert CouponService.evaluate("EDGE", 129900, now=NOW).applicable is True

    def test_usage_limit_reached(self):
        CouponFactory(code="LAST5", max_uses=5, used_count=5)

        evaluation = CouponService.evaluate("LAST5", 129900, now=NOW)

        assert evaluation.status == CouponStatus.INVALID
        assert evaluation.message == MSG_USAGE_LIMIT

    def test_usage_limit_reported_before_minimum_amount(self):
        CouponFactory(code="LAST5", max_uses=5, used_count=5, min_amount=49900)

        evaluation = CouponService.evaluate("LAST5", 100, now=NOW)

        assert evaluation.status == CouponStatus.INVALID
        assert evaluation.message == MSG_USAGE_LIMIT

    def test_usage_below_limit(self):
        CouponFactory(code="LAST5", max_uses=5, used_count=4)

        assert CouponService.evaluate("LAST5", 129900, now=NOW).applicable is True

    def test_minimum_amount(self):
        CouponFactory(code="BIG", min_amount=49900)

        evaluation = CouponService.evaluate("BIG", 29900, now=NOW)

        assert evaluation.status == CouponStatus.INVALID
        assert evaluation.message == "Minimum order amount is ₹499 for this coupon"

    def test_minimum_amount_in_usd(self):
        CouponFactory(code="BIG", min_amount=2000)

        evaluation = CouponService.evaluate("BIG", 1600, now=NOW, currency="USD")

        assert evaluation.message == "Minimum order amount is $20 for this coupon"

    def test_expiry_reported_before_usage_limit(self):
        CouponFactory(
            code="BOTH",
            valid_until=NOW - datetime.timedelta(days=1),
            max_uses=1,
            used_count=1,
            min_amount=999999,
        )

        assert CouponService.evaluate("BOTH", 100, now=NOW).message == MSG_EXPIRED

    def test_zero_discount(self):
        CouponFactory(code="ZERO", discount_value=Decimal("0"))

        evaluation = CouponService.evaluate("ZERO", 129900, now=NOW)

        assert evaluation.status == CouponStatus.NO_DISCOUNT
        assert evaluation.applicable is False
        assert evaluation.message == MSG_NO_DISCOUNT

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError):
            CouponService.evaluate("WELCOME10", -1)

    def test_store_unavailable(self):
        with patch.object(Coupon.objects, "filter", side_effect=DatabaseError("connection refused")):
            evaluation = CouponService.evaluate("WELCOME10", 129900, now=NOW)

        assert evaluation.status == CouponStatus.UNAVAILABLE
        assert evaluation.message == MSG_UNAVAILABLE
        assert evaluation.applicable is False

    def test_evaluation_does_not_count_usage(self):
        coupon = CouponFactory(code="WELCOME10", max_uses=5)

        CouponService.evaluate("WELCOME10", 129900, now=NOW)

        coupon.refresh_from_db()
        assert coupon.used_count == 0


# =============================================================================
# Redemption
# =============================================================================


@pytest.mark.django_db
class TestRecordRedemption:
    def test_increments_used_count(self):
        coupon = CouponFactory(max_uses=5, used_count=3)

        CouponService.record_redemption(coupon.id)

        coupon.refresh_from_db()
        assert coupon.used_count == 4
        assert coupon.uses_remaining == 1

    def test_unlimited_coupon(self):
        coupon = CouponFactory(max_uses=None, used_count=1000)

        CouponService.record_redemption(coupon.id)

        coupon.refresh_from_db()
        assert coupon.used_count == 1001
        assert coupon.uses_remaining is None

    def test_limit_reached_raises(self):
        coupon = CouponFactory(max_uses=5, used_count=5)

        with pytest.raises(CouponUsageLimitError) as exc_info:
            CouponService.record_redemption(coupon.id)

        assert exc_info.value.error_code == "COUPON_USAGE_LIMIT_REACHED"
        coupon.refresh_from_db()
        assert coupon.used_count == 5

    def test_last_use_then_limit(self):
        coupon = CouponFactory(max_uses=1)

        CouponService.record_redemption(coupon.id)
        with pytest.raises(CouponUsageLimitError):
            CouponService.record_redemption(coupon.id)

        coupon.refresh_from_db()
        assert coupon.used_count == 1


@pytest.mark.django_db
class TestCouponModel:
    def test_code_stored_uppercase(self):
        coupon = CouponFactory(code="  summer25 ")

        coupon.refresh_from_db()
        assert coupon.code == "SUMMER25"

    def test_str(self):
        assert str(CouponFactory(code="WELCOME10")) == "WELCOME10"
