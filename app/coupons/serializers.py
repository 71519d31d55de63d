"""
DRF serializers for the coupons app.

Related files:
    - services.py: CouponService
    - views.py: ValidateCouponView
"""

from __future__ import annotations

from rest_framework import serializers

COUPON_CODE_PATTERN = r"^[A-Za-z0-9_-]{1,50}$"


class ValidateCouponRequestSerializer(serializers.Serializer):
    """Request body for previewing a coupon discount."""

    code = serializers.RegexField(
        regex=COUPON_CODE_PATTERN,
        max_length=50,
        error_messages={
            "invalid": "Coupon codes contain only letters, digits, '-' and '_'.",
            "blank": "Coupon code is required",
            "required": "Coupon code is required",
        },
    )
    amount = serializers.IntegerField(
        min_value=0,
        help_text="Order amount in minor units (paise / cents)",
    )
    currency = serializers.ChoiceField(
        choices=["INR", "USD"],
        default="INR",
        required=False,
    )


class ValidateCouponResponseSerializer(serializers.Serializer):
    """Coupon preview result."""

    valid = serializers.BooleanField()
    code = serializers.CharField()
    discount_amount = serializers.IntegerField(required=False)
    coupon_id = serializers.UUIDField(required=False)
    message = serializers.CharField(required=False)
    error_code = serializers.CharField(required=False)
