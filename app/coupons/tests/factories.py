"""
Factory Boy factories for coupon test data.

Usage:
    from coupons.tests.factories import CouponFactory

    # 10% off, no limits
    coupon = CouponFactory()

    # ₹200 off orders of ₹499 or more, 5 uses
    coupon = CouponFactory(
        discount_type=DiscountType.FIXED,
        discount_value=Decimal("200"),
        min_amount=49900,
        max_uses=5,
    )
"""

from decimal import Decimal

import factory

from coupons.models import Coupon, DiscountType


class CouponFactory(factory.django.DjangoModelFactory):
    """Factory for creating Coupon instances. Default: active, 10% off, no limits."""

    class Meta:
        model = Coupon
        skip_postgeneration_save = True

    code = factory.Sequence(lambda n: f"SAVE{n:04d}")
    description = "Test coupon"
    discount_type = DiscountType.PERCENTAGE
    discount_value = Decimal("10")
    min_amount = 0
    valid_from = None
    valid_until = None
    max_uses = None
    used_count = 0
    is_active = True
