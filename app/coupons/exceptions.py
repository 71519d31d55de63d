"""
Coupon exceptions.

Invalid or inapplicable coupons are evaluation outcomes, not exceptions.
The only coupon condition raised is a redemption that would exceed the usage
limit, detected when a payment is confirmed.
"""

from __future__ import annotations

from core.exceptions import ConflictError


class CouponUsageLimitError(ConflictError):
    """
    Raised when recording a redemption would exceed the coupon's max_uses.

    Raised inside the payment confirmation transaction so the paid
    transition rolls back together with the rejected increment.
    """

    default_error_code = "COUPON_USAGE_LIMIT_REACHED"
