"""
Coupon evaluation and redemption.

CouponService.evaluate decides whether a code applies to an order amount and
computes the discount. It never raises for an unusable coupon: every business
condition comes back as a CouponEvaluation with a user-facing message.

Check order (the first failing check is reported):
    1. not found or inactive   -> "Invalid or inactive coupon code"
    2. before valid_from       -> "This coupon is not yet valid"
    3. after valid_until       -> "This coupon has expired"
    4. used_count >= max_uses  -> "This coupon has reached its usage limit"
    5. amount < min_amount     -> "Minimum order amount is ₹499 for this coupon"

Usage:
    from coupons.services import CouponService

    evaluation = CouponService.evaluate("welcome10", amount=129900)
    if evaluation.applicable:
        final = 129900 - evaluation.discount_amount
    elif evaluation.status == CouponStatus.UNAVAILABLE:
        ...  # retryable, do not charge full price
"""

from __future__ import annotations

import datetime
import enum
import uuid
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal

from django.db import DatabaseError
from django.db.models import F, Q
from django.utils import timezone

from core.services import BaseService
from coupons.exceptions import CouponUsageLimitError
from coupons.models import Coupon, DiscountType, normalize_code

# =============================================================================
# Messages
# =============================================================================

MSG_INVALID = "Invalid or inactive coupon code"
MSG_NOT_YET_VALID = "This coupon is not yet valid"
MSG_EXPIRED = "This coupon has expired"
MSG_USAGE_LIMIT = "This coupon has reached its usage limit"
MSG_MINIMUM = "Minimum order amount is {amount} for this coupon"
MSG_NO_DISCOUNT = "No discount applies to this order"
MSG_UNAVAILABLE = "Coupon service is temporarily unavailable"

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
}


class CouponStatus(enum.Enum):
    """Outcome of evaluating a coupon code against an amount."""

    APPLIED = "applied"
    NOT_APPLICABLE = "not_applicable"  # no code supplied
    INVALID = "invalid"
    NO_DISCOUNT = "no_discount"
    UNAVAILABLE = "unavailable"  # coupon store unreachable


@dataclass(frozen=True)
class CouponEvaluation:
    """
    Result of CouponService.evaluate.

    Attributes:
        status: Outcome category
        code: Normalized code that was evaluated
        discount_amount: Discount in minor units (0 unless applied)
        message: User-facing explanation for every non-applied outcome
        coupon: The matched coupon when applied
    """

    status: CouponStatus
    code: str = ""
    discount_amount: int = 0
    message: str | None = None
    coupon: Coupon | None = None

    @property
    def applicable(self) -> bool:
        return self.status == CouponStatus.APPLIED

    @property
    def coupon_id(self) -> uuid.UUID | None:
        return self.coupon.id if self.coupon is not None else None


def format_amount(amount: int, currency: str = "INR") -> str:
    """Render a minor-unit amount for messages, e.g. 49900 -> "₹499"."""
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), "")
    major, minor = divmod(amount, 100)
    if minor:
        return f"{symbol}{major}.{minor:02d}"
    return f"{symbol}{major}"


def calculate_discount(discount_type: str, discount_value: Decimal, amount: int) -> int:
    """
    Discount in minor units for an order amount.

    Percentage values are clamped to [0, 100]; fixed values are in major
    units and capped at the amount. Both round down.
    """
    value = Decimal(discount_value)
    if discount_type == DiscountType.PERCENTAGE:
        percent = min(Decimal(100), max(Decimal(0), value))
        discount = (Decimal(amount) * percent / Decimal(100)).to_integral_value(
            rounding=ROUND_FLOOR
        )
        return int(discount)

    fixed = (max(Decimal(0), value) * 100).to_integral_value(rounding=ROUND_FLOOR)
    return min(amount, int(fixed))


class CouponService(BaseService):
    """Coupon evaluation and usage counting."""

    @classmethod
    def evaluate(
        cls,
        raw_code,
        amount: int,
        now: datetime.datetime | None = None,
        currency: str = "INR",
    ) -> CouponEvaluation:
        """
        Decide whether a coupon applies to an amount.

        Args:
            raw_code: Code as typed by the customer (may be empty or None)
            amount: Amount to discount, minor units, >= 0
            now: Evaluation instant (defaults to the current time)
            currency: Currency used when rendering the minimum-amount message

        Returns:
            CouponEvaluation. Store failures are reported as UNAVAILABLE.

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError("amount must be non-negative")

        code = normalize_code(raw_code)
        if not code:
            return CouponEvaluation(status=CouponStatus.NOT_APPLICABLE)

        now = now or timezone.now()
        logger = cls.get_logger()

        try:
            coupon = Coupon.objects.filter(code__iexact=code).first()
        except DatabaseError:
            logger.error(
                "Coupon lookup failed",
                extra={"coupon_code": code},
                exc_info=True,
            )
            return CouponEvaluation(
                status=CouponStatus.UNAVAILABLE,
                code=code,
                message=MSG_UNAVAILABLE,
            )

        reason = cls._first_failing_check(coupon, amount, now, currency)
        if reason is not None:
            logger.info(
                "Coupon rejected",
                extra={"coupon_code": code, "amount": amount, "reason": reason},
            )
            return CouponEvaluation(
                status=CouponStatus.INVALID,
                code=code,
                message=reason,
            )

        discount = calculate_discount(coupon.discount_type, coupon.discount_value, amount)
        if discount <= 0:
            return CouponEvaluation(
                status=CouponStatus.NO_DISCOUNT,
                code=code,
                message=MSG_NO_DISCOUNT,
            )

        logger.info(
            "Coupon applied",
            extra={
                "coupon_code": code,
                "amount": amount,
                "discount_amount": discount,
            },
        )
        return CouponEvaluation(
            status=CouponStatus.APPLIED,
            code=coupon.code,
            discount_amount=discount,
            coupon=coupon,
        )

    @classmethod
    def _first_failing_check(
        cls,
        coupon: Coupon | None,
        amount: int,
        now: datetime.datetime,
        currency: str,
    ) -> str | None:
        if coupon is None or not coupon.is_active:
            return MSG_INVALID
        if coupon.valid_from is not None and now < coupon.valid_from:
            return MSG_NOT_YET_VALID
        if coupon.valid_until is not None and now > coupon.valid_until:
            return MSG_EXPIRED
        if coupon.max_uses is not None and coupon.used_count >= coupon.max_uses:
            return MSG_USAGE_LIMIT
        if amount < coupon.min_amount:
            return MSG_MINIMUM.format(amount=format_amount(coupon.min_amount, currency))
        return None

    @classmethod
    def record_redemption(cls, coupon_id: uuid.UUID) -> None:
        """
        Count one redemption of a coupon.

        A single conditional UPDATE increments used_count only while it is
        below max_uses, so concurrent confirmations cannot oversell a coupon.
        Call inside the transaction that marks the payment paid.

        Raises:
            CouponUsageLimitError: If the limit was reached (or the coupon
                vanished) before this redemption
        """
        updated = (
            Coupon.objects.filter(pk=coupon_id)
            .filter(Q(max_uses__isnull=True) | Q(used_count__lt=F("max_uses")))
            .update(used_count=F("used_count") + 1, updated_at=timezone.now())
        )
        if not updated:
            cls.get_logger().warning(
                "Coupon redemption rejected at usage limit",
                extra={"coupon_id": str(coupon_id)},
            )
            raise CouponUsageLimitError(
                MSG_USAGE_LIMIT,
                details={"coupon_id": str(coupon_id)},
            )
