"""
Coupon model.

Usage:
    from coupons.models import Coupon, DiscountType

    Coupon.objects.create(
        code="WELCOME10",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("10"),
        max_uses=100,
    )
"""

from __future__ import annotations

from django.core.validators import MinValueValidator
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


def normalize_code(raw) -> str:
    """
    Canonical form of a coupon code: trimmed and uppercased.

    Anything that is not a string normalizes to the empty code.
    """
    if not isinstance(raw, str):
        return ""
    return raw.strip().upper()


class DiscountType(models.TextChoices):
    """How discount_value is applied to an order amount."""

    PERCENTAGE = "percentage", "Percentage"
    FIXED = "fixed", "Fixed amount"


class Coupon(UUIDPrimaryKeyMixin, BaseModel):
    """
    A discount code.

    Fields:
        code: Canonical (uppercased) code, matched case-insensitively
        description: Staff-facing note
        discount_type: percentage or fixed
        discount_value: Percent for percentage coupons; major currency units
            (rupees / dollars) for fixed coupons
        min_amount: Minimum order amount in minor units
        valid_from / valid_until: Optional inclusive validity window
        max_uses: Optional redemption limit
        used_count: Redemptions recorded on confirmed payments
        is_active: Staff switch to withdraw a coupon

    Note:
        used_count is only ever changed through
        CouponService.record_redemption, which increments it with a
        conditional UPDATE guarded by max_uses.
    """

    code = models.CharField(
        max_length=50,
        unique=True,
        help_text="Coupon code, stored uppercased",
    )
    description = models.CharField(max_length=255, blank=True)
    discount_type = models.CharField(
        max_length=20,
        choices=DiscountType.choices,
        default=DiscountType.PERCENTAGE,
    )
    discount_value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text="Percent (percentage) or major currency units (fixed)",
    )
    min_amount = models.PositiveIntegerField(
        default=0,
        help_text="Minimum order amount in minor units (paise / cents)",
    )
    valid_from = models.DateTimeField(null=True, blank=True)
    valid_until = models.DateTimeField(null=True, blank=True)
    max_uses = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Leave empty for unlimited redemptions",
    )
    used_count = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = "coupon"
        verbose_name_plural = "coupons"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                check=models.Q(discount_value__gte=0),
                name="coupon_discount_value_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return self.code

    def save(self, *args, **kwargs):
        self.code = normalize_code(self.code)
        super().save(*args, **kwargs)

    @property
    def uses_remaining(self) -> int | None:
        if self.max_uses is None:
            return None
        return max(0, self.max_uses - self.used_count)
