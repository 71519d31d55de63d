"""
Payment model tracking an order from gateway creation to refund.

Usage:
    from payments.models import Payment
    from payments.state_machines import Gateway, PaymentStatus

    payment = Payment.objects.create(
        gateway=Gateway.RAZORPAY,
        gateway_order_id="order_NcXkQ2m1",
        amount=116910,
        base_amount=129900,
        discount_amount=12990,
        currency="INR",
        session_type="individual",
        session_format="video",
    )

    # State transitions using django-fsm
    payment.mark_paid(gateway_payment_id="pay_NcXl8d0q", signature="...")
    payment.save()  # UPDATE ... WHERE status = 'pending'
"""

from __future__ import annotations

import datetime

from django.conf import settings
from django.db import models
from django.utils import timezone

from django_fsm import ConcurrentTransitionMixin, FSMField, transition

from bookings.choices import SessionFormat, SessionType
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

from payments.state_machines import Gateway, PaymentStatus


class Payment(ConcurrentTransitionMixin, UUIDPrimaryKeyMixin, BaseModel):
    """
    A payment for one therapy session.

    Created as pending when the gateway order is created. The amount is the
    final payable amount after any coupon discount; base_amount is the list
    price it was derived from.

    State Flow:
        PENDING -> PAID -> REFUNDED

    Concurrency:
        ConcurrentTransitionMixin turns every save into
        UPDATE ... WHERE id = %s AND status = <status when loaded>. A save that
        matches no row raises django_fsm.ConcurrentTransition, so duplicate
        gateway callbacks cannot apply the same transition twice.

    Fields:
        gateway / gateway_order_id: Order identity at the gateway
        gateway_payment_id / gateway_signature: Set when the gateway confirms
        amount / base_amount / discount_amount / currency: Money, minor units
        coupon / coupon_code: Coupon applied when the order was built
        booking: Linked after the booking is created
        session_type / session_format: What was bought
        paid_at / refunded_at / refund_amount: Lifecycle details
        metadata: Gateway receipt and notes
    """

    # ==========================================================================
    # Gateway Identity
    # ==========================================================================

    gateway = models.CharField(
        max_length=20,
        choices=Gateway.choices,
        default=Gateway.RAZORPAY,
    )

    gateway_order_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Gateway order id (order_xxx) or Stripe Checkout Session id (cs_xxx)",
    )

    gateway_payment_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        db_index=True,
        help_text="Gateway payment id (pay_xxx) or Stripe PaymentIntent id (pi_xxx)",
    )

    gateway_signature = models.CharField(
        max_length=255,
        blank=True,
        help_text="Signature supplied with the Razorpay payment callback",
    )

    # ==========================================================================
    # Amount & Currency
    # ==========================================================================

    amount = models.PositiveIntegerField(
        help_text="Final payable amount in minor units, after discount",
    )

    base_amount = models.PositiveIntegerField(
        help_text="List price in minor units, before discount",
    )

    discount_amount = models.PositiveIntegerField(default=0)

    currency = models.CharField(
        max_length=3,
        default="INR",
        help_text="ISO 4217 currency code (uppercase)",
    )

    # ==========================================================================
    # State
    # ==========================================================================

    status = FSMField(
        default=PaymentStatus.PENDING,
        choices=PaymentStatus.choices,
        db_index=True,
        help_text="Current payment status (managed by FSM)",
    )

    # ==========================================================================
    # What Was Bought
    # ==========================================================================

    session_type = models.CharField(max_length=20, choices=SessionType.choices)
    session_format = models.CharField(max_length=20, choices=SessionFormat.choices)

    coupon = models.ForeignKey(
        "coupons.Coupon",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments",
    )

    coupon_code = models.CharField(max_length=50, blank=True)

    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments",
    )

    # ==========================================================================
    # Lifecycle Details
    # ==========================================================================

    paid_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    refund_amount = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Amount returned to the customer in minor units",
    )

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Receipt, gateway notes and other order details",
    )

    # ==========================================================================
    # Meta & Methods
    # ==========================================================================

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        indexes = [
            models.Index(
                fields=["booking", "status"],
                name="payments_pa_booking_6c0f3e_idx",
            ),
            models.Index(
                fields=["gateway_payment_id", "status"],
                name="payments_pa_gateway_9a1b2d_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                check=models.Q(amount__lte=models.F("base_amount")),
                name="payment_amount_not_above_base",
            ),
        ]

    def __str__(self) -> str:
        return f"Payment({self.gateway_order_id}, {self.status}, {self.amount} {self.currency})"

    @property
    def is_mock(self) -> bool:
        """
        True for demo-mode payments that never reached a gateway.

        Recognized by a missing payment id or the configured mock prefix.
        """
        if not self.gateway_payment_id:
            return True
        return self.gateway_payment_id.startswith(settings.MOCK_PAYMENT_ID_PREFIX)

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=PaymentStatus.PENDING,
        target=PaymentStatus.PAID,
    )
    def mark_paid(
        self,
        gateway_payment_id: str,
        signature: str = "",
        paid_at: datetime.datetime | None = None,
    ):
        """
        Record the gateway's confirmation.

        Transition: PENDING -> PAID
        """
        self.gateway_payment_id = gateway_payment_id
        self.gateway_signature = signature
        self.paid_at = paid_at or timezone.now()

    @transition(
        field=status,
        source=PaymentStatus.PAID,
        target=PaymentStatus.REFUNDED,
    )
    def mark_refunded(
        self,
        refund_amount: int,
        refunded_at: datetime.datetime | None = None,
    ):
        """
        Record a refund the gateway accepted.

        Transition: PAID -> REFUNDED
        """
        self.refund_amount = refund_amount
        self.refunded_at = refunded_at or timezone.now()
