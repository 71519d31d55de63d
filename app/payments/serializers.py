"""
DRF serializers for payments app.

Each endpoint has its own request serializer; services only ever see
validated data. Response serializers render service result dataclasses.

Related files:
    - services/: OrderService, VerificationService, RefundService, PaymentService
    - views.py: Payment API views
"""

from __future__ import annotations

from rest_framework import serializers

from bookings.choices import SessionFormat, SessionType
from payments.signatures import MAX_SIGNATURE_LENGTH
from payments.state_machines import GATEWAY_CURRENCIES, Gateway

COUPON_CODE_REGEX = r"^[A-Za-z0-9_-]{0,50}$"


# =============================================================================
# Orders
# =============================================================================


class CreateOrderRequestSerializer(serializers.Serializer):
    """
    Order request.

    The amount is never accepted from the client; it is derived from the
    session type and format.
    """

    session_type = serializers.ChoiceField(choices=SessionType.choices)
    session_format = serializers.ChoiceField(choices=SessionFormat.choices)
    coupon_code = serializers.RegexField(
        COUPON_CODE_REGEX,
        required=False,
        allow_blank=True,
        default="",
        error_messages={"invalid": "Invalid coupon code format"},
    )
    gateway = serializers.ChoiceField(
        choices=[(gateway, Gateway(gateway).label) for gateway in GATEWAY_CURRENCIES],
        default=Gateway.RAZORPAY,
    )
    customer_email = serializers.EmailField(required=False, allow_null=True, default=None)


class OrderResponseSerializer(serializers.Serializer):
    order_id = serializers.CharField(allow_null=True)
    amount = serializers.IntegerField()
    base_amount = serializers.IntegerField()
    currency = serializers.CharField()
    discount_amount = serializers.IntegerField()
    coupon_message = serializers.CharField(allow_null=True)
    gateway = serializers.CharField()
    key_id = serializers.CharField(allow_blank=True)
    checkout_url = serializers.URLField(allow_null=True)
    is_free = serializers.BooleanField()


# =============================================================================
# Verification
# =============================================================================


class VerifyPaymentRequestSerializer(serializers.Serializer):
    """
    Razorpay checkout callback fields.

    Only presence and size are checked here; identifier shapes are checked
    by the verification service so a malformed id gets the same
    verified=false answer as a bad signature.
    """

    razorpay_order_id = serializers.CharField(max_length=64)
    razorpay_payment_id = serializers.CharField(max_length=64)
    razorpay_signature = serializers.CharField(max_length=MAX_SIGNATURE_LENGTH)


class VerifyPaymentResponseSerializer(serializers.Serializer):
    verified = serializers.BooleanField()
    already_verified = serializers.BooleanField(default=False)
    error = serializers.CharField(required=False)
    error_code = serializers.CharField(required=False)


# =============================================================================
# Refunds
# =============================================================================


class RefundRequestSerializer(serializers.Serializer):
    """Identify the payment to refund by booking or by gateway payment id."""

    booking_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    payment_id = serializers.CharField(
        max_length=255,
        required=False,
        allow_null=True,
        default=None,
    )

    def validate(self, attrs):
        if (attrs.get("booking_id") is None) == (not attrs.get("payment_id")):
            raise serializers.ValidationError("Provide exactly one of booking_id or payment_id")
        if not attrs.get("payment_id"):
            attrs["payment_id"] = None
        return attrs


class RefundQuoteSerializer(serializers.Serializer):
    refund_amount = serializers.IntegerField()
    paid_amount = serializers.IntegerField()
    tier = serializers.CharField()
    session_start = serializers.DateTimeField(allow_null=True)
    hours_until_session = serializers.FloatField(allow_null=True)


class RefundQuoteResponseSerializer(serializers.Serializer):
    """Renders a RefundComputation."""

    payment_id = serializers.SerializerMethodField()
    booking_id = serializers.SerializerMethodField()
    currency = serializers.CharField(source="payment.currency")
    refund_amount = serializers.IntegerField(source="quote.refund_amount")
    paid_amount = serializers.IntegerField(source="quote.paid_amount")
    tier = serializers.CharField(source="quote.tier")
    session_start = serializers.DateTimeField(source="quote.session_start", allow_null=True)
    hours_until_session = serializers.FloatField(
        source="quote.hours_until_session",
        allow_null=True,
    )

    def get_payment_id(self, obj) -> str:
        return str(obj.payment.id)

    def get_booking_id(self, obj) -> str | None:
        return str(obj.payment.booking_id) if obj.payment.booking_id else None


class RefundResponseSerializer(RefundQuoteResponseSerializer):
    """Renders a RefundExecutionResult."""

    status = serializers.CharField(source="payment.status")
    gateway_refund_id = serializers.CharField(allow_null=True)
    gateway_skipped = serializers.BooleanField()


# =============================================================================
# Booking Link & Gateways
# =============================================================================


class LinkBookingRequestSerializer(serializers.Serializer):
    order_id = serializers.CharField(max_length=255)
    booking_id = serializers.UUIDField()


class LinkBookingResponseSerializer(serializers.Serializer):
    payment_id = serializers.UUIDField(source="id")
    order_id = serializers.CharField(source="gateway_order_id")
    booking_id = serializers.UUIDField()
    status = serializers.CharField()


class GatewayStatusSerializer(serializers.Serializer):
    razorpay = serializers.BooleanField()
    stripe = serializers.BooleanField()
