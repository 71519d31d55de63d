"""
DRF views for payments app.

This module provides API views for:
- Order creation (Razorpay order or Stripe Checkout Session)
- Razorpay payment verification
- Refund quotes and refunds
- Linking a paid payment to its booking
- Gateway availability

Related files:
    - services/: Business logic
    - serializers.py: Request/response serializers
    - webhooks/views.py: Stripe webhook endpoint

Endpoints:
    POST /api/v1/payments/orders/ - Create an order
    POST /api/v1/payments/verify/ - Verify a Razorpay payment
    POST /api/v1/payments/refunds/quote/ - Quote the cancellation refund
    POST /api/v1/payments/refunds/ - Refund a payment
    POST /api/v1/payments/link-booking/ - Link a paid payment to a booking
    GET /api/v1/payments/gateways/ - Which gateways are configured

Errors use {"success": false, "error": "...", "error_code": "..."}.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.services import ServiceResult
from payments.serializers import (
    CreateOrderRequestSerializer,
    GatewayStatusSerializer,
    LinkBookingRequestSerializer,
    LinkBookingResponseSerializer,
    OrderResponseSerializer,
    RefundQuoteResponseSerializer,
    RefundRequestSerializer,
    RefundResponseSerializer,
    VerifyPaymentRequestSerializer,
    VerifyPaymentResponseSerializer,
)
from payments.services import (
    CreateOrderInput,
    OrderService,
    PaymentService,
    RefundService,
    VerificationService,
)

logger = logging.getLogger(__name__)


ERROR_STATUS = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_SESSION": status.HTTP_400_BAD_REQUEST,
    "INVALID_COUPON": status.HTTP_400_BAD_REQUEST,
    "INVALID_IDENTIFIERS": status.HTTP_400_BAD_REQUEST,
    "SIGNATURE_MISMATCH": status.HTTP_400_BAD_REQUEST,
    "NO_REFUND_DUE": status.HTTP_400_BAD_REQUEST,
    "PAYMENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "BOOKING_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NO_PAID_PAYMENT": status.HTTP_404_NOT_FOUND,
    "PAYMENT_STATE_CONFLICT": status.HTTP_409_CONFLICT,
    "COUPON_USAGE_LIMIT_REACHED": status.HTTP_409_CONFLICT,
    "GATEWAY_ERROR": status.HTTP_502_BAD_GATEWAY,
    "SERVICE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "GATEWAY_NOT_CONFIGURED": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(result: ServiceResult) -> Response:
    """Render a failed ServiceResult with the status its error code maps to."""
    return Response(
        result.to_response(),
        status=ERROR_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
    )


def validation_error_response(errors) -> Response:
    return Response(
        {
            "success": False,
            "error": "Invalid request",
            "error_code": "VALIDATION_ERROR",
            "errors": errors,
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class CreateOrderView(APIView):
    """
    Create an order for a therapy session.

    POST /api/v1/payments/orders/

    Request body:
        {
            "session_type": "individual",
            "session_format": "video",
            "coupon_code": "WELCOME10",
            "gateway": "razorpay"
        }

    Returns:
        Order details with the final amount the gateway will charge.
        Free sessions come back with is_free=true and no order_id.
    """

    permission_classes = [AllowAny]
    throttle_scope = "payment"

    @extend_schema(
        operation_id="payments_create_order",
        summary="Create a payment order",
        request=CreateOrderRequestSerializer,
        responses={
            201: OrderResponseSerializer,
            400: OpenApiResponse(description="Invalid session or coupon"),
            409: OpenApiResponse(description="Coupon usage limit reached"),
            502: OpenApiResponse(description="Gateway rejected the order"),
            503: OpenApiResponse(description="Gateway or coupon store unavailable"),
        },
        tags=["Payments"],
    )
    def post(self, request):
        serializer = CreateOrderRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = OrderService.create_order(CreateOrderInput(**serializer.validated_data))
        if not result.success:
            return error_response(result)

        return Response(
            OrderResponseSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )


class VerifyPaymentView(APIView):
    """
    Verify a Razorpay checkout callback.

    POST /api/v1/payments/verify/

    Request body:
        {
            "razorpay_order_id": "order_xxx",
            "razorpay_payment_id": "pay_xxx",
            "razorpay_signature": "hex"
        }

    Returns:
        {"verified": true} once the payment is paid (repeat calls included).
        A bad signature is {"verified": false} with a 400, never details.
    """

    permission_classes = [AllowAny]
    throttle_scope = "payment"

    @extend_schema(
        operation_id="payments_verify",
        summary="Verify a Razorpay payment",
        request=VerifyPaymentRequestSerializer,
        responses={
            200: VerifyPaymentResponseSerializer,
            400: VerifyPaymentResponseSerializer,
            404: VerifyPaymentResponseSerializer,
            409: VerifyPaymentResponseSerializer,
        },
        tags=["Payments"],
    )
    def post(self, request):
        serializer = VerifyPaymentRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {
                    "verified": False,
                    "error": "Invalid request",
                    "error_code": "VALIDATION_ERROR",
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        data = serializer.validated_data
        result = VerificationService.verify_payment(
            order_id=data["razorpay_order_id"],
            payment_id=data["razorpay_payment_id"],
            signature=data["razorpay_signature"],
        )

        if not result.success:
            body = {
                "verified": False,
                "already_verified": False,
                "error": result.error,
                "error_code": result.error_code,
            }
            return Response(
                VerifyPaymentResponseSerializer(body).data,
                status=ERROR_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
            )

        body = {"verified": True, "already_verified": result.data.already_verified}
        return Response(VerifyPaymentResponseSerializer(body).data)


class RefundQuoteView(APIView):
    """
    Quote the refund a cancellation would get.

    POST /api/v1/payments/refunds/quote/

    Request body:
        {"booking_id": "uuid"} or {"payment_id": "pay_xxx"}
    """

    permission_classes = [AllowAny]
    throttle_scope = "payment"

    @extend_schema(
        operation_id="payments_refund_quote",
        summary="Quote a cancellation refund",
        request=RefundRequestSerializer,
        responses={
            200: RefundQuoteResponseSerializer,
            400: OpenApiResponse(description="No refund due or invalid request"),
            404: OpenApiResponse(description="Booking or paid payment not found"),
        },
        tags=["Refunds"],
    )
    def post(self, request):
        serializer = RefundRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = RefundService.compute_refund(**serializer.validated_data)
        if not result.success:
            return error_response(result)

        return Response(RefundQuoteResponseSerializer(result.data).data)


class RefundView(APIView):
    """
    Refund a paid payment through its gateway.

    POST /api/v1/payments/refunds/

    Request body:
        {"booking_id": "uuid"} or {"payment_id": "pay_xxx"}
    """

    permission_classes = [AllowAny]
    throttle_scope = "payment"

    @extend_schema(
        operation_id="payments_refund",
        summary="Refund a payment",
        request=RefundRequestSerializer,
        responses={
            200: RefundResponseSerializer,
            400: OpenApiResponse(description="No refund due or invalid request"),
            404: OpenApiResponse(description="Booking or paid payment not found"),
            409: OpenApiResponse(description="Payment changed concurrently"),
            502: OpenApiResponse(description="Gateway rejected the refund"),
            503: OpenApiResponse(description="Gateway unavailable"),
        },
        tags=["Refunds"],
    )
    def post(self, request):
        serializer = RefundRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = RefundService.refund_payment(**serializer.validated_data)
        if not result.success:
            return error_response(result)

        return Response(RefundResponseSerializer(result.data).data)


class LinkBookingView(APIView):
    """
    Link a paid payment to the booking created after checkout.

    POST /api/v1/payments/link-booking/

    Request body:
        {"order_id": "order_xxx", "booking_id": "uuid"}
    """

    permission_classes = [AllowAny]
    throttle_scope = "default"

    @extend_schema(
        operation_id="payments_link_booking",
        summary="Link a payment to a booking",
        request=LinkBookingRequestSerializer,
        responses={
            200: LinkBookingResponseSerializer,
            404: OpenApiResponse(description="Paid payment or booking not found"),
        },
        tags=["Payments"],
    )
    def post(self, request):
        serializer = LinkBookingRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = PaymentService.link_to_booking(**serializer.validated_data)
        if not result.success:
            return error_response(result)

        return Response(LinkBookingResponseSerializer(result.data).data)


class GatewayStatusView(APIView):
    """
    Report which payment gateways are configured.

    GET /api/v1/payments/gateways/

    Returns:
        {"razorpay": true, "stripe": false}
    """

    permission_classes = [AllowAny]
    throttle_scope = "default"

    @extend_schema(
        operation_id="payments_gateways",
        summary="Gateway availability",
        responses={200: GatewayStatusSerializer},
        tags=["Payments"],
    )
    def get(self, request):
        return Response(GatewayStatusSerializer(PaymentService.gateway_status()).data)
