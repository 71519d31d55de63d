"""
DRF views for the coupons app.

Endpoints:
    POST /api/v1/coupons/validate/ - Preview the discount a code gives on an amount
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from coupons.serializers import (
    ValidateCouponRequestSerializer,
    ValidateCouponResponseSerializer,
)
from coupons.services import CouponService, CouponStatus

logger = logging.getLogger(__name__)


class ValidateCouponView(APIView):
    """
    Preview a coupon for the booking form.

    Invalid coupons are a normal answer (200 with valid=false and a message).
    An unreachable coupon store is reported as 503 so the client can retry.
    """

    permission_classes = [AllowAny]
    throttle_scope = "payment"

    @extend_schema(
        operation_id="coupons_validate",
        summary="Validate a coupon code",
        request=ValidateCouponRequestSerializer,
        responses={
            200: ValidateCouponResponseSerializer,
            400: OpenApiResponse(description="Malformed request"),
            503: OpenApiResponse(
                response=ValidateCouponResponseSerializer,
                description="Coupon store unavailable",
            ),
        },
        tags=["Coupons"],
    )
    def post(self, request):
        serializer = ValidateCouponRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"valid": False, "error": "Invalid request", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        data = serializer.validated_data
        evaluation = CouponService.evaluate(
            data["code"],
            amount=data["amount"],
            currency=data["currency"],
        )

        if evaluation.status == CouponStatus.UNAVAILABLE:
            body = {
                "valid": False,
                "code": evaluation.code,
                "message": evaluation.message,
                "error_code": "SERVICE_UNAVAILABLE",
            }
            return Response(
                ValidateCouponResponseSerializer(body).data,
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        if evaluation.applicable:
            body = {
                "valid": True,
                "code": evaluation.code,
                "discount_amount": evaluation.discount_amount,
                "coupon_id": evaluation.coupon_id,
            }
        else:
            body = {
                "valid": False,
                "code": evaluation.code,
                "message": evaluation.message,
            }

        return Response(ValidateCouponResponseSerializer(body).data)
