"""
Order creation: price lookup, coupon discount, gateway order, pending payment.

The gateway is always asked to charge the final amount computed here. The
client never supplies an amount, so a discount cannot be forged downstream.

Usage:
    from payments.services import CreateOrderInput, OrderService

    result = OrderService.create_order(
        CreateOrderInput(
            session_type="individual",
            session_format="video",
            coupon_code="welcome10",
        )
    )
    if result.success:
        result.data.order_id  # "order_NcXkQ2m1..."
        result.data.amount    # 116910
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass

from django.utils import timezone

from core.services import BaseService, ServiceResult
from coupons.exceptions import CouponUsageLimitError
from coupons.services import CouponEvaluation, CouponService, CouponStatus

from payments.adapters import (
    CreateOrderParams,
    IdempotencyKeyGenerator,
    get_gateway_adapter,
)
from payments.exceptions import PaymentGatewayError
from payments.models import Payment
from payments.pricing import PriceEntry, get_pricing_table
from payments.state_machines import GATEWAY_CURRENCIES, Gateway, PaymentStatus


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CreateOrderInput:
    """
    Validated order request.

    Attributes:
        session_type: SessionType value
        session_format: SessionFormat value
        coupon_code: Raw coupon code, empty when none was entered
        gateway: Gateway value; decides the currency
        customer_email: Forwarded to hosted checkout when known
    """

    session_type: str
    session_format: str
    coupon_code: str = ""
    gateway: str = Gateway.RAZORPAY
    customer_email: str | None = None


@dataclass
class OrderResult:
    """
    Outcome of a successful order request.

    order_id is None for free sessions, which never reach a gateway.
    """

    order_id: str | None
    amount: int
    base_amount: int
    currency: str
    gateway: str
    discount_amount: int = 0
    coupon_message: str | None = None
    key_id: str = ""
    checkout_url: str | None = None
    is_free: bool = False


# =============================================================================
# Order Service
# =============================================================================


class OrderService(BaseService):
    """
    Builds orders from the pricing table and an optional coupon.

    Flow:
        1. Look up the base price (unknown or disabled pair -> INVALID_SESSION)
        2. Free session -> free result, no coupon check, no gateway, no record
        3. Evaluate the coupon against the base price
        4. Final amount 0 -> complimentary payment recorded as paid
        5. Otherwise create the gateway order for the final amount and
           persist a pending Payment
    """

    @classmethod
    def create_order(cls, order: CreateOrderInput) -> ServiceResult[OrderResult]:
        logger = cls.get_logger()
        currency = GATEWAY_CURRENCIES[order.gateway]

        entry = get_pricing_table().get(order.session_type, order.session_format, currency)
        if entry is None:
            return ServiceResult.failure(
                "Invalid session type or format",
                error_code="INVALID_SESSION",
            )

        if entry.is_free:
            logger.info(
                "Free session order",
                extra={"session_type": entry.session_type, "session_format": entry.session_format},
            )
            return ServiceResult.success(
                OrderResult(
                    order_id=None,
                    amount=0,
                    base_amount=0,
                    currency=currency,
                    gateway=order.gateway,
                    is_free=True,
                )
            )

        evaluation = CouponService.evaluate(order.coupon_code, entry.amount, currency=currency)

        if evaluation.status == CouponStatus.INVALID:
            return ServiceResult.failure(evaluation.message, error_code="INVALID_COUPON")
        if evaluation.status == CouponStatus.UNAVAILABLE:
            return ServiceResult.failure(evaluation.message, error_code="SERVICE_UNAVAILABLE")

        final_amount = max(0, entry.amount - evaluation.discount_amount)

        if final_amount == 0:
            return cls._create_complimentary(order, entry, evaluation)

        return cls._create_gateway_order(order, entry, evaluation, final_amount)

    # =========================================================================
    # Helpers
    # =========================================================================

    @classmethod
    def _create_gateway_order(
        cls,
        order: CreateOrderInput,
        entry: PriceEntry,
        evaluation: CouponEvaluation,
        final_amount: int,
    ) -> ServiceResult[OrderResult]:
        logger = cls.get_logger()
        adapter = get_gateway_adapter(order.gateway)
        receipt = f"receipt_{int(time.time() * 1000)}"

        params = CreateOrderParams(
            amount=final_amount,
            currency=entry.currency,
            receipt=receipt,
            metadata={
                "session_type": entry.session_type,
                "session_format": entry.session_format,
                "coupon_code": evaluation.code if evaluation.applicable else "",
            },
            description=f"{entry.session_type.title()} therapy, {entry.session_format} ({entry.duration})",
            customer_email=order.customer_email,
            idempotency_key=IdempotencyKeyGenerator.generate("create_order", receipt),
        )

        try:
            gateway_order = adapter.create_order(params)
        except PaymentGatewayError as e:
            return cls.handle_exception(e, "Gateway order creation")

        payment = Payment.objects.create(
            gateway=order.gateway,
            gateway_order_id=gateway_order.order_id,
            amount=final_amount,
            base_amount=entry.amount,
            discount_amount=evaluation.discount_amount,
            currency=entry.currency,
            session_type=entry.session_type,
            session_format=entry.session_format,
            coupon=evaluation.coupon if evaluation.applicable else None,
            coupon_code=evaluation.code if evaluation.applicable else "",
            metadata={"receipt": receipt},
        )

        logger.info(
            "Order created",
            extra={
                "payment_id": str(payment.id),
                "gateway": order.gateway,
                "amount": final_amount,
                "discount_amount": evaluation.discount_amount,
            },
        )

        return ServiceResult.success(
            OrderResult(
                order_id=gateway_order.order_id,
                amount=final_amount,
                base_amount=entry.amount,
                currency=entry.currency,
                gateway=order.gateway,
                discount_amount=evaluation.discount_amount,
                coupon_message=evaluation.message,
                key_id=adapter.public_key(),
                checkout_url=gateway_order.checkout_url,
            )
        )

    @classmethod
    def _create_complimentary(
        cls,
        order: CreateOrderInput,
        entry: PriceEntry,
        evaluation: CouponEvaluation,
    ) -> ServiceResult[OrderResult]:
        """A coupon covered the whole price: record the payment as paid."""
        order_id = f"comp_{uuid.uuid4().hex[:24]}"

        try:
            with cls.atomic():
                payment = Payment.objects.create(
                    gateway=Gateway.COMPLIMENTARY,
                    gateway_order_id=order_id,
                    amount=0,
                    base_amount=entry.amount,
                    discount_amount=evaluation.discount_amount,
                    currency=entry.currency,
                    session_type=entry.session_type,
                    session_format=entry.session_format,
                    coupon=evaluation.coupon,
                    coupon_code=evaluation.code,
                    status=PaymentStatus.PAID,
                    paid_at=timezone.now(),
                )
                CouponService.record_redemption(evaluation.coupon_id)
        except CouponUsageLimitError as e:
            cls.get_logger().warning(
                "Coupon usage limit reached for complimentary order",
                extra={"coupon_code": evaluation.code},
            )
            return ServiceResult.from_exception(e)

        cls.get_logger().info(
            "Complimentary order recorded",
            extra={"payment_id": str(payment.id), "coupon_code": evaluation.code},
        )

        return ServiceResult.success(
            OrderResult(
                order_id=order_id,
                amount=0,
                base_amount=entry.amount,
                currency=entry.currency,
                gateway=Gateway.COMPLIMENTARY,
                discount_amount=evaluation.discount_amount,
                coupon_message=evaluation.message,
                is_free=True,
            )
        )
