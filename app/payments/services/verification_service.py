"""
Payment confirmation: signature check and the pending -> paid transition.

Razorpay confirms a checkout through the browser, which posts the order id,
payment id and signature back to us. Stripe confirms through its webhook.
Both end in VerificationService.complete_payment.

Usage:
    from payments.services import VerificationService

    result = VerificationService.verify_payment(order_id, payment_id, signature)
    result.data.verified  # False for any mismatch, never an exception
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings
from django_fsm import ConcurrentTransition

from core.services import BaseService, ServiceResult
from coupons.exceptions import CouponUsageLimitError
from coupons.services import CouponService

from payments.models import Payment
from payments.signatures import (
    compute_signature,
    identifiers_well_formed,
    redact,
    signatures_match,
)
from payments.state_machines import PaymentStatus


@dataclass
class VerificationOutcome:
    """
    Attributes:
        verified: True when the payment is (now or already) paid by this payment id
        already_verified: True when an earlier callback had already completed it
        payment: The payment record, when one was found
    """

    verified: bool
    already_verified: bool = False
    payment: Payment | None = None


class VerificationService(BaseService):
    """
    Confirms gateway payments.

    Duplicate callbacks are safe: the paid transition is a conditional UPDATE
    (ConcurrentTransitionMixin), and a repeat with the same payment id is
    reported as verified without touching the record again.
    """

    @classmethod
    def verify_payment(
        cls,
        order_id: str,
        payment_id: str,
        signature: str,
    ) -> ServiceResult[VerificationOutcome]:
        """
        Verify a Razorpay checkout callback and mark the payment paid.

        Error codes:
            INVALID_IDENTIFIERS: Malformed ids or signature (no HMAC computed)
            GATEWAY_NOT_CONFIGURED: No key secret to verify with
            SIGNATURE_MISMATCH: Signature does not match
            PAYMENT_NOT_FOUND / PAYMENT_STATE_CONFLICT /
            COUPON_USAGE_LIMIT_REACHED: See complete_payment
        """
        logger = cls.get_logger()

        if not identifiers_well_formed(order_id, payment_id, signature):
            return ServiceResult.failure(
                "Invalid payment identifiers",
                error_code="INVALID_IDENTIFIERS",
                data=VerificationOutcome(verified=False),
            )

        secret = settings.RAZORPAY_KEY_SECRET
        if not secret:
            logger.error("Razorpay key secret is not configured")
            return ServiceResult.failure(
                "Payment gateway is not configured",
                error_code="GATEWAY_NOT_CONFIGURED",
                data=VerificationOutcome(verified=False),
            )

        expected = compute_signature(secret, order_id, payment_id)
        if not signatures_match(expected, signature):
            logger.warning(
                "Payment signature mismatch",
                extra={"order_id_prefix": redact(order_id)},
            )
            return ServiceResult.failure(
                "Invalid payment signature",
                error_code="SIGNATURE_MISMATCH",
                data=VerificationOutcome(verified=False),
            )

        return cls.complete_payment(order_id, payment_id, signature=signature)

    @classmethod
    def complete_payment(
        cls,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str = "",
    ) -> ServiceResult[VerificationOutcome]:
        """
        Transition a pending payment to paid and count its coupon redemption.

        Runs in one transaction: if the coupon has reached its usage limit by
        now, nothing is committed.

        Error codes:
            PAYMENT_NOT_FOUND: No payment for this order id
            PAYMENT_STATE_CONFLICT: Already paid by another payment id, or refunded
            COUPON_USAGE_LIMIT_REACHED: Coupon sold out before confirmation
        """
        logger = cls.get_logger()
        log_extra = {"order_id_prefix": redact(gateway_order_id)}

        try:
            with cls.atomic():
                payment = Payment.objects.filter(gateway_order_id=gateway_order_id).first()
                if payment is None:
                    logger.warning("Payment not found for confirmation", extra=log_extra)
                    return ServiceResult.failure(
                        "Payment not found",
                        error_code="PAYMENT_NOT_FOUND",
                        data=VerificationOutcome(verified=False),
                    )

                if payment.status != PaymentStatus.PENDING:
                    return cls._settled_outcome(payment, gateway_payment_id)

                payment.mark_paid(gateway_payment_id=gateway_payment_id, signature=signature)
                payment.save()

                if payment.coupon_id:
                    CouponService.record_redemption(payment.coupon_id)

        except ConcurrentTransition:
            # Another callback completed the payment first
            payment = Payment.objects.get(gateway_order_id=gateway_order_id)
            return cls._settled_outcome(payment, gateway_payment_id)

        except CouponUsageLimitError as e:
            logger.warning("Payment confirmation rejected at coupon usage limit", extra=log_extra)
            return ServiceResult.failure(
                e.message,
                error_code=e.error_code,
                data=VerificationOutcome(verified=False),
            )

        logger.info(
            "Payment marked paid",
            extra={**log_extra, "payment_id": str(payment.id), "gateway": payment.gateway},
        )
        return ServiceResult.success(VerificationOutcome(verified=True, payment=payment))

    @classmethod
    def _settled_outcome(
        cls,
        payment: Payment,
        gateway_payment_id: str,
    ) -> ServiceResult[VerificationOutcome]:
        if payment.status == PaymentStatus.PAID and payment.gateway_payment_id == gateway_payment_id:
            cls.get_logger().info(
                "Payment already verified",
                extra={"order_id_prefix": redact(payment.gateway_order_id)},
            )
            return ServiceResult.success(
                VerificationOutcome(verified=True, already_verified=True, payment=payment)
            )

        return ServiceResult.failure(
            f"Payment is already {payment.status}",
            error_code="PAYMENT_STATE_CONFLICT",
            data=VerificationOutcome(verified=False, payment=payment),
        )
