"""
Refund service for returning money to customers on cancellation.

The amount always comes from payments.refund_policy; this service finds the
paid payment, asks the policy for a quote and, when executing, calls the
gateway before moving the payment to refunded.

Usage:
    from payments.services import RefundService

    quote = RefundService.compute_refund(booking_id=booking.id)
    if quote.success:
        quote.data.quote.refund_amount  # 64950

    result = RefundService.refund_payment(booking_id=booking.id)
    if not result.success:
        print(f"Refund failed: {result.error}")
"""

from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass

from django_fsm import ConcurrentTransition, TransitionNotAllowed

from bookings.services import BookingService
from core.services import BaseService, ServiceResult

from payments.adapters import IdempotencyKeyGenerator, get_gateway_adapter
from payments.exceptions import PaymentGatewayError
from payments.models import Payment
from payments.refund_policy import RefundQuote, RefundRejected, calculate_refund
from payments.signatures import redact
from payments.state_machines import Gateway, PaymentStatus


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class RefundComputation:
    """A refund quote for a specific paid payment."""

    payment: Payment
    quote: RefundQuote


@dataclass
class RefundExecutionResult:
    """
    Result of an executed refund.

    Attributes:
        payment: The payment, now refunded
        quote: The quote the refund was made for
        gateway_refund_id: Gateway refund id (None when the gateway was skipped)
        gateway_skipped: True for mock and complimentary payments
    """

    payment: Payment
    quote: RefundQuote
    gateway_refund_id: str | None = None
    gateway_skipped: bool = False


# =============================================================================
# Refund Service
# =============================================================================


class RefundService(BaseService):
    """
    Service for computing and executing cancellation refunds.

    Execution Pattern:
        1. Lock the paid payment row (select_for_update)
        2. Quote the refund from the booking's scheduled time
        3. Call the gateway refund (skipped for mock payments); a full refund
           omits the amount so the gateway refunds the whole capture
        4. Transition PAID -> REFUNDED with the refunded amount

    A gateway failure leaves the payment paid. The row lock is held across
    the gateway call so two cancellations cannot both refund.
    """

    @classmethod
    def compute_refund(
        cls,
        booking_id: uuid.UUID | str | None = None,
        payment_id: str | None = None,
        now: datetime.datetime | None = None,
    ) -> ServiceResult[RefundComputation]:
        """
        Quote the refund for a booking's (or gateway payment's) paid payment.

        Exactly one of booking_id or payment_id must be given.

        Error codes:
            VALIDATION_ERROR, BOOKING_NOT_FOUND, NO_PAID_PAYMENT, NO_REFUND_DUE
        """
        found = cls._find_paid_payment(booking_id, payment_id)
        if not found:
            return found

        payment = found.data
        outcome = cls._quote(payment, now)
        if isinstance(outcome, RefundRejected):
            return ServiceResult.failure(outcome.reason, error_code="NO_REFUND_DUE")

        return ServiceResult.success(RefundComputation(payment=payment, quote=outcome))

    @classmethod
    def refund_payment(
        cls,
        booking_id: uuid.UUID | str | None = None,
        payment_id: str | None = None,
        now: datetime.datetime | None = None,
    ) -> ServiceResult[RefundExecutionResult]:
        """
        Refund a paid payment through its gateway and mark it refunded.

        Error codes:
            Those of compute_refund, plus SERVICE_UNAVAILABLE / GATEWAY_ERROR /
            GATEWAY_NOT_CONFIGURED from the gateway and PAYMENT_STATE_CONFLICT
        """
        logger = cls.get_logger()

        try:
            with cls.atomic():
                found = cls._find_paid_payment(booking_id, payment_id, for_update=True)
                if not found:
                    return found

                payment = found.data
                outcome = cls._quote(payment, now)
                if isinstance(outcome, RefundRejected):
                    return ServiceResult.failure(outcome.reason, error_code="NO_REFUND_DUE")

                gateway_refund_id = None
                gateway_skipped = payment.is_mock or payment.gateway == Gateway.COMPLIMENTARY

                if gateway_skipped:
                    logger.info(
                        "Skipping gateway refund for mock payment",
                        extra={"payment_id": str(payment.id)},
                    )
                else:
                    adapter = get_gateway_adapter(payment.gateway)
                    gateway_refund = adapter.refund(
                        payment.gateway_payment_id,
                        amount=None if outcome.is_full else outcome.refund_amount,
                        notes={
                            "booking_id": str(payment.booking_id or ""),
                            "reason": "cancellation",
                        },
                        idempotency_key=IdempotencyKeyGenerator.generate("refund", payment.id),
                    )
                    gateway_refund_id = gateway_refund.refund_id
                    payment.metadata = {**payment.metadata, "refund_id": gateway_refund_id}

                payment.mark_refunded(refund_amount=outcome.refund_amount)
                payment.save()

        except PaymentGatewayError as e:
            return cls.handle_exception(e, "Gateway refund")

        except (ConcurrentTransition, TransitionNotAllowed):
            logger.warning(
                "Payment changed during refund",
                extra={
                    "booking_id": str(booking_id) if booking_id else None,
                    "payment_id_prefix": redact(payment_id) if payment_id else None,
                },
            )
            return ServiceResult.failure(
                "Payment is no longer refundable",
                error_code="PAYMENT_STATE_CONFLICT",
            )

        logger.info(
            "Payment refunded",
            extra={
                "payment_id": str(payment.id),
                "gateway": payment.gateway,
                "refund_amount": outcome.refund_amount,
                "tier": outcome.tier,
            },
        )

        return ServiceResult.success(
            RefundExecutionResult(
                payment=payment,
                quote=outcome,
                gateway_refund_id=gateway_refund_id,
                gateway_skipped=gateway_skipped,
            )
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    @classmethod
    def _find_paid_payment(
        cls,
        booking_id: uuid.UUID | str | None,
        payment_id: str | None,
        for_update: bool = False,
    ) -> ServiceResult[Payment]:
        if (booking_id is None) == (payment_id is None):
            return ServiceResult.failure(
                "Provide exactly one of booking_id or payment_id",
                error_code="VALIDATION_ERROR",
            )

        queryset = Payment.objects.filter(status=PaymentStatus.PAID)
        if for_update:
            queryset = queryset.select_for_update()

        if booking_id is not None:
            if BookingService.get_booking(booking_id) is None:
                return ServiceResult.failure("Booking not found", error_code="BOOKING_NOT_FOUND")
            payment = queryset.filter(booking_id=booking_id).order_by("-paid_at").first()
        else:
            payment = queryset.filter(gateway_payment_id=payment_id).first()

        if payment is None:
            cls.get_logger().info(
                "No paid payment to refund",
                extra={
                    "booking_id": str(booking_id) if booking_id else None,
                    "payment_id_prefix": redact(payment_id) if payment_id else None,
                },
            )
            return ServiceResult.failure(
                "No paid payment found",
                error_code="NO_PAID_PAYMENT",
            )

        return ServiceResult.success(payment)

    @classmethod
    def _quote(
        cls,
        payment: Payment,
        now: datetime.datetime | None,
    ) -> RefundQuote | RefundRejected:
        scheduled = None
        if payment.booking_id:
            scheduled = BookingService.find_scheduled_time(payment.booking_id)

        if scheduled is None:
            return calculate_refund(payment.amount, None, None, now=now)

        return calculate_refund(
            payment.amount,
            scheduled.scheduled_date,
            scheduled.scheduled_time,
            now=now,
        )
