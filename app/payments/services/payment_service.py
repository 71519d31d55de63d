"""
Payment record housekeeping: booking links and gateway availability.
"""

from __future__ import annotations

import uuid

from django.utils import timezone

from bookings.services import BookingService
from core.services import BaseService, ServiceResult

from payments.adapters import GATEWAY_ADAPTERS
from payments.models import Payment
from payments.signatures import redact
from payments.state_machines import PaymentStatus


class PaymentService(BaseService):
    """Operations on payments outside the order and refund flows."""

    @classmethod
    def link_to_booking(
        cls,
        order_id: str,
        booking_id: uuid.UUID | str,
    ) -> ServiceResult[Payment]:
        """
        Attach the booking created after checkout to its paid payment.

        Only paid payments are linked; the refund flow finds payments
        through this link.
        """
        booking = BookingService.get_booking(booking_id)
        if booking is None:
            return ServiceResult.failure("Booking not found", error_code="BOOKING_NOT_FOUND")

        updated = Payment.objects.filter(
            gateway_order_id=order_id,
            status=PaymentStatus.PAID,
        ).update(booking=booking, updated_at=timezone.now())

        if not updated:
            return ServiceResult.failure(
                "No paid payment found for this order",
                error_code="PAYMENT_NOT_FOUND",
            )

        cls.get_logger().info(
            "Payment linked to booking",
            extra={"order_id_prefix": redact(order_id), "booking_id": str(booking.id)},
        )
        return ServiceResult.success(Payment.objects.get(gateway_order_id=order_id))

    @classmethod
    def gateway_status(cls) -> dict[str, bool]:
        """Which gateways have API keys configured, e.g. {"razorpay": True, "stripe": False}."""
        return {
            str(gateway): adapter.is_configured()
            for gateway, adapter in GATEWAY_ADAPTERS.items()
        }
