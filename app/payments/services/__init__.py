"""
Payment services for coordinating payment operations.

This module provides:
- OrderService: Prices an order, applies a coupon and opens a gateway order
- VerificationService: Confirms payments (signature check, paid transition)
- RefundService: Quotes and executes cancellation refunds
- PaymentService: Booking links and gateway availability

Usage:
    from payments.services import OrderService, CreateOrderInput

    result = OrderService.create_order(
        CreateOrderInput(session_type="couples", session_format="video")
    )

    from payments.services import VerificationService

    result = VerificationService.verify_payment(order_id, payment_id, signature)

    from payments.services import RefundService

    result = RefundService.refund_payment(booking_id=booking.id)
"""

from payments.services.order_service import (
    CreateOrderInput,
    OrderResult,
    OrderService,
)
from payments.services.payment_service import PaymentService
from payments.services.refund_service import (
    RefundComputation,
    RefundExecutionResult,
    RefundService,
)
from payments.services.verification_service import (
    VerificationOutcome,
    VerificationService,
)

__all__ = [
    "CreateOrderInput",
    "OrderResult",
    "OrderService",
    "PaymentService",
    "RefundComputation",
    "RefundExecutionResult",
    "RefundService",
    "VerificationOutcome",
    "VerificationService",
]
