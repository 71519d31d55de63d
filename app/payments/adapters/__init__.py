"""
Payment gateway adapters.

All gateway API calls go through these adapters to ensure consistent error
handling, timeouts, idempotency, and observability.

Usage:
    from payments.adapters import get_gateway_adapter, CreateOrderParams

    adapter = get_gateway_adapter("razorpay")
    result = adapter.create_order(
        CreateOrderParams(amount=129900, currency="INR", receipt="receipt_1718000000000")
    )
"""

from __future__ import annotations

from payments.adapters.base import (
    CreateOrderParams,
    GatewayOrderResult,
    GatewayRefundResult,
    IdempotencyKeyGenerator,
    PaymentGatewayAdapter,
)
from payments.adapters.razorpay_adapter import RazorpayAdapter
from payments.adapters.stripe_adapter import StripeAdapter
from payments.state_machines import Gateway

GATEWAY_ADAPTERS: dict[str, type] = {
    Gateway.RAZORPAY: RazorpayAdapter,
    Gateway.STRIPE: StripeAdapter,
}


def get_gateway_adapter(gateway: str) -> type:
    """
    Return the adapter class for a gateway name.

    Raises:
        KeyError: Unknown gateway (callers validate the name first)
    """
    return GATEWAY_ADAPTERS[gateway]


__all__ = [
    "CreateOrderParams",
    "GatewayOrderResult",
    "GatewayRefundResult",
    "IdempotencyKeyGenerator",
    "PaymentGatewayAdapter",
    "RazorpayAdapter",
    "StripeAdapter",
    "GATEWAY_ADAPTERS",
    "get_gateway_adapter",
]
