"""
Gateway-neutral adapter types.

Every payment gateway adapter accepts and returns these types so the order
and refund services never see SDK objects.

Usage:
    from payments.adapters.base import CreateOrderParams

    params = CreateOrderParams(
        amount=116910,
        currency="INR",
        receipt="receipt_1718000000000",
        metadata={"session_type": "individual", "session_format": "video"},
    )
"""

from __future__ import annotations

import hashlib
import uuid
from dataclasses import dataclass, field
from typing import Any, ClassVar, Protocol, runtime_checkable

from django.conf import settings


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CreateOrderParams:
    """
    Parameters for creating a gateway order.

    Attributes:
        amount: Final payable amount in minor units (never the list price
            when a discount applies)
        currency: ISO 4217 currency code
        receipt: Merchant reference shown in the gateway dashboard
        metadata: Notes attached to the order
        description: Line item name for hosted checkout pages
        customer_email: Prefills hosted checkout when known
        idempotency_key: Optional key for gateways that support it
    """

    amount: int
    currency: str
    receipt: str
    metadata: dict[str, str] = field(default_factory=dict)
    description: str = ""
    customer_email: str | None = None
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if self.amount <= 0:
            raise ValueError("amount must be positive")
        if not self.currency:
            raise ValueError("currency is required")
        if not self.receipt:
            raise ValueError("receipt is required")


@dataclass
class GatewayOrderResult:
    """
    Result from gateway order creation.

    Attributes:
        order_id: Gateway order id (Razorpay order_xxx, Stripe cs_xxx)
        amount: Amount the gateway will charge, minor units
        currency: Currency code, uppercase
        status: Gateway order status
        checkout_url: Hosted checkout page (Stripe only)
        raw_response: Full gateway response (for debugging)
    """

    order_id: str
    amount: int
    currency: str
    status: str
    checkout_url: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class GatewayRefundResult:
    """
    Result from a gateway refund.

    Attributes:
        refund_id: Gateway refund id (rfnd_xxx / re_xxx)
        payment_id: Payment that was refunded
        amount: Refunded amount in minor units as reported by the gateway
        status: Gateway refund status
        raw_response: Full gateway response
    """

    refund_id: str
    payment_id: str
    amount: int | None
    status: str
    raw_response: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Gateway Protocol
# =============================================================================


@runtime_checkable
class PaymentGatewayAdapter(Protocol):
    """
    Interface every gateway adapter class provides.

    Adapters are used as classes (all methods are classmethods), so the
    class object itself satisfies this protocol.
    """

    gateway: ClassVar[str]
    currency: ClassVar[str]

    def is_configured(self) -> bool:
        """Whether API keys for this gateway are present."""
        ...

    def public_key(self) -> str:
        """Key the browser checkout needs, empty when none is used."""
        ...

    def create_order(self, params: CreateOrderParams) -> GatewayOrderResult:
        """Create an order for the final payable amount."""
        ...

    def refund(
        self,
        payment_id: str,
        amount: int | None = None,
        notes: dict[str, str] | None = None,
        idempotency_key: str | None = None,
    ) -> GatewayRefundResult:
        """Refund a captured payment; amount None refunds it in full."""
        ...


# =============================================================================
# Idempotency Key Generator
# =============================================================================


class IdempotencyKeyGenerator:
    """
    Generate idempotency keys for gateway API calls.

    Format: "{operation}:{entity_id}:{attempt}:{hash}"

    Example:
        key = IdempotencyKeyGenerator.generate("refund", payment.id)
        # "refund:550e8400-e29b-41d4-a716-446655440000:1:a1b2c3d4"
    """

    @staticmethod
    def generate(
        operation: str,
        entity_id: uuid.UUID | str,
        attempt: int = 1,
    ) -> str:
        entity_str = str(entity_id)
        hash_input = f"{operation}:{entity_str}:{attempt}:{settings.SECRET_KEY}"
        short_hash = hashlib.sha256(hash_input.encode()).hexdigest()[:8]

        return f"{operation}:{entity_str}:{attempt}:{short_hash}"
