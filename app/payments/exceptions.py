"""
Payment-specific exceptions for gateway operations.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── WebhookSignatureError - Gateway webhook failed signature verification
    └── PaymentGatewayError - Base for all gateway errors (carries is_retryable)
        ├── GatewayNotConfiguredError - Keys missing for the selected gateway
        ├── GatewayRequestError - Gateway rejected the request (permanent)
        ├── GatewayRateLimitError - Rate limited (transient, retry)
        └── GatewayUnavailableError - Unreachable or 5xx (transient, retry)
            └── GatewayTimeoutError - No answer within the configured timeout

Usage:
    from payments.exceptions import PaymentGatewayError

    try:
        RazorpayAdapter.create_order(params)
    except PaymentGatewayError as e:
        if e.is_retryable:
            ...  # report "service unavailable", the customer may retry
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """Base exception for all payment operations."""

    default_error_code: str = "PAYMENT_ERROR"


class WebhookSignatureError(PaymentError):
    """Raised when a gateway webhook payload fails signature verification."""

    default_error_code: str = "INVALID_WEBHOOK_SIGNATURE"


# =============================================================================
# Gateway Exceptions
# =============================================================================


class PaymentGatewayError(PaymentError):
    """
    Base exception for payment gateway (Razorpay, Stripe) errors.

    Attributes:
        gateway: Gateway that raised the error
        gateway_code: The gateway's own error code, when it sent one
        is_retryable: Whether the same request may succeed later

    Example:
        try:
            adapter.refund(payment_id, amount=64950)
        except PaymentGatewayError as e:
            return ServiceResult.from_exception(e)
    """

    default_error_code: str = "GATEWAY_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        gateway: str | None = None,
        gateway_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if gateway:
            details["gateway"] = gateway
        if gateway_code:
            details["gateway_code"] = gateway_code
        super().__init__(message, error_code=error_code, details=details)
        self.gateway = gateway
        self.gateway_code = gateway_code


class GatewayNotConfiguredError(PaymentGatewayError):
    """
    Raised when the selected gateway has no API keys configured.

    An operational problem rather than a customer error; reported as 503.
    """

    default_error_code: str = "GATEWAY_NOT_CONFIGURED"


class GatewayRequestError(PaymentGatewayError):
    """
    Raised when the gateway rejects a request.

    Use for:
    - Invalid parameters (amount below the gateway minimum, unknown payment id)
    - Authentication failures (wrong key pair)
    - Refund amount exceeding the captured amount

    Not retryable: the same request will fail again.
    """

    default_error_code: str = "GATEWAY_ERROR"


class GatewayRateLimitError(PaymentGatewayError):
    """Raised when the gateway rate limits our requests."""

    default_error_code: str = "SERVICE_UNAVAILABLE"
    is_retryable: bool = True


class GatewayUnavailableError(PaymentGatewayError):
    """
    Raised when the gateway cannot be reached or reports a server error.

    Never report this to the customer as a failed payment: the request may
    succeed on retry.
    """

    default_error_code: str = "SERVICE_UNAVAILABLE"
    is_retryable: bool = True


class GatewayTimeoutError(GatewayUnavailableError):
    """Raised when the gateway does not answer within PAYMENT_GATEWAY_TIMEOUT_SECONDS."""

    default_error_code: str = "SERVICE_UNAVAILABLE"


__all__ = [
    "PaymentError",
    "WebhookSignatureError",
    "PaymentGatewayError",
    "GatewayNotConfiguredError",
    "GatewayRequestError",
    "GatewayRateLimitError",
    "GatewayUnavailableError",
    "GatewayTimeoutError",
]
