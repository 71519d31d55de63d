"""
Razorpay API adapter for INR payments.

All Razorpay calls go through this adapter to get consistent timeouts,
error translation and structured logging.

Configuration (via settings):
- RAZORPAY_KEY_ID: Public key id, also handed to the browser checkout
- RAZORPAY_KEY_SECRET: API secret, also signs payment callbacks
- PAYMENT_GATEWAY_TIMEOUT_SECONDS: Timeout for every call (default: 25)

Usage:
    from payments.adapters import RazorpayAdapter, CreateOrderParams

    result = RazorpayAdapter.create_order(
        CreateOrderParams(amount=129900, currency="INR", receipt="receipt_1718000000000")
    )
    result.order_id  # "order_NcXkQ2m1..."

    RazorpayAdapter.refund("pay_NcXl8d0q...", amount=64950)
"""

from __future__ import annotations

import logging
import time
from typing import Any

import razorpay
import requests
from django.conf import settings
from razorpay.errors import BadRequestError, GatewayError, ServerError

from payments.adapters.base import (
    CreateOrderParams,
    GatewayOrderResult,
    GatewayRefundResult,
)
from payments.exceptions import (
    GatewayNotConfiguredError,
    GatewayRequestError,
    GatewayTimeoutError,
    GatewayUnavailableError,
)
from payments.state_machines import Gateway


class RazorpayAdapter:
    """
    Adapter for Razorpay Orders and Refunds.

    All methods are classmethods - no instance state is maintained. A new SDK
    client is built per call so key rotation through settings takes effect
    immediately.
    """

    gateway = Gateway.RAZORPAY
    currency = "INR"

    # =========================================================================
    # Configuration
    # =========================================================================

    @classmethod
    def is_configured(cls) -> bool:
        return bool(settings.RAZORPAY_KEY_ID and settings.RAZORPAY_KEY_SECRET)

    @classmethod
    def public_key(cls) -> str:
        """Key id the browser checkout needs to open the payment form."""
        return settings.RAZORPAY_KEY_ID

    @classmethod
    def _get_client(cls) -> razorpay.Client:
        if not cls.is_configured():
            raise GatewayNotConfiguredError(
                "Razorpay is not configured",
                gateway=cls.gateway,
            )
        return razorpay.Client(
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
        )

    @staticmethod
    def _timeout() -> int:
        return settings.PAYMENT_GATEWAY_TIMEOUT_SECONDS

    @classmethod
    def get_logger(cls) -> logging.Logger:
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Orders
    # =========================================================================

    @classmethod
    def create_order(cls, params: CreateOrderParams) -> GatewayOrderResult:
        """
        Create a Razorpay order for the final payable amount.

        Raises:
            GatewayNotConfiguredError: Keys missing
            GatewayRequestError: Razorpay rejected the order
            GatewayUnavailableError: Razorpay unreachable, timed out or 5xx
        """
        client = cls._get_client()
        logger = cls.get_logger()

        log_context = {
            "operation": "create_order",
            "gateway": cls.gateway,
            "amount": params.amount,
            "currency": params.currency,
            "receipt": params.receipt,
        }

        start_time = time.time()
        logger.info("Starting Razorpay operation", extra=log_context)

        try:
            order = client.order.create(
                data={
                    "amount": params.amount,
                    "currency": params.currency,
                    "receipt": params.receipt,
                    "notes": params.metadata,
                },
                timeout=cls._timeout(),
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_razorpay_error(e, log_context, duration_ms)
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Razorpay operation completed",
            extra={
                **log_context,
                "order_id": order["id"],
                "duration_ms": duration_ms,
            },
        )

        return GatewayOrderResult(
            order_id=order["id"],
            amount=order.get("amount", params.amount),
            currency=str(order.get("currency", params.currency)).upper(),
            status=order.get("status", "created"),
            raw_response=dict(order),
        )

    # =========================================================================
    # Refunds
    # =========================================================================

    @classmethod
    def refund(
        cls,
        payment_id: str,
        amount: int | None = None,
        notes: dict[str, str] | None = None,
        idempotency_key: str | None = None,
    ) -> GatewayRefundResult:
        """
        Refund a captured Razorpay payment.

        Args:
            payment_id: Razorpay payment id (pay_xxx)
            amount: Amount in paise; None refunds the full captured amount
            notes: Key-value notes stored with the refund
            idempotency_key: Unused; Razorpay rejects refunds above the
                captured amount on its own

        Raises:
            GatewayRequestError: Refund not possible
            GatewayUnavailableError: Razorpay unreachable, timed out or 5xx
        """
        client = cls._get_client()
        logger = cls.get_logger()

        log_context = {
            "operation": "refund",
            "gateway": cls.gateway,
            "payment_id_prefix": payment_id[:8],
            "amount": amount,
        }

        start_time = time.time()
        logger.info("Starting Razorpay operation", extra=log_context)

        data: dict[str, Any] = {"notes": notes or {}}
        if amount is not None:
            data["amount"] = amount

        try:
            refund = client.payment.refund(payment_id, data, timeout=cls._timeout())
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_razorpay_error(e, log_context, duration_ms)
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Razorpay operation completed",
            extra={
                **log_context,
                "refund_id": refund.get("id"),
                "status": refund.get("status"),
                "duration_ms": duration_ms,
            },
        )

        return GatewayRefundResult(
            refund_id=refund.get("id", ""),
            payment_id=refund.get("payment_id", payment_id),
            amount=refund.get("amount", amount),
            status=refund.get("status", "processed"),
            raw_response=dict(refund),
        )

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_razorpay_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Razorpay SDK and transport exceptions to domain exceptions.

        Raises:
            GatewayTimeoutError: No answer within the timeout
            GatewayUnavailableError: Connection failure or Razorpay 5xx
            GatewayRequestError: Razorpay rejected the request
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, requests.exceptions.Timeout):
            logger.error("Razorpay request timed out", extra=log_context)
            raise GatewayTimeoutError(
                "Payment gateway timed out. Please retry.",
                gateway=cls.gateway,
                gateway_code="timeout",
            ) from error

        elif isinstance(error, requests.exceptions.ConnectionError):
            logger.error("Connection error to Razorpay", extra=log_context, exc_info=True)
            raise GatewayUnavailableError(
                "Could not connect to the payment gateway. Please retry.",
                gateway=cls.gateway,
                gateway_code="connection_error",
            ) from error

        elif isinstance(error, BadRequestError):
            logger.warning(
                "Razorpay rejected the request",
                extra={**log_context, "gateway_message": str(error)},
            )
            raise GatewayRequestError(
                str(error) or "Payment gateway rejected the request",
                gateway=cls.gateway,
                gateway_code="BAD_REQUEST_ERROR",
            ) from error

        elif isinstance(error, GatewayError):
            logger.error("Razorpay gateway error", extra=log_context, exc_info=True)
            raise GatewayUnavailableError(
                "Payment gateway error. Please retry.",
                gateway=cls.gateway,
                gateway_code="GATEWAY_ERROR",
            ) from error

        elif isinstance(error, ServerError):
            logger.error("Razorpay server error", extra=log_context, exc_info=True)
            raise GatewayUnavailableError(
                "Payment gateway error. Please retry.",
                gateway=cls.gateway,
                gateway_code="SERVER_ERROR",
            ) from error

        elif isinstance(error, requests.exceptions.RequestException):
            logger.error("Razorpay transport error", extra=log_context, exc_info=True)
            raise GatewayUnavailableError(
                "Payment gateway unavailable. Please retry.",
                gateway=cls.gateway,
                gateway_code="transport_error",
            ) from error

        else:
            logger.error(
                f"Unexpected error from Razorpay: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise GatewayUnavailableError(
                "Unexpected payment gateway error",
                gateway=cls.gateway,
                gateway_code="unknown_error",
            ) from error
