"""
Stripe API adapter for USD payments.

This module provides the StripeAdapter class which encapsulates all
Stripe API interactions. All Stripe calls should go through this
adapter to ensure consistent error handling, timeouts, idempotency,
and observability.

Orders are Stripe Checkout Sessions: the customer is redirected to the
hosted page and the checkout.session.completed webhook confirms payment.

Configuration (via settings):
- STRIPE_SECRET_KEY: Stripe API secret key
- STRIPE_WEBHOOK_SECRET: Webhook signing secret
- STRIPE_MAX_RETRIES: Network retries inside the SDK (default: 2)
- STRIPE_CHECKOUT_SUCCESS_URL / STRIPE_CHECKOUT_CANCEL_URL: Redirect targets
- PAYMENT_GATEWAY_TIMEOUT_SECONDS: API call timeout (default: 25)

Usage:
    from payments.adapters import StripeAdapter, CreateOrderParams

    result = StripeAdapter.create_order(
        CreateOrderParams(
            amount=1800,
            currency="USD",
            receipt="receipt_1718000000000",
            idempotency_key="create_order:receipt_1718000000000:1:ab12cd34",
        )
    )
    result.checkout_url  # "https://checkout.stripe.com/c/pay/cs_test_..."
"""

from __future__ import annotations

import logging
import time
from typing import Any

import stripe
from django.conf import settings

from payments.adapters.base import (
    CreateOrderParams,
    GatewayOrderResult,
    GatewayRefundResult,
)
from payments.exceptions import (
    GatewayNotConfiguredError,
    GatewayRateLimitError,
    GatewayRequestError,
    GatewayUnavailableError,
    WebhookSignatureError,
)
from payments.state_machines import Gateway


class StripeAdapter:
    """
    Adapter for Stripe Checkout and Refunds.

    All methods are classmethods - no instance state is maintained.

    Features:
    - Configurable timeouts on all API calls
    - Automatic error translation to domain exceptions
    - Structured logging with timing metrics
    - Idempotency support for safe retries
    """

    gateway = Gateway.STRIPE
    currency = "USD"

    # =========================================================================
    # Configuration
    # =========================================================================

    @classmethod
    def is_configured(cls) -> bool:
        return bool(settings.STRIPE_SECRET_KEY)

    @classmethod
    def public_key(cls) -> str:
        # Hosted checkout needs no browser key
        return ""

    @classmethod
    def _configure_stripe(cls) -> None:
        """Configure Stripe client with API key and timeout."""
        if not cls.is_configured():
            raise GatewayNotConfiguredError(
                "Stripe is not configured",
                gateway=cls.gateway,
            )
        stripe.api_key = settings.STRIPE_SECRET_KEY
        stripe.max_network_retries = settings.STRIPE_MAX_RETRIES
        stripe.default_http_client = stripe.RequestsClient(
            timeout=settings.PAYMENT_GATEWAY_TIMEOUT_SECONDS
        )

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Core Operations
    # =========================================================================

    @classmethod
    def create_order(cls, params: CreateOrderParams) -> GatewayOrderResult:
        """
        Create a Checkout Session for the final payable amount.

        Args:
            params: Order parameters; amount in cents

        Returns:
            GatewayOrderResult whose order_id is the session id (cs_xxx)

        Raises:
            GatewayNotConfiguredError: Secret key missing
            GatewayRequestError: Stripe rejected the session
            GatewayUnavailableError: Stripe unreachable or erroring
        """
        cls._configure_stripe()
        logger = cls.get_logger()

        log_context = {
            "operation": "create_order",
            "gateway": cls.gateway,
            "amount": params.amount,
            "currency": params.currency,
            "receipt": params.receipt,
            "idempotency_key": params.idempotency_key,
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        session_params: dict[str, Any] = {
            "mode": "payment",
            "line_items": [
                {
                    "price_data": {
                        "currency": params.currency.lower(),
                        "unit_amount": params.amount,
                        "product_data": {"name": params.description or "Therapy session"},
                    },
                    "quantity": 1,
                }
            ],
            "metadata": params.metadata,
            "client_reference_id": params.receipt,
            "success_url": settings.STRIPE_CHECKOUT_SUCCESS_URL,
            "cancel_url": settings.STRIPE_CHECKOUT_CANCEL_URL,
        }
        if params.customer_email:
            session_params["customer_email"] = params.customer_email
        if params.idempotency_key:
            session_params["idempotency_key"] = params.idempotency_key

        try:
            session = stripe.checkout.Session.create(**session_params)

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Stripe operation completed",
                extra={
                    **log_context,
                    "session_id": session.id,
                    "duration_ms": duration_ms,
                },
            )

            return GatewayOrderResult(
                order_id=session.id,
                amount=session.amount_total or params.amount,
                currency=(session.currency or params.currency).upper(),
                status=session.status or "open",
                checkout_url=session.url,
                raw_response=session.to_dict(),
            )

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise

    @classmethod
    def refund(
        cls,
        payment_id: str,
        amount: int | None = None,
        notes: dict[str, str] | None = None,
        idempotency_key: str | None = None,
    ) -> GatewayRefundResult:
        """
        Create a refund for a PaymentIntent.

        Args:
            payment_id: Stripe PaymentIntent ID (pi_xxx)
            amount: Amount to refund in cents (None for full refund)
            notes: Stored as refund metadata
            idempotency_key: Unique key for idempotent refund

        Raises:
            GatewayRequestError: Refund not possible
            GatewayUnavailableError: Stripe unreachable or erroring
        """
        cls._configure_stripe()
        logger = cls.get_logger()

        log_context = {
            "operation": "refund",
            "gateway": cls.gateway,
            "payment_intent_prefix": payment_id[:8],
            "amount": amount,
            "idempotency_key": idempotency_key,
        }

        start_time = time.time()
        logger.info("Starting Stripe operation", extra=log_context)

        try:
            refund_params: dict[str, Any] = {
                "payment_intent": payment_id,
                "reason": "requested_by_customer",
                "metadata": notes or {},
            }
            if amount is not None:
                refund_params["amount"] = amount
            if idempotency_key:
                refund_params["idempotency_key"] = idempotency_key

            refund = stripe.Refund.create(**refund_params)

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Stripe operation completed",
                extra={
                    **log_context,
                    "refund_id": refund.id,
                    "status": refund.status,
                    "duration_ms": duration_ms,
                },
            )

            return GatewayRefundResult(
                refund_id=refund.id,
                payment_id=refund.payment_intent or payment_id,
                amount=refund.amount,
                status=refund.status,
                raw_response=refund.to_dict(),
            )

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise

    # =========================================================================
    # Webhook Verification
    # =========================================================================

    @classmethod
    def verify_webhook_signature(
        cls,
        payload: bytes,
        signature: str,
    ) -> dict[str, Any]:
        """
        Verify and parse a Stripe webhook event.

        Args:
            payload: Raw webhook payload bytes
            signature: Stripe-Signature header value

        Returns:
            Parsed event data dict

        Raises:
            GatewayNotConfiguredError: Webhook secret missing
            WebhookSignatureError: Invalid signature or payload
        """
        if not settings.STRIPE_WEBHOOK_SECRET:
            raise GatewayNotConfiguredError(
                "Stripe webhook secret is not configured",
                gateway=cls.gateway,
            )
        try:
            event = stripe.Webhook.construct_event(
                payload,
                signature,
                settings.STRIPE_WEBHOOK_SECRET,
            )
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(
                "Invalid webhook signature",
                details={"error": str(e)},
            ) from e
        except ValueError as e:
            raise WebhookSignatureError(
                "Invalid webhook payload",
                details={"error": str(e)},
            ) from e
        return event.to_dict()

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_stripe_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Stripe exceptions to domain exceptions.

        Raises:
            GatewayRequestError: Invalid request, declined card, bad API key
            GatewayRateLimitError: Rate limited
            GatewayUnavailableError: Network failure, timeout or Stripe 5xx
        """
        logger = cls.get_logger()

        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, stripe.CardError):
            logger.warning(
                "Card error from Stripe",
                extra={**log_context, "decline_code": getattr(error, "decline_code", None)},
            )
            raise GatewayRequestError(
                str(error.user_message or error),
                gateway=cls.gateway,
                gateway_code=error.code,
            ) from error

        elif isinstance(error, stripe.InvalidRequestError):
            logger.error(
                "Invalid request to Stripe",
                extra={**log_context, "stripe_code": error.code},
            )
            raise GatewayRequestError(
                str(error.user_message or error),
                gateway=cls.gateway,
                gateway_code=error.code,
            ) from error

        elif isinstance(error, stripe.RateLimitError):
            logger.warning("Rate limited by Stripe", extra=log_context)
            raise GatewayRateLimitError(
                "Payment gateway is busy. Please retry.",
                gateway=cls.gateway,
                gateway_code="rate_limit",
            ) from error

        elif isinstance(error, stripe.APIConnectionError):
            # Includes timeouts raised by the HTTP client
            logger.error("Connection error to Stripe", extra=log_context, exc_info=True)
            raise GatewayUnavailableError(
                "Could not connect to the payment gateway. Please retry.",
                gateway=cls.gateway,
                gateway_code="api_connection_error",
            ) from error

        elif isinstance(error, stripe.APIError):
            logger.error("Stripe API error", extra=log_context, exc_info=True)
            raise GatewayUnavailableError(
                "Payment gateway error. Please retry.",
                gateway=cls.gateway,
                gateway_code="api_error",
            ) from error

        elif isinstance(error, stripe.AuthenticationError):
            # Invalid API key - permanent, operational issue
            logger.critical("Stripe authentication failed - check API key", extra=log_context)
            raise GatewayRequestError(
                "Payment gateway authentication failed",
                gateway=cls.gateway,
                gateway_code="authentication_error",
            ) from error

        else:
            logger.error(
                f"Unexpected error from Stripe: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise GatewayUnavailableError(
                "Unexpected payment gateway error",
                gateway=cls.gateway,
                gateway_code="unknown_error",
            ) from error
