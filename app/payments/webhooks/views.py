"""
Webhook endpoint views for Stripe.

The view:
1. Verifies the webhook signature
2. On a paid checkout session (checkout.session.completed with
   payment_status "paid", or checkout.session.async_payment_succeeded),
   marks the payment paid
3. Acknowledges unpaid sessions and every other event type without acting on them

Usage:
    # In urls.py
    from payments.webhooks.views import stripe_webhook

    urlpatterns = [
        path("webhooks/stripe/", stripe_webhook, name="stripe_webhook"),
    ]
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from payments.adapters import StripeAdapter
from payments.exceptions import GatewayNotConfiguredError, WebhookSignatureError
from payments.services import VerificationService
from payments.signatures import redact

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
ASYNC_PAYMENT_SUCCEEDED = "checkout.session.async_payment_succeeded"
PAYMENT_EVENTS = {CHECKOUT_COMPLETED, ASYNC_PAYMENT_SUCCEEDED}

# Outcomes Stripe should not retry: the event is understood, there is just
# nothing (more) to do for it.
FINAL_ERROR_CODES = {"PAYMENT_NOT_FOUND", "PAYMENT_STATE_CONFLICT", "COUPON_USAGE_LIMIT_REACHED"}


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> HttpResponse:
    """
    Receive Stripe webhook events.

    Security:
    - Signature verification prevents spoofed webhooks
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Idempotency:
    - Stripe retries deliveries; a repeat completion for an already paid
      payment is a no-op in VerificationService.complete_payment

    Returns:
        HttpResponse with status:
        - 200: Event handled or ignored
        - 400: Missing or invalid signature
        - 503: Webhook secret not configured (Stripe retries later)

    Example Stripe-Signature header:
        t=1614556800,v1=xxx,v0=yyy
    """
    payload = request.body
    signature = request.headers.get("Stripe-Signature", "")

    if not signature:
        logger.warning("Webhook received without Stripe-Signature header")
        return HttpResponse("Missing signature", status=400)

    try:
        event = StripeAdapter.verify_webhook_signature(payload, signature)
    except WebhookSignatureError as e:
        logger.warning(
            "Webhook signature verification failed",
            extra={"error": e.message},
        )
        return HttpResponse("Invalid signature", status=400)
    except GatewayNotConfiguredError:
        logger.error("Stripe webhook received but STRIPE_WEBHOOK_SECRET is not set")
        return HttpResponse("Webhook not configured", status=503)

    event_type = event.get("type")
    logger.info(
        f"Received Stripe webhook: {event_type}",
        extra={"stripe_event_id": event.get("id"), "event_type": event_type},
    )

    if event_type not in PAYMENT_EVENTS:
        return HttpResponse("Ignored", status=200)

    session = event.get("data", {}).get("object", {})
    session_id = session.get("id")
    if not session_id:
        logger.warning("Checkout session event without a session id")
        return HttpResponse("Invalid event", status=400)

    # Delayed payment methods complete the session before any money moves;
    # async_payment_succeeded follows once the charge clears.
    payment_intent = session.get("payment_intent")
    if session.get("payment_status") != "paid" or not payment_intent:
        logger.info(
            "Checkout session not paid yet",
            extra={
                "order_id_prefix": redact(session_id),
                "payment_status": session.get("payment_status"),
            },
        )
        return HttpResponse("Awaiting payment", status=200)

    result = VerificationService.complete_payment(
        gateway_order_id=session_id,
        gateway_payment_id=payment_intent,
    )

    if not result.success and result.error_code not in FINAL_ERROR_CODES:
        return HttpResponse("Retry", status=500)

    if not result.success:
        logger.warning(
            "Checkout completion not applied",
            extra={"order_id_prefix": redact(session_id), "error_code": result.error_code},
        )

    return HttpResponse("OK", status=200)
