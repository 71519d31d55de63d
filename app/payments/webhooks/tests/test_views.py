"""
Tests for the Stripe webhook view.

Tests cover:
- Signature verification
- checkout.session.completed marking the payment paid
- Idempotent handling of redelivered events
- Which failures ask Stripe to retry
"""

import json
from unittest.mock import patch

import pytest
from django.test import Client

from core.services import ServiceResult
from payments.exceptions import GatewayNotConfiguredError, WebhookSignatureError
from payments.state_machines import PaymentStatus
from payments.webhooks.views import stripe_webhook

WEBHOOK_URL = "/api/v1/payments/webhooks/stripe/"
VERIFY_PATH = "payments.webhooks.views.StripeAdapter.verify_webhook_signature"


def make_webhook_request(rf, payload: dict, signature: str | None = "t=1,v1=test_sig"):
    """Create a POST request to the webhook endpoint."""
    headers = {"HTTP_STRIPE_SIGNATURE": signature} if signature else {}
    return rf.post(
        WEBHOOK_URL,
        data=json.dumps(payload),
        content_type="application/json",
        **headers,
    )


# =============================================================================
# Signature Verification Tests
# =============================================================================


class TestStripeWebhookSignature:
    """Tests for signature verification."""

    def test_missing_signature_returns_400(self, rf, db):
        request = make_webhook_request(rf, {"id": "evt_test"}, signature=None)

        response = stripe_webhook(request)

        assert response.status_code == 400

    def test_invalid_signature_returns_400(self, rf, db):
        request = make_webhook_request(rf, {"id": "evt_test"})

        with patch(VERIFY_PATH, side_effect=WebhookSignatureError("Invalid webhook signature")):
            response = stripe_webhook(request)

        assert response.status_code == 400

    def test_missing_secret_returns_503(self, rf, db):
        request = make_webhook_request(rf, {"id": "evt_test"})

        with patch(
            VERIFY_PATH,
            side_effect=GatewayNotConfiguredError("STRIPE_WEBHOOK_SECRET is not set", gateway="stripe"),
        ):
            response = stripe_webhook(request)

        assert response.status_code == 503

    def test_verifies_raw_body_and_header(self, rf, db, checkout_completed_event):
        request = make_webhook_request(rf, {"id": "evt_test"}, signature="t=1,v1=abc")

        with patch(VERIFY_PATH, return_value={"id": "evt_1", "type": "charge.updated"}) as mock_verify:
            stripe_webhook(request)

        mock_verify.assert_called_once_with(request.body, "t=1,v1=abc")

    def test_get_not_allowed(self, db):
        response = Client().get(WEBHOOK_URL)

        assert response.status_code == 405

    def test_real_signature_check_rejects_forgery(self, rf, webhook_secret, pending_stripe_payment):
        request = make_webhook_request(rf, {"id": "evt_forged"}, signature="t=1,v1=forged")

        response = stripe_webhook(request)

        assert response.status_code == 400
        pending_stripe_payment.refresh_from_db()
        assert pending_stripe_payment.status == PaymentStatus.PENDING


# =============================================================================
# Event Handling Tests
# =============================================================================


class TestCheckoutCompleted:
    def test_marks_payment_paid(self, rf, pending_stripe_payment, checkout_completed_event):
        request = make_webhook_request(rf, checkout_completed_event)

        with patch(VERIFY_PATH, return_value=checkout_completed_event):
            response = stripe_webhook(request)

        assert response.status_code == 200
        pending_stripe_payment.refresh_from_db()
        assert pending_stripe_payment.status == PaymentStatus.PAID
        assert pending_stripe_payment.gateway_payment_id == "pi_test123456"

    def test_redelivery_is_idempotent(self, rf, pending_stripe_payment, checkout_completed_event):
        with patch(VERIFY_PATH, return_value=checkout_completed_event):
            stripe_webhook(make_webhook_request(rf, checkout_completed_event))
            paid_at = type(pending_stripe_payment).objects.get(pk=pending_stripe_payment.pk).paid_at

            response = stripe_webhook(make_webhook_request(rf, checkout_completed_event))

        assert response.status_code == 200
        pending_stripe_payment.refresh_from_db()
        assert pending_stripe_payment.paid_at == paid_at

    def test_unknown_session_acknowledged(self, rf, db, checkout_completed_event):
        request = make_webhook_request(rf, checkout_completed_event)

        with patch(VERIFY_PATH, return_value=checkout_completed_event):
            response = stripe_webhook(request)

        assert response.status_code == 200

    def test_session_without_id(self, rf, db, checkout_completed_event):
        del checkout_completed_event["data"]["object"]["id"]
        request = make_webhook_request(rf, checkout_completed_event)

        with patch(VERIFY_PATH, return_value=checkout_completed_event):
            response = stripe_webhook(request)

        assert response.status_code == 400

    def test_unexpected_failure_asks_for_retry(self, rf, db, checkout_completed_event):
        request = make_webhook_request(rf, checkout_completed_event)
        failure = ServiceResult.failure("Database unavailable", error_code="SERVICE_UNAVAILABLE")

        with (
            patch(VERIFY_PATH, return_value=checkout_completed_event),
            patch(
                "payments.webhooks.views.VerificationService.complete_payment",
                return_value=failure,
            ),
        ):
            response = stripe_webhook(request)

        assert response.status_code == 500


class TestUnpaidCheckout:
    @pytest.mark.parametrize("payment_status", ["unpaid", "no_payment_required", None])
    def test_unpaid_session_left_pending(
        self, rf, pending_stripe_payment, checkout_completed_event, payment_status
    ):
        checkout_completed_event["data"]["object"]["payment_status"] = payment_status
        request = make_webhook_request(rf, checkout_completed_event)

        with (
            patch(VERIFY_PATH, return_value=checkout_completed_event),
            patch("payments.webhooks.views.VerificationService.complete_payment") as mock_complete,
        ):
            response = stripe_webhook(request)

        assert response.status_code == 200
        mock_complete.assert_not_called()
        pending_stripe_payment.refresh_from_db()
        assert pending_stripe_payment.status == PaymentStatus.PENDING

    def test_session_without_payment_intent_left_pending(
        self, rf, pending_stripe_payment, checkout_completed_event
    ):
        checkout_completed_event["data"]["object"]["payment_intent"] = None
        request = make_webhook_request(rf, checkout_completed_event)

        with patch(VERIFY_PATH, return_value=checkout_completed_event):
            response = stripe_webhook(request)

        assert response.status_code == 200
        pending_stripe_payment.refresh_from_db()
        assert pending_stripe_payment.status == PaymentStatus.PENDING
        assert not pending_stripe_payment.gateway_payment_id

    def test_async_payment_succeeded_marks_paid(
        self, rf, pending_stripe_payment, checkout_completed_event
    ):
        checkout_completed_event["data"]["object"]["payment_status"] = "unpaid"
        with patch(VERIFY_PATH, return_value=checkout_completed_event):
            stripe_webhook(make_webhook_request(rf, checkout_completed_event))

        succeeded = {
            **checkout_completed_event,
            "id": "evt_test789",
            "type": "checkout.session.async_payment_succeeded",
        }
        succeeded["data"] = {
            "object": {**checkout_completed_event["data"]["object"], "payment_status": "paid"}
        }

        with patch(VERIFY_PATH, return_value=succeeded):
            response = stripe_webhook(make_webhook_request(rf, succeeded))

        assert response.status_code == 200
        pending_stripe_payment.refresh_from_db()
        assert pending_stripe_payment.status == PaymentStatus.PAID
        assert pending_stripe_payment.gateway_payment_id == "pi_test123456"
        assert pending_stripe_payment.is_mock is False


class TestOtherEvents:
    def test_other_event_types_ignored(self, rf, pending_stripe_payment):
        event = {"id": "evt_test456", "type": "payment_intent.created", "data": {"object": {}}}
        request = make_webhook_request(rf, event)

        with (
            patch(VERIFY_PATH, return_value=event),
            patch("payments.webhooks.views.VerificationService.complete_payment") as mock_complete,
        ):
            response = stripe_webhook(request)

        assert response.status_code == 200
        mock_complete.assert_not_called()
        pending_stripe_payment.refresh_from_db()
        assert pending_stripe_payment.status == PaymentStatus.PENDING
