"""
Pytest fixtures for webhook tests.

Provides Stripe event payloads and a request factory for the webhook view.
"""

import json

import pytest
from django.test import RequestFactory

from payments.tests.factories import PaymentFactory

CHECKOUT_SESSION_ID = "cs_test_a1b2c3"
PAYMENT_INTENT_ID = "pi_test123456"


@pytest.fixture
def rf():
    """Request factory for creating test requests."""
    return RequestFactory()


@pytest.fixture
def webhook_secret(settings):
    settings.STRIPE_SECRET_KEY = "sk_test_123"
    settings.STRIPE_WEBHOOK_SECRET = "whsec_test"
    return settings


@pytest.fixture
def checkout_completed_event():
    """A verified checkout.session.completed event as returned by StripeAdapter."""
    return {
        "id": "evt_test123",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": CHECKOUT_SESSION_ID,
                "object": "checkout.session",
                "payment_intent": PAYMENT_INTENT_ID,
                "payment_status": "paid",
            }
        },
    }


@pytest.fixture
def pending_stripe_payment(db):
    """Pending Stripe checkout for $16."""
    return PaymentFactory(stripe=True, gateway_order_id=CHECKOUT_SESSION_ID)
