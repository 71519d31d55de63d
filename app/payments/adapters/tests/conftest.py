"""
Pytest fixtures for gateway adapter tests.

This module provides fixtures for testing the Razorpay and Stripe adapters,
including mock SDK responses, error conditions, and test data.

Sections:
    - Settings Fixtures
    - Mock Stripe Response Fixtures
    - Error Response Fixtures
    - Mock SDK Client Fixtures
"""

from dataclasses import dataclass
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import stripe

from payments.adapters import CreateOrderParams


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def gateway_keys(settings):
    """Configure both gateways with test keys."""
    settings.RAZORPAY_KEY_ID = "rzp_test_key"
    settings.RAZORPAY_KEY_SECRET = "rzp_test_secret"
    settings.STRIPE_SECRET_KEY = "sk_test_123"
    settings.STRIPE_WEBHOOK_SECRET = "whsec_test"
    settings.PAYMENT_GATEWAY_TIMEOUT_SECONDS = 25
    return settings


@pytest.fixture
def inr_params():
    return CreateOrderParams(
        amount=116910,
        currency="INR",
        receipt="receipt_1718000000000",
        metadata={"session_type": "individual", "session_format": "video"},
    )


@pytest.fixture
def usd_params():
    return CreateOrderParams(
        amount=1600,
        currency="USD",
        receipt="receipt_1718000000000",
        metadata={"session_type": "individual", "session_format": "video"},
        description="Individual therapy, video (60 min)",
        idempotency_key="create_order:receipt_1718000000000:1:ab12cd34",
    )


# =============================================================================
# Mock Stripe Response Fixtures
# =============================================================================


@dataclass
class MockStripeObject:
    """Mock Stripe API object with to_dict support."""

    data: dict[str, Any]

    def __getattr__(self, name: str) -> Any:
        if name == "data":
            return self.__dict__["data"]
        return self.data.get(name)

    def to_dict(self) -> dict[str, Any]:
        return self.data


@pytest.fixture
def mock_checkout_session():
    """Create a mock Checkout Session response."""

    def _create(
        id: str = "cs_test_a1b2c3",
        amount_total: int = 1600,
        currency: str = "usd",
        status: str = "open",
        url: str = "https://checkout.stripe.com/c/pay/cs_test_a1b2c3",
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "checkout.session",
                "amount_total": amount_total,
                "currency": currency,
                "status": status,
                "url": url,
            }
        )

    return _create


@pytest.fixture
def mock_refund():
    """Create a mock Refund response."""

    def _create(
        id: str = "re_test123456",
        amount: int = 1600,
        status: str = "succeeded",
        payment_intent: str = "pi_test123456",
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "refund",
                "amount": amount,
                "currency": "usd",
                "status": status,
                "payment_intent": payment_intent,
            }
        )

    return _create


# =============================================================================
# Error Response Fixtures
# =============================================================================


@pytest.fixture
def card_error():
    return stripe.CardError(
        message="Your card was declined.",
        param=None,
        code="card_declined",
    )


@pytest.fixture
def invalid_request_error():
    return stripe.InvalidRequestError(
        message="Amount must be at least 50 cents",
        param="amount",
        code="amount_too_small",
    )


@pytest.fixture
def rate_limit_error():
    return stripe.RateLimitError(message="Too many requests hit the API too quickly.")


@pytest.fixture
def api_connection_error():
    return stripe.APIConnectionError(message="Request timed out.")


@pytest.fixture
def api_error():
    return stripe.APIError(message="Something went wrong on Stripe's end.")


@pytest.fixture
def authentication_error():
    return stripe.AuthenticationError(message="Invalid API Key provided.")


@pytest.fixture
def signature_verification_error():
    return stripe.SignatureVerificationError(
        message="Unable to verify webhook signature.",
        sig_header="bad_signature",
    )


# =============================================================================
# Mock SDK Client Fixtures
# =============================================================================


@pytest.fixture
def mock_stripe_http_client():
    """Mock stripe.RequestsClient."""
    with patch("stripe.RequestsClient") as mock:
        yield mock


@pytest.fixture
def mock_stripe_checkout(mock_checkout_session):
    """Mock stripe.checkout.Session API."""
    with patch("stripe.checkout.Session") as mock:
        mock.create.return_value = mock_checkout_session()
        yield mock


@pytest.fixture
def mock_stripe_refund(mock_refund):
    """Mock stripe.Refund API."""
    with patch("stripe.Refund") as mock:
        mock.create.return_value = mock_refund()
        yield mock


@pytest.fixture
def mock_stripe_webhook():
    """Mock stripe.Webhook API."""
    with patch("stripe.Webhook") as mock:
        mock.construct_event.return_value = MockStripeObject(
            {
                "id": "evt_test123",
                "type": "checkout.session.completed",
                "data": {
                    "object": {
                        "id": "cs_test_a1b2c3",
                        "payment_intent": "pi_test123456",
                    }
                },
            }
        )
        yield mock


@pytest.fixture
def mock_razorpay_client():
    """Mock razorpay.Client; yields the client instance the adapter builds."""
    with patch("razorpay.Client") as client_class:
        client = MagicMock()
        client.order.create.return_value = {
            "id": "order_NcXkQ2m1abc",
            "entity": "order",
            "amount": 116910,
            "currency": "INR",
            "receipt": "receipt_1718000000000",
            "status": "created",
        }
        client.payment.refund.return_value = {
            "id": "rfnd_NcXm4r7xyz",
            "entity": "refund",
            "amount": 64950,
            "payment_id": "pay_NcXl8d0qabc",
            "status": "processed",
        }
        client_class.return_value = client
        client.client_class = client_class
        yield client
