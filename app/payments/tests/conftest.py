"""
Pytest fixtures for payment tests.

Provides payments in each lifecycle state, the bookings and coupons they
reference, and gateway settings.

Usage:
    def test_refund(paid_payment, booking):
        ...
"""

import datetime

import pytest
from rest_framework.test import APIClient

from bookings.tests.factories import BookingFactory
from coupons.tests.factories import CouponFactory
from payments.pricing import get_pricing_table
from payments.tests.factories import PaymentFactory


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def gateway_keys(settings):
    """Configure both gateways with test credentials."""
    settings.RAZORPAY_KEY_ID = "rzp_test_key"
    settings.RAZORPAY_KEY_SECRET = "rzp_test_secret"
    settings.STRIPE_SECRET_KEY = "sk_test_123"
    settings.STRIPE_WEBHOOK_SECRET = "whsec_test"
    return settings


@pytest.fixture(autouse=True)
def fresh_pricing_table():
    """Rebuild the pricing table around each test."""
    get_pricing_table.cache_clear()
    yield
    get_pricing_table.cache_clear()


# =============================================================================
# Booking and Coupon Fixtures
# =============================================================================


@pytest.fixture
def booking(db):
    """Individual video session at 4:30 PM IST on 15 June 2026 (11:00 UTC)."""
    return BookingFactory(
        scheduled_date=datetime.date(2026, 6, 15),
        scheduled_time="4:30 PM",
    )


@pytest.fixture
def coupon(db):
    """Active 10% coupon."""
    return CouponFactory(code="WELCOME10")


# =============================================================================
# Payment State Fixtures
# =============================================================================


@pytest.fixture
def pending_payment(db):
    """Pending Razorpay order for ₹1299."""
    return PaymentFactory(gateway_order_id="order_NcXkQ2m1abc")


@pytest.fixture
def paid_payment(db, booking):
    """Paid Razorpay payment linked to the booking fixture."""
    return PaymentFactory(
        paid=True,
        gateway_order_id="order_NcXkQ2m1paid",
        gateway_payment_id="pay_NcXl8d0qabc",
        booking=booking,
    )


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client; the payment endpoints are public."""
    return APIClient()
