"""
URL configuration for the payments app.

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.

Usage:
    # In config/urls.py
    api_v1_patterns = [
        path("payments/", include("payments.urls")),
    ]
"""

from django.urls import path

from payments.views import (
    CreateOrderView,
    GatewayStatusView,
    LinkBookingView,
    RefundQuoteView,
    RefundView,
    VerifyPaymentView,
)
from payments.webhooks.views import stripe_webhook

app_name = "payments"

urlpatterns = [
    path("orders/", CreateOrderView.as_view(), name="create_order"),
    path("verify/", VerifyPaymentView.as_view(), name="verify"),
    path("refunds/quote/", RefundQuoteView.as_view(), name="refund_quote"),
    path("refunds/", RefundView.as_view(), name="refund"),
    path("link-booking/", LinkBookingView.as_view(), name="link_booking"),
    path("gateways/", GatewayStatusView.as_view(), name="gateways"),
    # Webhook endpoints
    path("webhooks/stripe/", stripe_webhook, name="stripe_webhook"),
]
