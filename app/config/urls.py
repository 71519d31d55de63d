"""
URL configuration for the therapy booking payments backend.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin (coupon maintenance, payment lookup)
    /health/                       - Health check endpoint (load balancers, uptime probes)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/payments/              - Payment endpoints
        orders/                    - Create a gateway order (POST)
        verify/                    - Verify a Razorpay payment signature (POST)
        refunds/quote/             - Compute the refund due for a cancellation (POST)
        refunds/                   - Refund a paid payment (POST)
        link-booking/              - Attach a paid payment to a booking (POST)
        gateways/                  - Gateway configuration status (GET)
        webhooks/stripe/           - Stripe webhook endpoint (POST)
    /api/v1/coupons/               - Coupon endpoints
        validate/                  - Preview a coupon discount (POST)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("payments/", include("payments.urls")),
    path("coupons/", include("coupons.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Therapy Booking Admin"
admin.site.site_title = "Therapy Booking Admin"
admin.site.index_title = "Coupons, bookings and payments"
