"""
Payments app configuration.

This app provides the payment core:
- Session pricing table
- Razorpay and Stripe gateway adapters
- Order creation, payment verification and refunds
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"

    def ready(self):
        # Registers the setting_changed receiver that resets the pricing cache
        from payments import pricing  # noqa: F401
