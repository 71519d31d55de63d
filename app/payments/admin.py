"""
Payment admin configuration.

Payments are read-mostly here: state changes go through the service layer
(verification, refunds), never through admin edits.
"""

from django.contrib import admin

from coupons.services import format_amount
from payments.models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin configuration for Payment.

    Provides visibility into orders, confirmations and refunds.
    """

    list_display = [
        "gateway_order_id",
        "gateway",
        "amount_display",
        "status",
        "session_type",
        "session_format",
        "coupon_code",
        "paid_at",
        "created_at",
    ]
    list_filter = ["status", "gateway", "currency", "session_type", "created_at"]
    search_fields = [
        "id",
        "gateway_order_id",
        "gateway_payment_id",
        "coupon_code",
        "booking__customer_email",
    ]
    readonly_fields = [
        "id",
        "gateway",
        "gateway_order_id",
        "gateway_payment_id",
        "gateway_signature",
        "amount",
        "base_amount",
        "discount_amount",
        "currency",
        "status",
        "coupon",
        "coupon_code",
        "session_type",
        "session_format",
        "paid_at",
        "refunded_at",
        "refund_amount",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["booking"]
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "gateway", "gateway_order_id", "status"),
            },
        ),
        (
            "Amount",
            {
                "fields": ("amount", "base_amount", "discount_amount", "currency"),
            },
        ),
        (
            "Order",
            {
                "fields": (
                    "session_type",
                    "session_format",
                    "coupon",
                    "coupon_code",
                    "booking",
                ),
            },
        ),
        (
            "Gateway Confirmation",
            {
                "fields": ("gateway_payment_id", "gateway_signature", "paid_at"),
            },
        ),
        (
            "Refund",
            {
                "fields": ("refund_amount", "refunded_at"),
            },
        ),
        (
            "Metadata",
            {
                "fields": ("metadata",),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    @admin.display(description="Amount")
    def amount_display(self, obj: Payment) -> str:
        return f"{format_amount(obj.amount, obj.currency)} {obj.currency}"

    def has_delete_permission(self, request, obj=None) -> bool:
        """Payments are never deleted."""
        return False

    def has_add_permission(self, request) -> bool:
        """Payments are created by the order flow only."""
        return False
