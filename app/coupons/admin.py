"""
Coupon admin configuration.

Staff create and retire coupons here. used_count is read-only: it is
maintained by payment confirmation.
"""

from django.contrib import admin

from coupons.models import Coupon


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = [
        "code",
        "discount_type",
        "discount_value",
        "min_amount",
        "used_count",
        "max_uses",
        "remaining",
        "valid_until",
        "is_active",
    ]
    list_filter = ["is_active", "discount_type"]
    search_fields = ["code", "description"]
    readonly_fields = ["id", "used_count", "created_at", "updated_at"]
    ordering = ["-created_at"]
    actions = ["deactivate"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "code", "description", "is_active"),
            },
        ),
        (
            "Discount",
            {
                "fields": ("discount_type", "discount_value", "min_amount"),
            },
        ),
        (
            "Limits",
            {
                "fields": ("valid_from", "valid_until", "max_uses", "used_count"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    @admin.display(description="Remaining")
    def remaining(self, obj: Coupon) -> str:
        uses = obj.uses_remaining
        return "Unlimited" if uses is None else str(uses)

    @admin.action(description="Deactivate selected coupons")
    def deactivate(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f"Deactivated {updated} coupon(s).")
