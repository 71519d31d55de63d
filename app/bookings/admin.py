"""
Booking admin configuration.

Bookings are created by the scheduling flow; the admin is for lookup and
support corrections of the scheduled slot.
"""

from django.contrib import admin

from bookings.models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "customer_name",
        "session_type",
        "session_format",
        "scheduled_date",
        "scheduled_time",
        "status",
        "created_at",
    ]
    list_filter = ["status", "session_type", "session_format", "scheduled_date"]
    search_fields = ["id", "external_uid", "customer_name", "customer_email"]
    readonly_fields = ["id", "external_uid", "created_at", "updated_at"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "external_uid", "status"),
            },
        ),
        (
            "Session",
            {
                "fields": (
                    "session_type",
                    "session_format",
                    "scheduled_date",
                    "scheduled_time",
                    "timezone",
                ),
            },
        ),
        (
            "Customer",
            {
                "fields": ("customer_name", "customer_email", "customer_phone"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )
