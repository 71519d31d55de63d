"""
Booking model.

Bookings are written by the scheduling flow after the calendar provider
confirms a slot. The scheduled time is stored as the local wall-clock string
the customer picked ("4:30 PM") in the practice's single timezone; the
refund policy converts it to an absolute instant with a fixed UTC offset.
"""

from __future__ import annotations

from django.db import models

from bookings.choices import BookingStatus, SessionFormat, SessionType
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class Booking(UUIDPrimaryKeyMixin, BaseModel):
    """
    A scheduled therapy session.

    Fields:
        external_uid: Booking identifier issued by the calendar provider
        session_type / session_format: What was booked
        scheduled_date: Calendar date of the session (practice timezone)
        scheduled_time: Wall-clock start time, "H:MM AM/PM"
        timezone: Display label of the practice timezone
        status: Lifecycle status maintained by the scheduling flow
        customer_name / customer_email / customer_phone: Contact details
    """

    external_uid = models.CharField(
        max_length=100,
        blank=True,
        db_index=True,
        help_text="Booking identifier issued by the calendar provider",
    )
    session_type = models.CharField(
        max_length=20,
        choices=SessionType.choices,
    )
    session_format = models.CharField(
        max_length=20,
        choices=SessionFormat.choices,
    )
    scheduled_date = models.DateField(
        null=True,
        blank=True,
        help_text="Session date in the practice timezone",
    )
    scheduled_time = models.CharField(
        max_length=20,
        blank=True,
        help_text='Session start as local wall-clock time, e.g. "4:30 PM"',
    )
    timezone = models.CharField(
        max_length=64,
        default="Asia/Kolkata",
    )
    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.CONFIRMED,
        db_index=True,
    )
    customer_name = models.CharField(max_length=200, blank=True)
    customer_email = models.EmailField(blank=True)
    customer_phone = models.CharField(max_length=30, blank=True)

    class Meta:
        verbose_name = "booking"
        verbose_name_plural = "bookings"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        when = f"{self.scheduled_date} {self.scheduled_time}".strip()
        return f"Booking {self.id} ({self.session_type}/{self.session_format}) {when}"
