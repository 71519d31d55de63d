"""
Booking lookups used by the payment core.
"""

from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass

from bookings.models import Booking
from core.services import BaseService


@dataclass(frozen=True)
class ScheduledTime:
    """
    When a booked session starts, as recorded on the booking.

    Either part may be missing for bookings created before a slot was
    confirmed; the refund policy treats that as an unknown start time.
    """

    scheduled_date: datetime.date | None
    scheduled_time: str | None


class BookingService(BaseService):
    """Read-only access to bookings for payments and refunds."""

    @classmethod
    def get_booking(cls, booking_id: uuid.UUID | str) -> Booking | None:
        """Return the booking or None when it does not exist."""
        return Booking.objects.filter(pk=booking_id).first()

    @classmethod
    def find_scheduled_time(cls, booking_id: uuid.UUID | str) -> ScheduledTime | None:
        """
        Look up the scheduled date and time of a booking.

        Returns:
            ScheduledTime, or None when no booking has this id
        """
        row = (
            Booking.objects.filter(pk=booking_id)
            .values("scheduled_date", "scheduled_time")
            .first()
        )
        if row is None:
            cls.get_logger().info(
                "Booking not found for scheduled time lookup",
                extra={"booking_id": str(booking_id)},
            )
            return None

        return ScheduledTime(
            scheduled_date=row["scheduled_date"],
            scheduled_time=row["scheduled_time"] or None,
        )
