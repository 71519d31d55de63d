"""
Session catalogue choices shared by bookings, pricing and payments.
"""

from django.db import models


class SessionType(models.TextChoices):
    """Who attends the therapy session."""

    INDIVIDUAL = "individual", "Individual"
    COUPLES = "couples", "Couples"
    FAMILY = "family", "Family"
    FREE = "free", "Free consultation"


class SessionFormat(models.TextChoices):
    """How the session is delivered."""

    CHAT = "chat", "Chat"
    AUDIO = "audio", "Audio"
    VIDEO = "video", "Video"
    CALL = "call", "Call"


class BookingStatus(models.TextChoices):
    """
    Booking lifecycle as reported by the scheduling flow.

    The payment core never changes a booking's status.
    """

    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    CANCELLED = "cancelled", "Cancelled"
    COMPLETED = "completed", "Completed"
