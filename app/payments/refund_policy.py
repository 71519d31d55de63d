"""
Cancellation refund policy.

Pure functions of (paid amount, scheduled date and time, now). Nothing here
touches the database or a gateway.

The practice runs in a single timezone with a fixed UTC offset
(PRACTICE_UTC_OFFSET_MINUTES, 330 for IST). Scheduled times are wall-clock
strings in that timezone such as "4:30 PM"; 24-hour strings such as "16:30"
are accepted too.

Policy:
    session start >= REFUND_FULL_WINDOW_HOURS ahead  -> full refund
    otherwise (including sessions already past)      -> paid // 2
    unknown or unparseable start time                -> full refund
    refund of 0                                      -> rejected
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass

from django.conf import settings
from django.utils import timezone

TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)?$", re.IGNORECASE)

TIER_FULL = "full"
TIER_PARTIAL = "partial"

MSG_NO_REFUND = "No refund amount (session may have passed)"


@dataclass(frozen=True)
class RefundQuote:
    """
    A refund the policy allows.

    session_start and hours_until_session are None when the start time is
    unknown.
    """

    refund_amount: int
    paid_amount: int
    tier: str
    session_start: datetime.datetime | None = None
    hours_until_session: float | None = None

    @property
    def is_full(self) -> bool:
        return self.refund_amount == self.paid_amount


@dataclass(frozen=True)
class RefundRejected:
    reason: str
    paid_amount: int
    session_start: datetime.datetime | None = None


def parse_time_to_minutes(value: str | None) -> int | None:
    """
    Minutes since midnight for "H:MM AM/PM" or "HH:MM", None if unparseable.

    >>> parse_time_to_minutes("12:15 AM")
    15
    >>> parse_time_to_minutes("4:30 pm")
    990
    """
    if not value:
        return None
    match = TIME_PATTERN.match(value.strip())
    if not match:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    meridiem = (match.group(3) or "").upper()
    if minutes > 59:
        return None

    if meridiem:
        if not 1 <= hours <= 12:
            return None
        hours %= 12
        if meridiem == "PM":
            hours += 12
    elif hours > 23:
        return None

    return hours * 60 + minutes


def session_start_utc(
    scheduled_date: datetime.date | None,
    scheduled_time: str | None,
) -> datetime.datetime | None:
    """Absolute start instant of a session, or None when it cannot be known."""
    if scheduled_date is None:
        return None
    minutes = parse_time_to_minutes(scheduled_time)
    if minutes is None:
        return None

    midnight_utc = datetime.datetime.combine(
        scheduled_date, datetime.time.min, tzinfo=datetime.timezone.utc
    )
    return midnight_utc + datetime.timedelta(
        minutes=minutes - settings.PRACTICE_UTC_OFFSET_MINUTES
    )


def calculate_refund(
    paid_amount: int,
    scheduled_date: datetime.date | None,
    scheduled_time: str | None,
    now: datetime.datetime | None = None,
) -> RefundQuote | RefundRejected:
    """
    Apply the cancellation policy to a paid amount.

    Args:
        paid_amount: Amount actually paid, minor units
        scheduled_date: Session date in the practice timezone
        scheduled_time: Session wall-clock time in the practice timezone
        now: Defaults to the current time

    Returns:
        RefundQuote, or RefundRejected when nothing would be refunded
    """
    now = now or timezone.now()
    start = session_start_utc(scheduled_date, scheduled_time)

    if start is None:
        quote = RefundQuote(
            refund_amount=paid_amount,
            paid_amount=paid_amount,
            tier=TIER_FULL,
        )
    else:
        hours_until = (start - now).total_seconds() / 3600
        if hours_until >= settings.REFUND_FULL_WINDOW_HOURS:
            refund_amount, tier = paid_amount, TIER_FULL
        else:
            refund_amount, tier = paid_amount // 2, TIER_PARTIAL
        quote = RefundQuote(
            refund_amount=refund_amount,
            paid_amount=paid_amount,
            tier=tier,
            session_start=start,
            hours_until_session=round(hours_until, 2),
        )

    if quote.refund_amount <= 0:
        return RefundRejected(
            reason=MSG_NO_REFUND,
            paid_amount=paid_amount,
            session_start=quote.session_start,
        )
    return quote
