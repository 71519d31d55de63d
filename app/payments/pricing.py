"""
Session pricing table.

Prices come from the THERAPY_PRICING setting, configured in major units
(rupees / dollars) per session type and format. The table is built once per
process, converted to minor units, and never mutated afterwards.

Usage:
    from payments.pricing import get_pricing_table

    entry = get_pricing_table().get("individual", "video", currency="INR")
    if entry is None:
        ...  # not offered
    entry.amount  # 129900
"""

from __future__ import annotations

import functools
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from types import MappingProxyType

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed
from django.dispatch import receiver

from bookings.choices import SessionFormat, SessionType

SUPPORTED_CURRENCIES = ("INR", "USD")


@dataclass(frozen=True)
class PriceEntry:
    """
    Price of one (session type, format) in one currency.

    Attributes:
        session_type: SessionType value
        session_format: SessionFormat value
        currency: ISO 4217 code, uppercase
        amount: Price in minor units (paise / cents)
        duration: Display label, e.g. "60 min"
        enabled: Whether the format is currently offered
    """

    session_type: str
    session_format: str
    currency: str
    amount: int
    duration: str = ""
    enabled: bool = True

    @property
    def is_free(self) -> bool:
        return self.amount == 0


def _to_minor_units(value, where: str) -> int:
    try:
        major = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ImproperlyConfigured(f"THERAPY_PRICING {where}: {value!r} is not a number") from e
    minor = major * 100
    if minor < 0 or minor != minor.to_integral_value():
        raise ImproperlyConfigured(
            f"THERAPY_PRICING {where}: {value!r} is not a non-negative whole minor unit"
        )
    return int(minor)


class PricingTable:
    """Immutable lookup of PriceEntry by (session type, format, currency)."""

    def __init__(self, entries: Iterable[PriceEntry]):
        self._entries = MappingProxyType(
            {(e.session_type, e.session_format, e.currency): e for e in entries}
        )

    @classmethod
    def from_config(cls, config: Mapping) -> PricingTable:
        """
        Build the table from the THERAPY_PRICING structure.

        Raises:
            ImproperlyConfigured: Unknown session type or format, or a
                price that is not a non-negative amount
        """
        entries = []
        for session_type, formats in config.items():
            if session_type not in SessionType.values:
                raise ImproperlyConfigured(f"THERAPY_PRICING: unknown session type {session_type!r}")
            for session_format, price in formats.items():
                if session_format not in SessionFormat.values:
                    raise ImproperlyConfigured(
                        f"THERAPY_PRICING: unknown format {session_format!r} for {session_type!r}"
                    )
                for currency in SUPPORTED_CURRENCIES:
                    key = currency.lower()
                    if key not in price:
                        continue
                    entries.append(
                        PriceEntry(
                            session_type=session_type,
                            session_format=session_format,
                            currency=currency,
                            amount=_to_minor_units(
                                price[key], f"{session_type}.{session_format}.{key}"
                            ),
                            duration=price.get("duration", ""),
                            enabled=bool(price.get("enabled", True)),
                        )
                    )
        return cls(entries)

    def get(
        self,
        session_type: str,
        session_format: str,
        currency: str = "INR",
    ) -> PriceEntry | None:
        """Return the offered price, or None for unknown or disabled pairs."""
        entry = self._entries.get((session_type, session_format, currency.upper()))
        if entry is None or not entry.enabled:
            return None
        return entry

    def __len__(self) -> int:
        return len(self._entries)


@functools.lru_cache(maxsize=1)
def get_pricing_table() -> PricingTable:
    """The process-wide pricing table, built on first use."""
    return PricingTable.from_config(settings.THERAPY_PRICING)


@receiver(setting_changed)
def _reset_pricing_table(sender, setting, **kwargs):
    if setting == "THERAPY_PRICING":
        get_pricing_table.cache_clear()
