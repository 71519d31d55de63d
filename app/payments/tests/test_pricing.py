"""
Tests for the session pricing table.
"""

import pytest
from django.core.exceptions import ImproperlyConfigured

from payments.pricing import PriceEntry, PricingTable, get_pricing_table


class TestDefaultPricing:
    """Prices shipped in settings."""

    @pytest.mark.parametrize(
        "session_type,session_format,currency,amount",
        [
            ("individual", "chat", "INR", 49900),
            ("individual", "audio", "INR", 89900),
            ("individual", "video", "INR", 129900),
            ("couples", "audio", "INR", 149900),
            ("couples", "video", "INR", 199900),
            ("family", "audio", "INR", 179900),
            ("family", "video", "INR", 249900),
            ("individual", "video", "USD", 1600),
            ("family", "audio", "USD", 2200),
        ],
    )
    def test_known_prices(self, session_type, session_format, currency, amount):
        entry = get_pricing_table().get(session_type, session_format, currency)

        assert entry is not None
        assert entry.amount == amount

    def test_free_call_is_free(self):
        entry = get_pricing_table().get("free", "call")

        assert entry.amount == 0
        assert entry.is_free is True

    def test_disabled_format_not_offered(self):
        assert get_pricing_table().get("couples", "chat") is None
        assert get_pricing_table().get("family", "chat") is None

    def test_unknown_pair(self):
        assert get_pricing_table().get("individual", "call") is None
        assert get_pricing_table().get("group", "video") is None

    def test_currency_is_case_insensitive(self):
        assert get_pricing_table().get("individual", "video", "usd").amount == 1600


class TestPricingTableFromConfig:
    def test_converts_major_to_minor_units(self):
        table = PricingTable.from_config(
            {"individual": {"video": {"inr": "12.50", "usd": 16}}}
        )

        assert table.get("individual", "video", "INR").amount == 1250
        assert table.get("individual", "video", "USD").amount == 1600

    def test_missing_currency_is_skipped(self):
        table = PricingTable.from_config({"individual": {"video": {"inr": 1299}}})

        assert table.get("individual", "video", "USD") is None
        assert len(table) == 1

    def test_unknown_session_type(self):
        with pytest.raises(ImproperlyConfigured, match="unknown session type"):
            PricingTable.from_config({"group": {"video": {"inr": 100}}})

    def test_unknown_format(self):
        with pytest.raises(ImproperlyConfigured, match="unknown format"):
            PricingTable.from_config({"individual": {"hologram": {"inr": 100}}})

    def test_negative_price(self):
        with pytest.raises(ImproperlyConfigured):
            PricingTable.from_config({"individual": {"video": {"inr": -1}}})

    def test_fractional_minor_unit(self):
        with pytest.raises(ImproperlyConfigured):
            PricingTable.from_config({"individual": {"video": {"inr": "1.005"}}})

    def test_not_a_number(self):
        with pytest.raises(ImproperlyConfigured, match="is not a number"):
            PricingTable.from_config({"individual": {"video": {"inr": "free"}}})


class TestPricingTableImmutability:
    def test_entries_are_frozen(self):
        entry = get_pricing_table().get("individual", "video")

        with pytest.raises(AttributeError):
            entry.amount = 1

    def test_entries_mapping_is_read_only(self):
        table = PricingTable([PriceEntry("individual", "video", "INR", 129900)])

        with pytest.raises(TypeError):
            table._entries[("individual", "video", "INR")] = None

    def test_table_is_cached(self):
        assert get_pricing_table() is get_pricing_table()

    def test_setting_change_rebuilds_table(self, settings):
        before = get_pricing_table()

        settings.THERAPY_PRICING = {"individual": {"video": {"inr": 1000}}}

        after = get_pricing_table()
        assert after is not before
        assert after.get("individual", "video").amount == 100000
