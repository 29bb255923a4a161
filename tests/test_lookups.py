"""Tests for lookup tables and destination advisories."""
from trip_engine.services.advisories import (
    AdviceLevel,
    destination_image,
    emergency_contacts,
    flight_booking_advice,
    is_peak_season,
)
from trip_engine.services.lookups import LookupTables, get_lookups


class TestLookupTables:
    """Test most-specific-key-wins matching."""

    def test_longest_key_wins(self):
        tables = LookupTables({"images": {"bali": "bali.jpg", "bali nusa dua": "nusa-dua.jpg"}})

        assert tables.resolve("images", "Bali Nusa Dua resort") == "nusa-dua.jpg"
        assert tables.resolve("images", "Ubud, Bali") == "bali.jpg"

    def test_default_entry(self):
        tables = LookupTables({"images": {"bali": "bali.jpg", "default": "any.jpg"}})

        assert tables.resolve("images", "Reykjavik") == "any.jpg"

    def test_no_match_without_default(self):
        tables = LookupTables({"images": {"bali": "bali.jpg"}})

        assert tables.resolve("images", "Reykjavik") is None
        assert tables.resolve("images", "Reykjavik", default="x") == "x"

    def test_whitespace_insensitive_match(self):
        tables = LookupTables({"images": {"newyork": "ny.jpg"}})

        assert tables.resolve("images", "New York") == "ny.jpg"

    def test_default_key_never_matches_query(self):
        tables = LookupTables({"images": {"default": "any.jpg"}})

        assert tables.match_key("images", "default city") is None

    def test_missing_table(self):
        tables = LookupTables()

        assert tables.table("climate") == {}
        assert tables.entries("gazetteer") == []
        assert tables.resolve("climate", "Dubai") is None

    def test_packaged_tables_load(self):
        tables = get_lookups()

        assert "singapore" in tables.entries("gazetteer")
        assert tables.table("emergency_contacts")


class TestAdvisories:
    """Test booking advice and reference info."""

    def test_peak_season(self):
        tables = LookupTables({"peak_seasons": {"dubai": [12, 1, 2]}})

        assert is_peak_season("Dubai", 12, tables) is True
        assert is_peak_season("Dubai", 7, tables) is False
        assert is_peak_season("Oslo", 12, tables) is False

    def test_flight_advice_windows(self):
        assert flight_booking_advice(120, False).title == "Too Early"
        assert flight_booking_advice(75, False).level == AdviceLevel.GOOD
        assert flight_booking_advice(45, False).title == "Book Soon"
        assert flight_booking_advice(45, True).title == "Book Now!"
        assert flight_booking_advice(10, False).level == AdviceLevel.URGENT

    def test_flight_advice_boundaries(self):
        assert flight_booking_advice(90, False).level == AdviceLevel.GOOD
        assert flight_booking_advice(60, False).level == AdviceLevel.SOON
        assert flight_booking_advice(30, True).level == AdviceLevel.URGENT

    def test_emergency_contacts(self):
        tables = LookupTables({"emergency_contacts": {"thailand": {"police": 191, "ambulance": "1669"}}})

        contacts = emergency_contacts("Thailand", tables)

        assert contacts.police == "191"
        assert contacts.ambulance == "1669"
        assert contacts.embassy == "Nearest Indian Embassy"

    def test_emergency_contacts_unknown_country(self):
        contacts = emergency_contacts("Narnia", LookupTables())

        assert contacts.police == "112"

    def test_destination_image(self):
        tables = LookupTables({"destination_images": {"dubai": "dubai.jpg", "default": "bali.jpg"}})

        assert destination_image("Dubai Marina", tables) == "dubai.jpg"
        assert destination_image("Lima", tables) == "bali.jpg"
