from lead_miner.models import BusinessContact, GroundingSource, Location
from lead_miner.utils import dedup_key, parse_rating, phone_digits, unique_sources


class TestDedupKey:
    def test_name_is_trimmed_and_lowercased(self):
        assert dedup_key("  Acme Dental ", "555-1234") == "acme dental_5551234"

    def test_phone_formatting_is_ignored(self):
        assert phone_digits("+55 (11) 5555-1234") == "551155551234"
        assert dedup_key("Acme", "(555) 1234") == dedup_key("ACME", "555.1234")

    def test_sentinel_phone_has_no_digits(self):
        assert BusinessContact(name="Acme", phone="N/A").dedup_key == "acme_"


class TestBusinessContact:
    def test_defaults(self):
        c = BusinessContact(name="Acme")
        assert (c.email, c.website, c.rating, c.type) == ("N/A", "N/A", "N/A", "GMN")

    def test_ids_are_unique_but_not_compared(self):
        a = BusinessContact(name="Acme", phone="1")
        b = BusinessContact(name="Acme", phone="1")
        assert a.id != b.id
        assert a == b

    def test_to_row_order(self):
        row = BusinessContact(name="Acme", phone="1").to_row()
        assert list(row) == ["name", "phone", "email", "address", "website", "rating", "type"]


class TestLocation:
    def test_from_strings(self):
        assert Location.from_values("-25.4", "-49.3") == Location(latitude=-25.4, longitude=-49.3)

    def test_missing_or_invalid_is_none(self):
        assert Location.from_values(None, "1") is None
        assert Location.from_values("", "") is None
        assert Location.from_values("abc", "1") is None
        assert Location.from_values("91", "0") is None


class TestUniqueSources:
    def test_first_occurrence_by_uri_wins(self):
        sources = [
            GroundingSource("First", "https://a"),
            GroundingSource("Second", "https://a"),
            GroundingSource("Maps", "#"),
        ]
        assert unique_sources(sources) == [GroundingSource("First", "https://a"), GroundingSource("Maps", "#")]


def test_parse_rating():
    assert parse_rating("4.5") == 4.5
    assert parse_rating("4,7 (120 reviews)") == 4.7
    assert parse_rating("N/A") is None
