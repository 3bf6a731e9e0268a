"""Unit tests for location normalization and duplicate detection.

Pure function tests - no mocks needed.
"""

from datetime import datetime, timezone

import pytest

from src.core.location import find_duplicate, is_same_location, normalize_location
from src.core.subscription import Location


def _location(raw: str) -> Location:
    return Location(
        raw=raw,
        longitude=-1.5,
        latitude=53.8,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


class TestNormalizeLocation:
    """Tests for normalize_location() function."""

    def test_trims_and_lowercases(self):
        assert normalize_location("  Leeds  ") == "leeds"

    def test_collapses_internal_whitespace(self):
        assert normalize_location("London,   City\tof\nWestminster") == "london, city of westminster"

    def test_preserves_qualifiers(self):
        """Nothing after the place name is stripped."""
        assert normalize_location("London Apprentice, Cornwall") == "london apprentice, cornwall"

    @pytest.mark.parametrize("value", [None, "", 42, ["Leeds"]])
    def test_non_string_passes_through(self, value):
        assert normalize_location(value) == value

    @pytest.mark.parametrize("value", [
        "Leeds",
        "  York ",
        "London,  City of  Westminster",
        "ST. IVES, Cornwall",
        "   ",
    ])
    def test_idempotent(self, value):
        once = normalize_location(value)
        assert normalize_location(once) == once


class TestIsSameLocation:
    """Tests for is_same_location() function."""

    def test_reflexive(self):
        assert is_same_location("Leeds", "Leeds") is True

    def test_case_and_whitespace_insensitive(self):
        assert is_same_location("  LEEDS ", "leeds") is True
        assert is_same_location("Newcastle upon  Tyne", "newcastle UPON tyne") is True

    def test_symmetric(self):
        a, b = "London, City of Westminster", "london,  city of westminster"
        assert is_same_location(a, b) == is_same_location(b, a)

    def test_same_name_different_region(self):
        """Places sharing a prefix in different regions are distinct."""
        assert is_same_location(
            "London, City of Westminster",
            "London Apprentice, Cornwall",
        ) is False

    def test_different_places(self):
        assert is_same_location("Leeds", "York") is False


class TestFindDuplicate:
    """Tests for find_duplicate() function."""

    def test_finds_match(self):
        stored = [_location("Leeds"), _location("York")]

        result = find_duplicate(stored, " york ")

        assert result is stored[1]

    def test_no_match(self):
        assert find_duplicate([_location("Leeds")], "York") is None

    def test_empty(self):
        assert find_duplicate([], "York") is None
