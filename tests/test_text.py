"""Tests for header normalization and lenient number parsing."""

import math

from core.config import FIELD_ALIASES
from core.text import (
    is_blank,
    normalize_key,
    parse_coordinates,
    parse_loose_number,
    pick_field,
    text_or_none,
)


class TestNormalizeKey:
    """Tests for normalize_key."""

    def test_case_and_spaces(self):
        """Case and all whitespace are ignored."""
        assert normalize_key("Perioade  Disponibile") == "perioadedisponibile"
        assert normalize_key(" LAT ") == "lat"

    def test_diacritics_folded(self):
        """Romanian diacritics (comma and cedilla forms) fold to base letters."""
        assert normalize_key("Locație") == "locatie"
        assert normalize_key("Schiță") == "schita"
        assert normalize_key("Științe") == "stiinte"
        assert normalize_key("Şcoală") == "scoala"
        assert normalize_key("Ţară Îngustă") == "taraingusta"

    def test_none_and_numbers(self):
        assert normalize_key(None) == ""
        assert normalize_key(12) == "12"


class TestPickField:
    """Tests for pick_field."""

    def test_priority_order(self):
        """The first candidate present and non-empty wins."""
        row = {"Denumire": "Panou A", "name": "Panou B"}
        assert pick_field(row, ["name", "denumire"]) == "Panou B"
        assert pick_field(row, ["denumire", "name"]) == "Panou A"

    def test_skips_blank_values(self):
        """Blank values fall through to the next candidate."""
        row = {"Latitudine": "  ", "lat": "46.7"}
        assert pick_field(row, ["latitudine", "lat"]) == "46.7"

    def test_header_spelling_insensitive(self):
        row = {"Perioade disponibile ": "Disponibil: 01/10/25 : 15/10/25"}
        assert pick_field(row, FIELD_ALIASES["periods"]) == "Disponibil: 01/10/25 : 15/10/25"

    def test_missing_returns_none(self):
        assert pick_field({"foo": 1}, ["lat"]) is None
        assert pick_field({}, ["lat"]) is None
        assert pick_field({"lat": float("nan")}, ["lat"]) is None


class TestParseLooseNumber:
    """Tests for parse_loose_number."""

    def test_decimal_comma(self):
        assert parse_loose_number("46,770439") == 46.770439

    def test_whitespace_and_suffix(self):
        assert parse_loose_number(" 23.5914 °E ") == 23.5914
        assert parse_loose_number("- 12.5") == -12.5

    def test_numbers_pass_through(self):
        assert parse_loose_number(46.77) == 46.77
        assert parse_loose_number(7) == 7.0

    def test_unparsable_is_nan(self):
        """Bad input yields NaN, never an exception."""
        for raw in (None, "", "n/a", "abc", True):
            assert math.isnan(parse_loose_number(raw))


class TestParseCoordinates:
    """Tests for parse_coordinates."""

    def test_valid_pair(self):
        assert parse_coordinates("46,77", " 23.59 ") == (46.77, 23.59)
        assert parse_coordinates(-90, 180) == (-90.0, 180.0)

    def test_out_of_range_rejected(self):
        """Swapped pairs and latitude typos are treated as missing coordinates."""
        assert parse_coordinates("123.5", "23.59") is None
        assert parse_coordinates(46.77, 181) is None
        assert parse_coordinates(-90.5, 0) is None

    def test_missing_half(self):
        assert parse_coordinates("46.77", None) is None
        assert parse_coordinates("", "") is None


class TestHelpers:
    """Tests for is_blank and text_or_none."""

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("   ")
        assert is_blank(float("nan"))
        assert not is_blank(0)

    def test_text_or_none(self):
        assert text_or_none("  Cluj ") == "Cluj"
        assert text_or_none(1001.0) == "1001"
        assert text_or_none("") is None
