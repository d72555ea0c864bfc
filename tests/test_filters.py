"""Tests for availability parsing and date-window filtering."""

from datetime import date, datetime

from core.filters import filter_available, is_available, parse_periods, parse_query_date, parse_short_date
from core.models import AvailabilityPeriod
from tests.conftest import CENTER, make_item

OCTOBER = "Disponibil: 01/10/25 : 15/10/25"


class TestParsePeriods:
    """Tests for parse_periods."""

    def test_single_period(self):
        assert parse_periods(OCTOBER) == [AvailabilityPeriod(date(2025, 10, 1), date(2025, 10, 15))]

    def test_multiple_periods(self):
        periods = parse_periods(OCTOBER + "; Disponibil: 01/12/25 : 31/12/25")
        assert [p.start for p in periods] == [date(2025, 10, 1), date(2025, 12, 1)]

    def test_spacing_variations(self):
        periods = parse_periods("Disponibil:01/10/25:15/10/25 ;Disponibil:  02/11/25  :  03/11/25")
        assert len(periods) == 2

    def test_invalid_tokens_ignored(self):
        """Non-matching tokens and impossible dates are skipped, the rest still parse."""
        text = "Ocupat; Disponibil: 31/02/25 : 10/03/25; Disponibil: 1/10/25 : 15/10/25; " + OCTOBER
        assert parse_periods(text) == [AvailabilityPeriod(date(2025, 10, 1), date(2025, 10, 15))]

    def test_empty(self):
        assert parse_periods(None) == []
        assert parse_periods("") == []
        assert parse_periods("Ocupat") == []

    def test_short_date_century(self):
        assert parse_short_date("05/01/30") == date(2030, 1, 5)


class TestFilterAvailable:
    """Tests for filter_available."""

    def test_overlapping_window_passes(self):
        item = make_item("A", CENTER, periods=OCTOBER)
        assert filter_available([item], date(2025, 10, 10), date(2025, 10, 20)) == [item]

    def test_window_after_period_fails(self):
        item = make_item("A", CENTER, periods=OCTOBER)
        assert filter_available([item], date(2025, 10, 16), date(2025, 10, 20)) == []

    def test_closed_interval_edges(self):
        """Touching on a single day counts as overlap."""
        item = make_item("A", CENTER, periods=OCTOBER)
        assert is_available(item, date(2025, 10, 15), date(2025, 10, 30))
        assert is_available(item, date(2025, 9, 1), date(2025, 10, 1))
        assert not is_available(item, date(2025, 9, 1), date(2025, 9, 30))

    def test_any_period_matches(self):
        item = make_item("A", CENTER, periods=OCTOBER + "; Disponibil: 01/12/25 : 31/12/25")
        assert is_available(item, date(2025, 12, 24), date(2025, 12, 26))

    def test_missing_bound_returns_nothing(self):
        item = make_item("A", CENTER, periods=OCTOBER)
        assert filter_available([item], None, date(2025, 10, 20)) == []
        assert filter_available([item], date(2025, 10, 10), None) == []

    def test_items_without_periods_excluded(self):
        items = [make_item("A", CENTER), make_item("B", CENTER, periods="Ocupat")]
        assert filter_available(items, date(2025, 1, 1), date(2025, 12, 31)) == []

    def test_order_preserved(self):
        items = [make_item(n, CENTER, periods=OCTOBER) for n in ("C", "A", "B")]
        result = filter_available(items, date(2025, 10, 1), date(2025, 10, 2))
        assert [i.name for i in result] == ["C", "A", "B"]


class TestParseQueryDate:
    """Tests for parse_query_date."""

    def test_formats(self):
        assert parse_query_date(date(2025, 10, 10)) == date(2025, 10, 10)
        assert parse_query_date(datetime(2025, 10, 10, 14, 30)) == date(2025, 10, 10)
        assert parse_query_date("2025-10-10") == date(2025, 10, 10)
        assert parse_query_date("10/10/2025") == date(2025, 10, 10)

    def test_invalid(self):
        assert parse_query_date(None) is None
        assert parse_query_date("") is None
        assert parse_query_date("mâine") is None
