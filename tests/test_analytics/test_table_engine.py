"""Tests for filtering, sorting and pagination."""

from datetime import date

import pytest

from energy_dashboard.analytics.table_engine import (
    ASC,
    DESC,
    SortConfig,
    clamp_page,
    filter_by_date_range,
    filter_by_year,
    paginate,
    sort_records,
    toggle_sort,
    total_pages,
)
from energy_dashboard.models import EnergyRecord


def _rec(from_date, consumption="0", charges="0", interval_length=None, to_date=None):
    return EnergyRecord(
        from_date=from_date,
        to_date=to_date,
        total_consumption=consumption,
        total_charges=charges,
        interval_length=interval_length,
    )


def _days(start_day, end_day, newest_first=True):
    """Daily records for May 2025, newest first like the API returns them."""
    days = range(end_day, start_day - 1, -1) if newest_first else range(start_day, end_day + 1)
    return [_rec(f"2025-05-{d:02d}T00:00:00Z", str(d)) for d in days]


class TestFilterByYear:
    def test_keeps_selected_year(self):
        records = [_rec("2024-12-01"), _rec("2025-01-01"), _rec("2025-02-01")]
        assert [r.from_date for r in filter_by_year(records, 2025)] == ["2025-01-01", "2025-02-01"]

    def test_none_passes_through(self):
        records = [_rec("2024-12-01"), _rec("bad"), _rec("2025-01-01")]
        assert filter_by_year(records, None) == records

    def test_undated_excluded_when_filtering(self):
        assert filter_by_year([_rec("bad")], 2025) == []


class TestFilterByDateRange:
    def test_example_range_inclusive_ascending(self):
        result = filter_by_date_range(_days(1, 31), date(2025, 5, 10), date(2025, 5, 12))
        assert [r.total_consumption for r in result] == ["10", "11", "12"]

    def test_ascending_regardless_of_input_order(self):
        result = filter_by_date_range(_days(1, 5, newest_first=False), date(2025, 5, 2), date(2025, 5, 4))
        assert [r.total_consumption for r in result] == ["2", "3", "4"]

    def test_day_granularity_ignores_time(self):
        records = [_rec("2025-05-12T23:59:59-08:00", "1"), _rec("2025-05-13T00:00:00Z", "2")]
        result = filter_by_date_range(records, date(2025, 5, 10), date(2025, 5, 12))
        assert [r.total_consumption for r in result] == ["1"]

    def test_open_bounds(self):
        result = filter_by_date_range(_days(1, 5), None, date(2025, 5, 2))
        assert [r.total_consumption for r in result] == ["1", "2"]
        result = filter_by_date_range(_days(1, 5), date(2025, 5, 4), None)
        assert [r.total_consumption for r in result] == ["4", "5"]

    def test_inverted_range_is_empty(self):
        assert filter_by_date_range(_days(1, 5), date(2025, 5, 4), date(2025, 5, 2)) == []

    def test_undated_dropped(self):
        records = [_rec(None, "1"), _rec("2025-05-10", "2")]
        assert filter_by_date_range(records, None, None) == [records[1]]


class TestSortRecords:
    def test_by_date_desc(self):
        records = [_rec("2025-01-01"), _rec("2025-03-01"), _rec("2025-02-01")]
        result = sort_records(records, "from_date", DESC)
        assert [r.from_date for r in result] == ["2025-03-01", "2025-02-01", "2025-01-01"]

    def test_numeric_not_lexicographic(self):
        records = [_rec("2025-01-01", "9"), _rec("2025-02-01", "100"), _rec("2025-03-01", "25")]
        result = sort_records(records, "total_consumption", ASC)
        assert [r.total_consumption for r in result] == ["9", "25", "100"]

    def test_charges(self):
        records = [_rec("a", charges="5"), _rec("b", charges="1.5")]
        assert sort_records(records, "total_charges", ASC)[0].total_charges == "1.5"

    def test_stable_ties_both_directions(self):
        a = _rec("2025-01-01", "5")
        b = _rec("2025-02-01", "5")
        c = _rec("2025-03-01", "1")
        assert sort_records([a, b, c], "total_consumption", ASC) == [c, a, b]
        assert sort_records([a, b, c], "total_consumption", DESC) == [a, b, c]

    def test_nulls_last_both_directions(self):
        dated = [_rec("2025-01-01"), _rec("2025-02-01")]
        undated = _rec(None)
        for direction in (ASC, DESC):
            result = sort_records([undated] + dated, "from_date", direction)
            assert result[-1] is undated

    def test_generic_field(self):
        records = [
            _rec("2025-01-01", interval_length=31),
            _rec("2025-02-01", interval_length=None),
            _rec("2025-03-01", interval_length=28),
        ]
        result = sort_records(records, "interval_length", ASC)
        assert [r.interval_length for r in result] == [28, 31, None]
        result = sort_records(records, "interval_length", DESC)
        assert [r.interval_length for r in result] == [31, 28, None]

    def test_generic_text_field(self):
        records = [_rec("x", to_date="2025-02-28"), _rec("y", to_date="2025-01-31")]
        assert sort_records(records, "to_date", ASC)[0].to_date == "2025-01-31"

    def test_sorting_twice_is_idempotent(self):
        records = [_rec(f"2025-0{m}-01", str(c)) for m, c in [(1, 5), (2, 3), (3, 5), (4, 1), (5, 3)]]
        for key in ("from_date", "total_consumption"):
            for direction in (ASC, DESC):
                once = sort_records(records, key, direction)
                assert sort_records(once, key, direction) == once

    def test_no_key_returns_copy(self):
        records = [_rec("2025-02-01"), _rec("2025-01-01")]
        result = sort_records(records, None)
        assert result == records
        assert result is not records

    def test_input_not_mutated(self):
        records = [_rec("2025-02-01"), _rec("2025-01-01")]
        snapshot = list(records)
        sort_records(records, "from_date", ASC)
        assert records == snapshot


class TestToggleSort:
    def test_new_key_ascending(self):
        assert toggle_sort(SortConfig("from_date", DESC), "total_charges") == SortConfig("total_charges", ASC)

    def test_same_key_flips(self):
        config = SortConfig("total_consumption", ASC)
        config = toggle_sort(config, "total_consumption")
        assert config.direction == DESC
        config = toggle_sort(config, "total_consumption")
        assert config.direction == ASC


class TestPagination:
    def test_total_pages(self):
        assert total_pages(0, 8) == 1
        assert total_pages(8, 8) == 1
        assert total_pages(9, 8) == 2
        assert total_pages(24, 12) == 2

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            total_pages(10, 0)

    def test_clamp(self):
        assert clamp_page(0, 3) == 1
        assert clamp_page(5, 3) == 3
        assert clamp_page(2, 3) == 2

    def test_slice(self):
        records = [_rec(f"2025-01-{d:02d}") for d in range(1, 13)]
        page = paginate(records, 2, 5)
        assert page.items == records[5:10]
        assert page.total_pages == 3
        assert page.total_items == 12

    def test_pages_cover_sequence_exactly_once(self):
        records = [_rec(f"2025-01-{d:02d}") for d in range(1, 24)]
        for size in (1, 5, 8, 12, 23, 50):
            pages = total_pages(len(records), size)
            combined = []
            for n in range(1, pages + 1):
                combined.extend(paginate(records, n, size).items)
            assert combined == records

    def test_empty_collection_has_one_page(self):
        page = paginate([], 1, 8)
        assert page.items == []
        assert page.total_pages == 1

    def test_out_of_range_page_clamped(self):
        records = [_rec("2025-01-01")] * 3
        assert paginate(records, 9, 2).page == 2
