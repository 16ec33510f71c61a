"""Tests for EnergyRecord parsing."""

import dataclasses

import pytest

from energy_dashboard.models import EnergyRecord, parse_quantity, records_from_wire, round_half_up


class TestParseQuantity:
    def test_numeric_string(self):
        assert parse_quantity("123.45") == 123.45

    def test_number(self):
        assert parse_quantity(7) == 7.0

    def test_missing(self):
        assert parse_quantity(None) == 0.0

    def test_malformed(self):
        assert parse_quantity("abc") == 0.0
        assert parse_quantity("") == 0.0
        assert parse_quantity([1]) == 0.0

    def test_nan_and_infinity_read_as_zero(self):
        assert parse_quantity("NaN") == 0.0
        assert parse_quantity("inf") == 0.0
        assert parse_quantity("-Infinity") == 0.0


class TestRoundHalfUp:
    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3.0
        assert round_half_up(12.5) == 13.0
        assert round_half_up(0.25, 1) == 0.3

    def test_negative_halves_round_away_from_zero(self):
        assert round_half_up(-2.5) == -3.0

    def test_non_half_values(self):
        assert round_half_up(0.2205128, 3) == 0.221
        assert round_half_up(812.456, 2) == 812.46

    def test_non_finite_reads_as_zero(self):
        assert round_half_up(float("inf"), 2) == 0.0
        assert round_half_up(float("nan")) == 0.0


class TestFromWire:
    def test_full_record(self):
        rec = EnergyRecord.from_wire({
            "from_date": "2025-01-01T00:00:00Z",
            "to_date": "2025-01-31T00:00:00Z",
            "total_consumption": "812.5",
            "total_charges": "190.20",
            "interval_length": 31,
        })
        assert rec.from_date == "2025-01-01T00:00:00Z"
        assert rec.consumption == 812.5
        assert rec.charges == 190.20
        assert rec.interval_length == 31

    def test_missing_fields(self):
        rec = EnergyRecord.from_wire({"from_date": "2025-01-01"})
        assert rec.to_date is None
        assert rec.consumption == 0.0
        assert rec.charges == 0.0
        assert rec.interval_length is None

    def test_hourly_fallback_keys(self):
        rec = EnergyRecord.from_wire({
            "from_date": "2025-05-10T13:00:00Z",
            "consumption": "0.25",
            "charges": "0.07",
        })
        assert rec.consumption == 0.25
        assert rec.charges == 0.07

    def test_primary_key_wins_over_fallback(self):
        rec = EnergyRecord.from_wire({
            "from_date": "2025-05-10",
            "total_consumption": "1.5",
            "consumption": "9.9",
        })
        assert rec.consumption == 1.5

    def test_numeric_values_kept_as_text(self):
        rec = EnergyRecord.from_wire({"from_date": "2025-05-10", "total_consumption": 12})
        assert rec.total_consumption == "12"

    def test_interval_length_from_string(self):
        assert EnergyRecord.from_wire({"interval_length": "30"}).interval_length == 30
        assert EnergyRecord.from_wire({"interval_length": "n/a"}).interval_length is None

    def test_records_are_frozen(self):
        rec = EnergyRecord(from_date="2025-01-01", total_consumption="1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            rec.total_consumption = "2"


class TestRecordsFromWire:
    def test_preserves_order_and_duplicates(self):
        items = [
            {"from_date": "2025-02-01", "total_consumption": "2"},
            {"from_date": "2025-01-01", "total_consumption": "1"},
            {"from_date": "2025-02-01", "total_consumption": "2"},
        ]
        records = records_from_wire(items)
        assert [r.from_date for r in records] == ["2025-02-01", "2025-01-01", "2025-02-01"]

    def test_skips_non_objects(self):
        records = records_from_wire([{"from_date": "2025-01-01"}, "junk", None])
        assert len(records) == 1

    def test_generic_value_access(self):
        rec = EnergyRecord(from_date="2025-01-01", interval_length=30)
        assert rec.value("interval_length") == 30
        assert rec.value("no_such_field") is None
