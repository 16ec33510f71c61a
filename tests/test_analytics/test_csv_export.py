"""Tests for the monthly CSV export."""

from datetime import date

from energy_dashboard.analytics.csv_export import CSV_HEADERS, export_filename, export_monthly_csv
from energy_dashboard.analytics.selection import SelectionState, sort_by_consumption
from energy_dashboard.analytics.view_model import table_records
from energy_dashboard.models import EnergyRecord


def _rec(from_date, consumption, charges, interval_length=None):
    return EnergyRecord(
        from_date=from_date,
        total_consumption=consumption,
        total_charges=charges,
        interval_length=interval_length,
    )


class TestExportMonthlyCsv:
    def test_header_only(self):
        assert export_monthly_csv([]) == ",".join(CSV_HEADERS) + "\n"

    def test_header_text(self):
        assert CSV_HEADERS == ["Month", "Consumption (kWh)", "Total Charges", "Days Billed", "Cost per kWh"]

    def test_row_formatting(self):
        text = export_monthly_csv([_rec("2025-01-01T00:00:00-08:00", "812.456", "190.2", 31)])
        lines = text.splitlines()
        assert lines[1] == "2025-01-01,812.46,190.20,31,0.234"

    def test_missing_values(self):
        text = export_monthly_csv([_rec(None, "bad", None)])
        assert text.splitlines()[1] == ",0.00,0.00,,0.000"

    def test_uses_sorted_unpaginated_order(self):
        monthly = [_rec(f"2025-{m:02d}-01", str(c), "1") for m, c in [(1, 5), (2, 50), (3, 20)]]
        selection = sort_by_consumption(SelectionState(page_size=1, page=1))
        lines = export_monthly_csv(table_records(monthly, selection)).splitlines()
        assert [line.split(",")[0] for line in lines[1:]] == ["2025-02-01", "2025-03-01", "2025-01-01"]


class TestExportFilename:
    def test_filename(self):
        assert export_filename(date(2025, 5, 12)) == "monthly-data-2025-05-12.csv"
