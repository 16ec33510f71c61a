"""CSV export of the monthly table (sorted, not paginated)."""

from __future__ import annotations

import csv
from datetime import date
from io import StringIO

from energy_dashboard.analytics.dates import try_normalize_date
from energy_dashboard.analytics.derived_metrics import cost_per_unit
from energy_dashboard.models import EnergyRecord

CSV_HEADERS = ["Month", "Consumption (kWh)", "Total Charges", "Days Billed", "Cost per kWh"]


def csv_row(record: EnergyRecord) -> list[str]:
    d = try_normalize_date(record.from_date)
    consumption = record.consumption
    charges = record.charges
    days = record.interval_length
    return [
        d.isoformat() if d else "",
        f"{consumption:.2f}",
        f"{charges:.2f}",
        "" if days is None else str(days),
        f"{cost_per_unit(consumption, charges):.3f}",
    ]


def export_monthly_csv(records: list[EnergyRecord]) -> str:
    """Render *records* in the given order as CSV text."""
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in records:
        writer.writerow(csv_row(record))
    return output.getvalue()


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"monthly-data-{today.isoformat()}.csv"
