"""Derived metrics computed per record against the whole monthly collection.

Ratios with a zero or negative denominator yield 0 instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from energy_dashboard.analytics.aggregator import sum_field
from energy_dashboard.models import EnergyRecord, round_half_up


@dataclass(frozen=True)
class YearToDateTotals:
    """Totals over every month the data source returned."""

    consumption: float
    charges: float
    avg_cost_per_unit: float


def cost_per_unit(consumption: float, charges: float) -> float:
    """Charges per kWh; 0 when there is no positive consumption."""
    if consumption > 0:
        ratio = charges / consumption
        return ratio if math.isfinite(ratio) else 0.0
    return 0.0


def peak_consumption(records: list[EnergyRecord]) -> float:
    """Highest consumption in the collection (0.0 when empty)."""
    return max((r.consumption for r in records), default=0.0)


def trend_percentage(consumption: float, all_records: list[EnergyRecord]) -> int:
    """Consumption as a whole percentage of the collection peak, in [0, 100].

    The peak has a floor of 1 so an all-zero collection cannot divide by
    zero. *all_records* should be the unfiltered collection.
    """
    peak = max(peak_consumption(all_records), 1.0)
    ratio = consumption / peak * 100
    if not math.isfinite(ratio):
        return 100 if ratio > 0 else 0
    pct = int(round_half_up(ratio))
    return max(0, min(100, pct))


def peak_interval(records: list[EnergyRecord]) -> EnergyRecord | None:
    """Record with the highest consumption; the first one wins a tie."""
    best: EnergyRecord | None = None
    for record in records:
        if best is None or record.consumption > best.consumption:
            best = record
    return best


def highest_consumption_record(monthly_records: list[EnergyRecord]) -> EnergyRecord | None:
    """Highest-consumption month over the whole monthly collection.

    Callers pass the full collection, not the year-filtered view, so the
    summary card does not move when the year selector changes.
    """
    return peak_interval(monthly_records)


def year_to_date_totals(monthly_records: list[EnergyRecord]) -> YearToDateTotals:
    """Sum consumption and charges over all returned months."""
    consumption = sum_field(monthly_records, "total_consumption")
    charges = sum_field(monthly_records, "total_charges")
    return YearToDateTotals(
        consumption=consumption,
        charges=charges,
        avg_cost_per_unit=cost_per_unit(consumption, charges),
    )
