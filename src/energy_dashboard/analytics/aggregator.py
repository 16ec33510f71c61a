"""Aggregations over energy record collections.

Pure functions: sums, per-record averages, month-over-month change, and the
distinct years/months that drive the dashboard selectors. Malformed numbers
count as zero; records without a usable date are skipped by every
date-keyed aggregate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

from energy_dashboard.analytics.dates import month_label, try_normalize_date
from energy_dashboard.models import EnergyRecord, round_half_up


@dataclass(frozen=True)
class MonthOption:
    """One entry of the month selector."""

    year: int
    month: int  # 1-12
    label: str  # "May 2025"
    value: str  # "2025-5"


def sum_field(records: list[EnergyRecord], field: str) -> float:
    """Total of a numeric field; missing or malformed values add 0.0."""
    total = sum((r.numeric(field) for r in records), 0.0)
    return total if math.isfinite(total) else 0.0


def average_per_record(records: list[EnergyRecord], field: str) -> float:
    """Mean of a numeric field per record (0.0 for an empty collection)."""
    if not records:
        return 0.0
    mean = sum_field(records, field) / len(records)
    return mean if math.isfinite(mean) else 0.0


def dated_records(records: list[EnergyRecord]) -> list[tuple[date, EnergyRecord]]:
    """Pair each record with its normalized date, dropping undated ones."""
    pairs = []
    for record in records:
        d = try_normalize_date(record.from_date)
        if d is not None:
            pairs.append((d, record))
    return pairs


def sort_by_date(records: list[EnergyRecord]) -> list[EnergyRecord]:
    """Dated records in ascending date order (stable for equal dates)."""
    pairs = dated_records(records)
    pairs.sort(key=lambda p: p[0])
    return [r for _, r in pairs]


def month_over_month_change(records: list[EnergyRecord]) -> float | None:
    """Percentage change in consumption between the two most recent records.

    Returns None when fewer than two dated records exist or the previous
    consumption is not positive. Halves round up, as in 0.25 -> 0.3.
    """
    ordered = sort_by_date(records)
    if len(ordered) < 2:
        return None
    last, prev = ordered[-1], ordered[-2]
    if prev.consumption <= 0:
        return None
    change = (last.consumption - prev.consumption) / prev.consumption * 100
    if not math.isfinite(change):
        return None
    return round_half_up(change, 1)


def latest_record(records: list[EnergyRecord]) -> EnergyRecord | None:
    ordered = sort_by_date(records)
    return ordered[-1] if ordered else None


def unique_years(records: list[EnergyRecord]) -> list[int]:
    """Distinct calendar years, most recent first."""
    return sorted({d.year for d, _ in dated_records(records)}, reverse=True)


def distinct_months(records: list[EnergyRecord]) -> list[MonthOption]:
    """Distinct (year, month) pairs of a daily collection, most recent first."""
    seen: dict[tuple[int, int], MonthOption] = {}
    for d, _ in dated_records(records):
        key = (d.year, d.month)
        if key not in seen:
            seen[key] = MonthOption(
                year=d.year,
                month=d.month,
                label=month_label(d),
                value=f"{d.year}-{d.month}",
            )
    return [seen[k] for k in sorted(seen, reverse=True)]
