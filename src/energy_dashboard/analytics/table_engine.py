"""Filter, sort and paginate energy records for the table and charts.

Pure functions over a record collection plus the current selection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from energy_dashboard.analytics.aggregator import dated_records
from energy_dashboard.analytics.dates import try_normalize_date
from energy_dashboard.models import NUMERIC_FIELDS, EnergyRecord

ASC = "asc"
DESC = "desc"

PAGE_SIZE_OPTIONS = (5, 8, 12)


@dataclass(frozen=True)
class SortConfig:
    """Active table sort."""

    key: str = "from_date"
    direction: str = DESC  # "asc" or "desc"


@dataclass(frozen=True)
class Page:
    """One page of a sorted collection."""

    items: list[EnergyRecord] = field(default_factory=list)
    page: int = 1
    page_size: int = 8
    total_pages: int = 1
    total_items: int = 0


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def filter_by_year(records: list[EnergyRecord], year: int | None) -> list[EnergyRecord]:
    """Keep records dated in *year*; ``None`` means all years."""
    if year is None:
        return list(records)
    return [r for d, r in dated_records(records) if d.year == year]


def filter_by_date_range(
    records: list[EnergyRecord],
    start: date | None,
    end: date | None,
) -> list[EnergyRecord]:
    """Keep records whose day lies in ``[start, end]``, oldest first.

    Either bound may be None for an open interval. Undated records are dropped.
    """
    kept = [
        (d, r)
        for d, r in dated_records(records)
        if (start is None or d >= start) and (end is None or d <= end)
    ]
    kept.sort(key=lambda p: p[0])
    return [r for _, r in kept]


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


def _sort_value(record: EnergyRecord, key: str) -> Any:
    if key == "from_date":
        return try_normalize_date(record.from_date)
    if key in NUMERIC_FIELDS:
        return record.numeric(key)
    raw = record.value(key)
    if raw is None or raw == "":
        return None
    # Numbers before text so mixed columns still compare
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return (0, raw, "")
    return (1, 0, str(raw))


def sort_records(
    records: list[EnergyRecord],
    key: str | None,
    direction: str = ASC,
) -> list[EnergyRecord]:
    """Stable sort by *key*; records without a value go last either way."""
    if not key:
        return list(records)

    present: list[tuple[Any, EnergyRecord]] = []
    missing: list[EnergyRecord] = []
    for record in records:
        value = _sort_value(record, key)
        if value is None:
            missing.append(record)
        else:
            present.append((value, record))

    present.sort(key=lambda p: p[0], reverse=direction == DESC)
    return [r for _, r in present] + missing


def toggle_sort(config: SortConfig, key: str) -> SortConfig:
    """New key sorts ascending; the active key flips direction."""
    if config.key == key:
        return SortConfig(key=key, direction=ASC if config.direction == DESC else DESC)
    return SortConfig(key=key, direction=ASC)


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


def total_pages(total_items: int, page_size: int) -> int:
    """Number of pages, never less than 1."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: int, pages: int) -> int:
    return max(1, min(pages, page))


def paginate(records: list[EnergyRecord], page: int, page_size: int) -> Page:
    """Slice one 1-indexed page; out-of-range pages are clamped."""
    pages = total_pages(len(records), page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size
    return Page(
        items=list(records[start:start + page_size]),
        page=current,
        page_size=page_size,
        total_pages=pages,
        total_items=len(records),
    )
