"""Dashboard selection state and its transitions.

The selection is a frozen value; every user action returns a new state
instead of mutating the old one, so view models can be rebuilt from
``(records, selection)`` alone.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

from energy_dashboard.analytics.aggregator import MonthOption, distinct_months, unique_years
from energy_dashboard.analytics.dates import month_bounds
from energy_dashboard.analytics.table_engine import DESC, SortConfig, clamp_page, toggle_sort
from energy_dashboard.models import EnergyRecord

DEFAULT_PAGE_SIZE = 8


@dataclass(frozen=True)
class DateRange:
    """Inclusive day range for the daily chart."""

    start: date | None
    end: date | None


@dataclass(frozen=True)
class SelectionState:
    """Everything the user has chosen on the dashboard."""

    selected_year: int | None = None  # None = all years
    selected_month: MonthOption | None = None
    date_range: DateRange | None = None  # None = no range filter
    sort: SortConfig = SortConfig()
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


def _range_for_month(option: MonthOption) -> DateRange:
    start, end = month_bounds(option.year, option.month)
    return DateRange(start=start, end=end)


def initial_selection(
    monthly: list[EnergyRecord],
    daily: list[EnergyRecord],
    today: date | None = None,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> SelectionState:
    """Compute defaults once both collections have been fetched.

    Year: most recent in the monthly data. Month: the current calendar month
    when the daily data has it, otherwise the most recent available month.
    """
    today = today or date.today()
    years = unique_years(monthly)
    months = distinct_months(daily)

    selected_month = None
    date_range = None
    if months:
        current = next(
            (m for m in months if m.year == today.year and m.month == today.month),
            None,
        )
        selected_month = current or months[0]
        date_range = _range_for_month(selected_month)

    return SelectionState(
        selected_year=years[0] if years else None,
        selected_month=selected_month,
        date_range=date_range,
        page_size=page_size,
    )


def change_year(state: SelectionState, year: int | None) -> SelectionState:
    return replace(state, selected_year=year)


def change_month(
    state: SelectionState,
    months: list[MonthOption],
    value: str,
) -> SelectionState:
    """Select a month by its ``YYYY-M`` value and reset the range to it.

    Unknown values leave the state unchanged.
    """
    option = next((m for m in months if m.value == value), None)
    if option is None:
        return state
    return replace(state, selected_month=option, date_range=_range_for_month(option))


def edit_range_start(state: SelectionState, start: date | None) -> SelectionState:
    end = state.date_range.end if state.date_range else None
    return replace(state, date_range=DateRange(start=start, end=end))


def edit_range_end(state: SelectionState, end: date | None) -> SelectionState:
    start = state.date_range.start if state.date_range else None
    return replace(state, date_range=DateRange(start=start, end=end))


def request_sort(state: SelectionState, key: str) -> SelectionState:
    """Sort by *key* (toggling if already active) and go back to page 1."""
    return replace(state, sort=toggle_sort(state.sort, key), page=1)


def sort_by_consumption(state: SelectionState) -> SelectionState:
    """Shortcut: highest consumption first."""
    return replace(state, sort=SortConfig(key="total_consumption", direction=DESC), page=1)


def change_page_size(state: SelectionState, page_size: int) -> SelectionState:
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return replace(state, page_size=page_size, page=1)


def go_to_page(state: SelectionState, page: int, total_pages: int) -> SelectionState:
    return replace(state, page=clamp_page(page, total_pages))
