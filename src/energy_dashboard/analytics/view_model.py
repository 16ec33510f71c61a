"""View model builder for the dashboard and hourly detail screens.

Everything is rebuilt from the raw record collections and the current
selection on every call. Nothing is cached, so a change to either input
always yields a fully consistent view.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date

from energy_dashboard.analytics import aggregator, derived_metrics, table_engine
from energy_dashboard.analytics.aggregator import MonthOption
from energy_dashboard.analytics.dates import (
    day_label,
    format_interval_time,
    interval_end,
    long_day_label,
    month_label,
    normalize_date,
    short_month_label,
    short_month_year_label,
    try_normalize_date,
    try_normalize_timestamp,
)
from energy_dashboard.analytics.selection import SelectionState
from energy_dashboard.analytics.table_engine import SortConfig
from energy_dashboard.models import EnergyRecord, round_half_up

MONTH_PALETTE = (
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
)

# Headroom above the tallest value so dual axes do not look squashed
AXIS_HEADROOM = 1.12

NOT_AVAILABLE = "N/A"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass
class ChartSeries:
    """One numeric series of a chart."""

    name: str
    kind: str  # "column" or "line"
    data: list[float]
    axis: int  # 0 = primary (kWh), 1 = secondary (currency)


@dataclass
class ChartView:
    """Category labels plus the series drawn against them."""

    labels: list[str]
    series: list[ChartSeries]
    axis_max: list[float] = field(default_factory=list)  # one per axis


@dataclass
class MonthLegend:
    """Colour key for one month shown in the daily chart."""

    key: str
    label: str
    color: str


@dataclass
class SummaryCards:
    """Scalars shown in the dashboard header cards."""

    highest_month: EnergyRecord | None
    highest_month_label: str
    avg_cost_per_unit: float
    month_over_month_change: float | None
    ytd_consumption: float
    ytd_charges: float


@dataclass
class TableRow:
    """A monthly table row with every derived field precomputed."""

    from_date: str | None  # normalized YYYY-MM-DD
    month_label: str
    consumption: float
    charges: float
    days_billed: int | None
    cost_per_unit: float
    trend_pct: int


@dataclass
class TableView:
    """Current page of the monthly table."""

    rows: list[TableRow]
    page: int
    page_size: int
    total_pages: int
    total_records: int
    sort: SortConfig
    scope_label: str  # selected year or "All Years"


@dataclass
class Insight:
    title: str
    text: str


@dataclass
class DashboardView:
    """Fully derived dashboard, ready for rendering."""

    summary: SummaryCards
    monthly_chart: ChartView
    daily_chart: ChartView
    daily_points: list[EnergyRecord]
    daily_total_consumption: float
    daily_total_charges: float
    month_legends: list[MonthLegend]
    table: TableView
    available_years: list[int]
    available_months: list[MonthOption]
    insights: list[Insight]
    selection: SelectionState


@dataclass
class HourlyRow:
    time_range: str  # "1:00 PM - 1:15 PM"
    consumption: float
    charges: float
    cost_per_unit: float


@dataclass
class HourlyView:
    """Detail view for the 15-minute intervals of one day."""

    day: str
    title: str
    chart: ChartView
    rows: list[HourlyRow]
    total_consumption: float
    total_charges: float
    average_consumption: float
    peak_label: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def axis_max(values: list[float], fallback: float) -> float:
    """Rounded-up axis ceiling with headroom; *fallback* when all values are 0."""
    top = math.ceil(max(values, default=0.0) * AXIS_HEADROOM)
    return top if top > 0 else fallback


def _consumption_charges_chart(
    labels: list[str],
    records: list[EnergyRecord],
    consumption_name: str,
    charges_name: str,
) -> ChartView:
    consumption = [r.consumption for r in records]
    charges = [r.charges for r in records]
    return ChartView(
        labels=labels,
        series=[
            ChartSeries(name=consumption_name, kind="column", data=consumption, axis=0),
            ChartSeries(name=charges_name, kind="line", data=charges, axis=1),
        ],
        axis_max=[axis_max(consumption, 10), axis_max(charges, 1)],
    )


def _label_or(d: date | None, fmt, default: str) -> str:
    return fmt(d) if d is not None else default


# ---------------------------------------------------------------------------
# Dashboard pieces
# ---------------------------------------------------------------------------


def build_summary(monthly: list[EnergyRecord]) -> SummaryCards:
    """Summary cards over the whole monthly collection (year filter ignored)."""
    highest = derived_metrics.highest_consumption_record(monthly)
    ytd = derived_metrics.year_to_date_totals(monthly)
    highest_date = try_normalize_date(highest.from_date) if highest else None
    return SummaryCards(
        highest_month=highest,
        highest_month_label=_label_or(highest_date, short_month_label, NOT_AVAILABLE),
        avg_cost_per_unit=round_half_up(ytd.avg_cost_per_unit, 3),
        month_over_month_change=aggregator.month_over_month_change(monthly),
        ytd_consumption=ytd.consumption,
        ytd_charges=ytd.charges,
    )


def build_monthly_chart(monthly: list[EnergyRecord], selection: SelectionState) -> ChartView:
    records = table_engine.filter_by_year(monthly, selection.selected_year)
    labels = [
        _label_or(try_normalize_date(r.from_date), short_month_label, NOT_AVAILABLE)
        for r in records
    ]
    return _consumption_charges_chart(
        labels, records, "Consumption (kWh)", "Total Charges ($)",
    )


def daily_points(daily: list[EnergyRecord], selection: SelectionState) -> list[EnergyRecord]:
    """Daily records inside the selected range, oldest first."""
    rng = selection.date_range
    if rng is None:
        return table_engine.filter_by_date_range(daily, None, None)
    return table_engine.filter_by_date_range(daily, rng.start, rng.end)


def build_daily_chart(points: list[EnergyRecord]) -> ChartView:
    labels = [day_label(normalize_date(r.from_date)) for r in points]
    return _consumption_charges_chart(
        labels, points, "Daily Consumption (kWh)", "Total Charges ($)",
    )


def build_month_legends(points: list[EnergyRecord]) -> list[MonthLegend]:
    """One colour per distinct month, assigned in order of first appearance."""
    legends: list[MonthLegend] = []
    seen: set[str] = set()
    for d, _ in aggregator.dated_records(points):
        key = f"{d.year}-{d.month}"
        if key in seen:
            continue
        seen.add(key)
        legends.append(MonthLegend(
            key=key,
            label=short_month_year_label(d),
            color=MONTH_PALETTE[len(legends) % len(MONTH_PALETTE)],
        ))
    return legends


def daily_point_date(points: list[EnergyRecord], index: int) -> str | None:
    """Normalized ``YYYY-MM-DD`` of a clicked daily point, None if out of range."""
    if index < 0 or index >= len(points):
        return None
    d = try_normalize_date(points[index].from_date)
    return d.isoformat() if d else None


def table_records(monthly: list[EnergyRecord], selection: SelectionState) -> list[EnergyRecord]:
    """Year-filtered, sorted, unpaginated monthly records (also used by CSV)."""
    filtered = table_engine.filter_by_year(monthly, selection.selected_year)
    return table_engine.sort_records(filtered, selection.sort.key, selection.sort.direction)


def build_table_row(record: EnergyRecord, all_monthly: list[EnergyRecord]) -> TableRow:
    d = try_normalize_date(record.from_date)
    consumption = record.consumption
    charges = record.charges
    return TableRow(
        from_date=d.isoformat() if d else None,
        month_label=_label_or(d, month_label, "Unknown"),
        consumption=round_half_up(consumption, 2),
        charges=round_half_up(charges, 2),
        days_billed=record.interval_length,
        cost_per_unit=round_half_up(derived_metrics.cost_per_unit(consumption, charges), 3),
        trend_pct=derived_metrics.trend_percentage(consumption, all_monthly),
    )


def build_table(monthly: list[EnergyRecord], selection: SelectionState) -> TableView:
    ordered = table_records(monthly, selection)
    page = table_engine.paginate(ordered, selection.page, selection.page_size)
    return TableView(
        rows=[build_table_row(r, monthly) for r in page.items],
        page=page.page,
        page_size=page.page_size,
        total_pages=page.total_pages,
        total_records=page.total_items,
        sort=selection.sort,
        scope_label=str(selection.selected_year) if selection.selected_year else "All Years",
    )


def build_insights(monthly: list[EnergyRecord], summary: SummaryCards) -> list[Insight]:
    insights = []

    latest = aggregator.latest_record(monthly)
    if latest is not None:
        change = summary.month_over_month_change
        if change is None:
            comparison = "with no earlier month to compare against"
        else:
            direction = "an increase" if change > 0 else "a decrease"
            comparison = f"which is {direction} of {abs(change)}% compared to previous month"
        insights.append(Insight(
            title="Recent Usage",
            text=f"Current month shows {latest.consumption:.2f} kWh consumption, {comparison}.",
        ))

    insights.append(Insight(
        title="Cost Efficiency",
        text=(
            f"Your average cost per kWh is ${summary.avg_cost_per_unit:.3f}, "
            f"with year-to-date spending totaling ${summary.ytd_charges:.2f}."
        ),
    ))
    return insights


def build_dashboard_view(
    monthly: list[EnergyRecord],
    daily: list[EnergyRecord],
    selection: SelectionState,
) -> DashboardView:
    """Derive the whole dashboard from raw collections plus selection."""
    summary = build_summary(monthly)
    points = daily_points(daily, selection)
    return DashboardView(
        summary=summary,
        monthly_chart=build_monthly_chart(monthly, selection),
        daily_chart=build_daily_chart(points),
        daily_points=points,
        daily_total_consumption=aggregator.sum_field(points, "total_consumption"),
        daily_total_charges=aggregator.sum_field(points, "total_charges"),
        month_legends=build_month_legends(points),
        table=build_table(monthly, selection),
        available_years=aggregator.unique_years(monthly),
        available_months=aggregator.distinct_months(daily),
        insights=build_insights(monthly, summary),
        selection=selection,
    )


# ---------------------------------------------------------------------------
# Hourly detail
# ---------------------------------------------------------------------------


def _interval_label(record: EnergyRecord) -> str:
    ts = try_normalize_timestamp(record.from_date)
    return format_interval_time(ts) if ts else NOT_AVAILABLE


def _interval_range(record: EnergyRecord) -> str:
    ts = try_normalize_timestamp(record.from_date)
    if ts is None:
        return NOT_AVAILABLE
    return f"{format_interval_time(ts)} - {format_interval_time(interval_end(ts))}"


def build_hourly_view(day: str, records: list[EnergyRecord]) -> HourlyView:
    """Chart, table and summary for the 15-minute intervals of *day*."""
    d = try_normalize_date(day)
    chart = _consumption_charges_chart(
        [_interval_label(r) for r in records], records,
        "15-min Consumption (kWh)", "15-min Charges ($)",
    )
    rows = [
        HourlyRow(
            time_range=_interval_range(r),
            consumption=round_half_up(r.consumption, 3),
            charges=round_half_up(r.charges, 2),
            cost_per_unit=round_half_up(derived_metrics.cost_per_unit(r.consumption, r.charges), 3),
        )
        for r in records
    ]
    peak = derived_metrics.peak_interval(records)
    return HourlyView(
        day=day,
        title=_label_or(d, long_day_label, day),
        chart=chart,
        rows=rows,
        total_consumption=aggregator.sum_field(records, "total_consumption"),
        total_charges=aggregator.sum_field(records, "total_charges"),
        average_consumption=aggregator.average_per_record(records, "total_consumption"),
        peak_label=_interval_label(peak) if peak else NOT_AVAILABLE,
    )
