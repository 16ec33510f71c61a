"""Fetch energy data and print the dashboard summary; optionally export CSV."""

import argparse
import asyncio
import logging
from datetime import date
from pathlib import Path

from config.settings import settings
from energy_dashboard.action.dashboard_session import DashboardSession, HourlyDetailSession
from energy_dashboard.analytics.csv_export import export_filename
from energy_dashboard.ingestion.data_client import EnergyDataClient


def _print_dashboard(session: DashboardSession) -> None:
    view = session.view()
    summary = view.summary

    highest = summary.highest_month
    change = summary.month_over_month_change
    print(f"Highest Month ({summary.highest_month_label}): "
          f"{highest.consumption if highest else 0:.2f} kWh, "
          f"${highest.charges if highest else 0:.2f} total charges")
    print(f"Avg Cost per kWh: ${summary.avg_cost_per_unit:.3f}")
    print(f"Monthly Change: {f'{change}%' if change is not None else 'N/A'}")
    print(f"Year-to-Date: {summary.ytd_consumption:.2f} kWh, ${summary.ytd_charges:.2f}")
    print()

    month = view.selection.selected_month
    print(f"Daily range ({month.label if month else 'all days'}): "
          f"{view.daily_total_consumption:.2f} kWh | ${view.daily_total_charges:.2f}")
    print()

    table = view.table
    print(f"Detailed Data ({table.scope_label} - {table.total_records} records)")
    for row in table.rows:
        days = row.days_billed if row.days_billed is not None else "N/A"
        print(f"  {row.month_label:<16} {row.consumption:>10.2f} kWh  ${row.charges:>9.2f}  "
              f"{days!s:>4} days  ${row.cost_per_unit:.3f}/kWh  {row.trend_pct:>3}%")
    print(f"Page {table.page} / {table.total_pages}")
    print()

    for insight in view.insights:
        print(f"{insight.title}: {insight.text}")


def _print_hourly(session: HourlyDetailSession) -> None:
    view = session.view()
    print(view.title)
    print(f"Total: {view.total_consumption:.2f} kWh | ${view.total_charges:.2f}")
    print(f"Average per interval: {view.average_consumption:.2f} kWh")
    print(f"Peak interval: {view.peak_label}")
    for row in view.rows:
        print(f"  {row.time_range:<20} {row.consumption:>8.3f} kWh  ${row.charges:.2f}  "
              f"${row.cost_per_unit:.3f}/kWh")


async def run(args: argparse.Namespace) -> int:
    client = EnergyDataClient(args.base_url)

    if args.day:
        hourly = HourlyDetailSession(client)
        await hourly.open_day(args.day)
        if hourly.error:
            print(f"Error: {hourly.error}")
            return 1
        _print_hourly(hourly)
        return 0

    session = DashboardSession(client, page_size=args.rows)
    await session.load()
    if session.error:
        print(f"Error: {session.error}")
        return 1

    if args.year is not None:
        session.select_year(args.year or None)
    if args.sort:
        session.sort_by(args.sort)
    session.go_to_page(args.page)
    _print_dashboard(session)

    if args.csv:
        target = Path(args.csv)
        if target.is_dir():
            target = target / export_filename(date.today())
        target.write_text(session.export_csv(), encoding="utf-8")
        print(f"\nWrote {target}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--base-url", default=settings.api_base_url)
    parser.add_argument("--year", type=int, help="Year filter (0 for all years)")
    parser.add_argument("--sort", help="Sort key, e.g. total_consumption")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--rows", type=int, default=settings.default_rows_per_page)
    parser.add_argument("--csv", help="Write the sorted table as CSV to this file or directory")
    parser.add_argument("--day", help="Show 15-minute detail for YYYY-MM-DD instead")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level)
    raise SystemExit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
