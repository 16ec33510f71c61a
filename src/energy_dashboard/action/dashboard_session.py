"""Dashboard and hourly-detail sessions.

A session owns the fetched record collections and the current selection.
User actions replace the selection; ``view()`` rebuilds the view model from
scratch each time.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from energy_dashboard.analytics import selection as sel
from energy_dashboard.analytics.aggregator import distinct_months
from energy_dashboard.analytics.csv_export import export_monthly_csv
from energy_dashboard.analytics.dates import InvalidDate, normalize_date
from energy_dashboard.analytics.selection import SelectionState
from energy_dashboard.analytics.table_engine import total_pages
from energy_dashboard.analytics.view_model import (
    DashboardView,
    HourlyView,
    build_dashboard_view,
    build_hourly_view,
    daily_point_date,
    daily_points,
    table_records,
)
from energy_dashboard.ingestion.data_client import EnergyDataClient, FetchFailure
from energy_dashboard.models import EnergyRecord

logger = logging.getLogger(__name__)

LOADING = "loading"
READY = "ready"
ERROR = "error"


class SessionNotReady(RuntimeError):
    """Raised when a view is requested before data has loaded."""


class DashboardSession:
    """Monthly/daily dashboard backed by one fetch per granularity."""

    def __init__(self, client: EnergyDataClient, *, page_size: int = sel.DEFAULT_PAGE_SIZE) -> None:
        self._client = client
        self._page_size = page_size
        self.status = LOADING
        self.error: str | None = None
        self.monthly: list[EnergyRecord] = []
        self.daily: list[EnergyRecord] = []
        self.selection = SelectionState(page_size=page_size)

    async def load(self, today: date | None = None) -> None:
        """Fetch monthly and daily data concurrently, then compute defaults.

        Defaults are derived only after both fetches resolve. A failure of
        either fetch moves the session to the error state.
        """
        self.status = LOADING
        self.error = None
        try:
            monthly, daily = await asyncio.gather(
                self._client.fetch_monthly(),
                self._client.fetch_daily(),
            )
        except FetchFailure as exc:
            logger.warning("Dashboard load failed: %s", exc)
            self.status = ERROR
            self.error = str(exc)
            return

        self.monthly = monthly
        self.daily = daily
        self.selection = sel.initial_selection(monthly, daily, today=today, page_size=self._page_size)
        self.status = READY
        logger.info(
            "Dashboard ready: %d monthly, %d daily records (year=%s, month=%s)",
            len(monthly), len(daily),
            self.selection.selected_year,
            self.selection.selected_month.value if self.selection.selected_month else None,
        )

    def view(self) -> DashboardView:
        if self.status != READY:
            raise SessionNotReady(self.error or "Dashboard data has not loaded")
        return build_dashboard_view(self.monthly, self.daily, self.selection)

    # -- selection transitions ----------------------------------------------

    def select_year(self, year: int | None) -> None:
        self.selection = sel.change_year(self.selection, year)

    def select_month(self, value: str) -> None:
        self.selection = sel.change_month(self.selection, distinct_months(self.daily), value)

    def set_range_start(self, start: date | None) -> None:
        self.selection = sel.edit_range_start(self.selection, start)

    def set_range_end(self, end: date | None) -> None:
        self.selection = sel.edit_range_end(self.selection, end)

    def sort_by(self, key: str) -> None:
        self.selection = sel.request_sort(self.selection, key)

    def sort_by_consumption(self) -> None:
        self.selection = sel.sort_by_consumption(self.selection)

    def set_page_size(self, page_size: int) -> None:
        self.selection = sel.change_page_size(self.selection, page_size)

    def go_to_page(self, page: int) -> None:
        count = len(table_records(self.monthly, self.selection))
        pages = total_pages(count, self.selection.page_size)
        self.selection = sel.go_to_page(self.selection, page, pages)

    # -- outputs --------------------------------------------------------------

    def day_for_point(self, index: int) -> str | None:
        """Day clicked in the daily chart, for the hourly navigation."""
        return daily_point_date(daily_points(self.daily, self.selection), index)

    def export_csv(self) -> str:
        return export_monthly_csv(table_records(self.monthly, self.selection))


class HourlyDetailSession:
    """15-minute detail for one day at a time.

    Each ``open_day`` call supersedes the previous one; a response that
    arrives for a day that is no longer active is discarded.
    """

    def __init__(self, client: EnergyDataClient) -> None:
        self._client = client
        self._request_seq = 0
        self.active_day: str | None = None
        self.status = LOADING
        self.error: str | None = None
        self.records: list[EnergyRecord] = []

    async def open_day(self, day: str | date) -> bool:
        """Fetch the intervals of *day*.

        Returns False when the response was stale and therefore dropped.
        """
        self._request_seq += 1
        seq = self._request_seq
        try:
            day_str = normalize_date(day).isoformat()
        except InvalidDate as exc:
            self.active_day = None
            self.status = ERROR
            self.error = str(exc)
            return True

        self.active_day = day_str
        self.status = LOADING
        self.error = None
        self.records = []

        try:
            records = await self._client.fetch_hourly(day_str)
        except FetchFailure as exc:
            if seq != self._request_seq:
                logger.warning("Dropping stale hourly failure for %s", day_str)
                return False
            logger.warning("Hourly load for %s failed: %s", day_str, exc)
            self.status = ERROR
            self.error = str(exc)
            return True

        if seq != self._request_seq:
            logger.warning(
                "Dropping stale hourly response for %s (active day is %s)",
                day_str, self.active_day,
            )
            return False

        self.records = records
        self.status = READY
        return True

    def view(self) -> HourlyView:
        if self.status != READY or self.active_day is None:
            raise SessionNotReady(self.error or "Hourly data has not loaded")
        return build_hourly_view(self.active_day, self.records)
