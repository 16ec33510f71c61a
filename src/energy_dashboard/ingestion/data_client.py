"""Async REST client for the energy data API.

Three read operations, one per granularity. Every failure (transport error,
non-2xx status, non-JSON body, malformed envelope) surfaces as
:class:`FetchFailure`; nothing is retried.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from config.settings import settings
from energy_dashboard.analytics.dates import InvalidDate, normalize_date
from energy_dashboard.models import EnergyRecord, records_from_wire

logger = logging.getLogger(__name__)


class FetchFailure(Exception):
    """Raised when energy data cannot be fetched or decoded."""


class EnergyDataResponse(BaseModel):
    """Response envelope: ``{"data": [...]}``."""

    data: list[Any] | None = None


class EnergyDataClient:
    """Fetches monthly, daily and 15-minute energy records."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._headers = headers or {}
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch_monthly(self) -> list[EnergyRecord]:
        return await self._fetch("monthly")

    async def fetch_daily(self) -> list[EnergyRecord]:
        return await self._fetch("daily")

    async def fetch_hourly(self, day: str | date) -> list[EnergyRecord]:
        """15-minute records for one calendar day (``YYYY-MM-DD``)."""
        try:
            day_str = normalize_date(day).isoformat()
        except InvalidDate as exc:
            raise FetchFailure(f"Invalid day for hourly data: {day!r}") from exc
        return await self._fetch("hourly", params={"date": day_str})

    async def _fetch(self, granularity: str, params: dict[str, str] | None = None) -> list[EnergyRecord]:
        url = f"{self._base_url}/{granularity}"
        logger.info("Fetching %s energy data from %s", granularity, url)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers,
                transport=self._transport,
            ) as client:
                resp = await client.get(url, params=params or {})
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            raise FetchFailure(
                f"Request failed with status code {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchFailure(f"Network error: {exc}") from exc
        except ValueError as exc:
            raise FetchFailure(f"Invalid JSON from {url}") from exc

        try:
            envelope = EnergyDataResponse.model_validate(payload)
        except ValidationError as exc:
            raise FetchFailure(f"Unexpected response shape from {url}") from exc

        records = records_from_wire(envelope.data or [])
        logger.info("Fetched %d %s records", len(records), granularity)
        return records
