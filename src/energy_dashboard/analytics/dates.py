"""Date normalization: turns wire timestamps into stable calendar values.

Monthly and daily records are keyed by calendar day. Some API responses
carry date-only strings and others full timestamps with an offset; both must
land on the same day regardless of the viewer's timezone, so only the
``YYYY-MM-DD`` prefix is used and the result is a plain ``date``.

Fifteen-minute records keep their full timestamp in UTC because the meter
intervals are UTC-aligned.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta, timezone

_DATE_PREFIX = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})")


class InvalidDate(ValueError):
    """Raised when a wire date string cannot be normalized."""


def normalize_date(value) -> date:
    """Return the calendar date of an ISO date or date-time string.

    The time-of-day and zone suffix are discarded, so
    ``"2025-03-15T23:00:00-08:00"`` and ``"2025-03-15"`` both give
    ``date(2025, 3, 15)``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise InvalidDate(f"Empty or non-string date: {value!r}")

    match = _DATE_PREFIX.match(value)
    if not match:
        raise InvalidDate(f"Unrecognised date: {value!r}")
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDate(f"Invalid calendar date: {value!r}") from exc


def try_normalize_date(value) -> date | None:
    """Like :func:`normalize_date` but returns None for unusable input."""
    try:
        return normalize_date(value)
    except InvalidDate:
        return None


def normalize_timestamp(value) -> datetime:
    """Parse a full ISO timestamp and convert it to UTC.

    Naive timestamps are taken as UTC; date-only strings map to midnight UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if not value or not isinstance(value, str):
            raise InvalidDate(f"Empty or non-string timestamp: {value!r}")
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidDate(f"Unrecognised timestamp: {value!r}") from exc

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def try_normalize_timestamp(value) -> datetime | None:
    try:
        return normalize_timestamp(value)
    except InvalidDate:
        return None


def format_interval_time(ts: datetime) -> str:
    """Format the UTC hour/minute of *ts* as ``H:MM AM/PM``."""
    ts = ts.astimezone(timezone.utc) if ts.tzinfo else ts
    hours = ts.hour
    hour12 = 12 if hours == 0 else hours - 12 if hours > 12 else hours
    ampm = "PM" if hours >= 12 else "AM"
    return f"{hour12}:{ts.minute:02d} {ampm}"


def interval_end(ts: datetime, minutes: int = 15) -> datetime:
    return ts + timedelta(minutes=minutes)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_label(d: date) -> str:
    """e.g. ``May 2025``."""
    return f"{calendar.month_name[d.month]} {d.year}"


def short_month_label(d: date) -> str:
    """e.g. ``May``."""
    return calendar.month_abbr[d.month]


def short_month_year_label(d: date) -> str:
    """e.g. ``May 2025`` with the abbreviated month."""
    return f"{calendar.month_abbr[d.month]} {d.year}"


def day_label(d: date) -> str:
    """e.g. ``May 10``."""
    return f"{calendar.month_abbr[d.month]} {d.day}"


def long_day_label(d: date) -> str:
    """e.g. ``Saturday, May 10, 2025``."""
    return f"{calendar.day_name[d.weekday()]}, {calendar.month_name[d.month]} {d.day}, {d.year}"
