"""Energy usage records as returned by the data API.

One record type serves all three granularities (monthly, daily, 15-minute).
Numeric fields are kept exactly as they arrived on the wire; the parsed
accessors never raise and never return NaN or infinity.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

# Fields with a dedicated numeric reading
NUMERIC_FIELDS = ("total_consumption", "total_charges")

# Hourly payloads sometimes use the short keys
_FALLBACK_KEYS = {
    "total_consumption": "consumption",
    "total_charges": "charges",
}


def parse_quantity(val: Any) -> float:
    """Convert a wire quantity to float; malformed or missing values read as 0.0."""
    if val is None or isinstance(val, bool):
        return 0.0
    try:
        number = float(val)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def round_half_up(val: float, ndigits: int = 0) -> float:
    """Round with halves away from zero (2.5 -> 3, 0.25 -> 0.3).

    Works on the shortest decimal repr of *val*, so ``0.25`` is treated as
    an exact half. Non-finite input reads as 0.0.
    """
    if not math.isfinite(val):
        return 0.0
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(val)).quantize(quantum, rounding=ROUND_HALF_UP))


def _parse_interval_length(val: Any) -> int | None:
    if val is None or val == "" or isinstance(val, bool):
        return None
    try:
        return int(val)
    except (TypeError, ValueError):
        try:
            return int(float(val))
        except (TypeError, ValueError, OverflowError):
            return None


@dataclass(frozen=True)
class EnergyRecord:
    """A single energy usage observation."""

    from_date: str | None
    to_date: str | None = None
    total_consumption: str | None = None  # kWh, numeric string
    total_charges: str | None = None  # currency, numeric string
    interval_length: int | None = None  # days billed

    @property
    def consumption(self) -> float:
        return parse_quantity(self.total_consumption)

    @property
    def charges(self) -> float:
        return parse_quantity(self.total_charges)

    def value(self, field: str) -> Any:
        """Raw value of *field*, or None when the record has no such field."""
        return getattr(self, field, None)

    def numeric(self, field: str) -> float:
        """Parsed numeric value of *field* (0.0 when missing or malformed)."""
        return parse_quantity(self.value(field))

    @classmethod
    def from_wire(cls, item: dict[str, Any]) -> EnergyRecord:
        """Build a record from one element of the API ``data`` array."""

        def pick(key: str) -> Any:
            raw = item.get(key)
            if raw in (None, "") and key in _FALLBACK_KEYS:
                raw = item.get(_FALLBACK_KEYS[key])
            return raw

        def as_text(raw: Any) -> str | None:
            if raw is None:
                return None
            return raw if isinstance(raw, str) else str(raw)

        return cls(
            from_date=as_text(item.get("from_date")),
            to_date=as_text(item.get("to_date")),
            total_consumption=as_text(pick("total_consumption")),
            total_charges=as_text(pick("total_charges")),
            interval_length=_parse_interval_length(item.get("interval_length")),
        )


def records_from_wire(items: list[Any]) -> list[EnergyRecord]:
    """Convert the API ``data`` array, preserving order and duplicates."""
    return [EnergyRecord.from_wire(item) for item in items if isinstance(item, dict)]
