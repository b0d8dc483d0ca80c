"""Conversion of source-specific date text into canonical timestamps.

A canonical timestamp is an integer number of milliseconds since the Unix
epoch. Every source is aligned on it, so two sources that describe the same
wall-clock instant in different textual layouts must normalize to the same
integer.

The energy and anomaly files write dates month first (``01/31/2020 13:30``).
The weather file writes them day first (``31/01/2020 13:30``), so its day and
month fields are swapped before parsing.

Rows whose date or reading cannot be parsed are dropped with a warning; an
invalid key never reaches the merged dataset.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from models.records import (
    ANOMALY_SOURCE,
    ENERGY_SOURCE,
    WEATHER_SOURCE,
    AnomalyFlag,
    EnergyReading,
    SourceRow,
    WeatherReading,
)
from services.errors import TimestampError

logger = logging.getLogger(__name__)

_MONTH_FIRST_FORMATS: Tuple[str, ...] = (
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y",
)


def resolve_timezone(name: Optional[str]) -> tzinfo:
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def to_epoch_millis(moment: datetime, tz: tzinfo = timezone.utc) -> int:
    """Return ``moment`` as epoch milliseconds, reading naive values in ``tz``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=tz)
    delta = moment - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return delta // timedelta(milliseconds=1)


def _parse_iso(candidate: str) -> datetime:
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    return datetime.fromisoformat(candidate)


def parse_month_first(value: str, tz: tzinfo = timezone.utc) -> int:
    """Normalize a ``MM/DD/YYYY[ HH:MM[:SS]]`` or ISO-8601 date string."""
    candidate = " ".join(value.split())
    if not candidate:
        raise TimestampError("Timestamp is empty.")

    for fmt in _MONTH_FIRST_FORMATS:
        try:
            return to_epoch_millis(datetime.strptime(candidate, fmt), tz)
        except ValueError:
            continue

    try:
        return to_epoch_millis(_parse_iso(candidate), tz)
    except ValueError as exc:
        raise TimestampError(f"Invalid timestamp format: {value!r}") from exc


def swap_day_month(value: str) -> str:
    """Turn ``DD/MM/YYYY...`` into ``MM/DD/YYYY...``."""
    parts = value.strip().split("/", 2)
    if len(parts) != 3:
        raise TimestampError(f"Expected a DD/MM/YYYY date, got {value!r}")
    day, month, rest = parts
    return f"{month}/{day}/{rest}"


def parse_day_first(value: str, tz: tzinfo = timezone.utc) -> int:
    """Normalize a ``DD/MM/YYYY[ HH:MM[:SS]]`` date string."""
    return parse_month_first(swap_day_month(value), tz)


def _parse_value(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"{raw!r} is not a finite reading")
    return value


def _reject(source: str, row_number: int, reason: str, invalid_value: str) -> None:
    logger.warning(
        "Skipping row",
        extra={
            "source": source,
            "row_number": row_number,
            "reason": reason,
            "invalid_value": invalid_value,
        },
    )


def normalize_energy(rows: Iterable[SourceRow], tz: tzinfo = timezone.utc) -> List[EnergyReading]:
    readings: List[EnergyReading] = []
    for row in rows:
        row_number = row.line_number
        time_raw, consumption_raw, *_ = row.fields
        try:
            timestamp = parse_month_first(time_raw, tz)
        except TimestampError:
            _reject(ENERGY_SOURCE, row_number, "invalid timestamp", time_raw)
            continue
        try:
            consumption = _parse_value(consumption_raw)
        except ValueError:
            _reject(ENERGY_SOURCE, row_number, "invalid numeric value", consumption_raw)
            continue
        readings.append(EnergyReading(timestamp=timestamp, consumption=consumption))
    return readings


def normalize_weather(rows: Iterable[SourceRow], tz: tzinfo = timezone.utc) -> List[WeatherReading]:
    readings: List[WeatherReading] = []
    for row in rows:
        row_number = row.line_number
        date_raw, temperature_raw, *_ = row.fields
        try:
            timestamp = parse_day_first(date_raw, tz)
        except TimestampError:
            _reject(WEATHER_SOURCE, row_number, "invalid timestamp", date_raw)
            continue
        try:
            temperature = _parse_value(temperature_raw)
        except ValueError:
            _reject(WEATHER_SOURCE, row_number, "invalid numeric value", temperature_raw)
            continue
        readings.append(WeatherReading(timestamp=timestamp, temperature=temperature))
    return readings


def normalize_anomalies(rows: Iterable[SourceRow], tz: tzinfo = timezone.utc) -> List[AnomalyFlag]:
    flags: List[AnomalyFlag] = []
    for row in rows:
        time_raw = row.fields[0]
        try:
            flags.append(AnomalyFlag(timestamp=parse_month_first(time_raw, tz)))
        except TimestampError:
            _reject(ANOMALY_SOURCE, row.line_number, "invalid timestamp", time_raw)
    return flags
