"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

# A single delimited line of a source file, fields in file order.
RawRow = List[str]

ENERGY_SOURCE = "energy"
WEATHER_SOURCE = "weather"
ANOMALY_SOURCE = "anomalies"

# Minimum fields per data row: timestamp + consumption, date + temperature
# (+ unused), timestamp (+ unused).
SOURCE_MIN_FIELDS = {
    ENERGY_SOURCE: 2,
    WEATHER_SOURCE: 2,
    ANOMALY_SOURCE: 1,
}


@dataclass(frozen=True, slots=True)
class SourceRow:
    """A data row together with the physical file line it ended on."""

    line_number: int
    fields: RawRow


@dataclass(frozen=True, slots=True)
class EnergyReading:
    """Half-hourly consumption parsed from the energy source."""

    timestamp: int
    consumption: float


@dataclass(frozen=True, slots=True)
class WeatherReading:
    """Temperature parsed from the weather source."""

    timestamp: int
    temperature: float


@dataclass(frozen=True, slots=True)
class AnomalyFlag:
    """An interval flagged by the anomaly source."""

    timestamp: int


@dataclass(frozen=True, slots=True)
class MergedRecord:
    """Everything known about one interval after merging all sources.

    ``consumption`` and ``temperature`` are ``None`` when the owning source
    had no row for the interval.
    """

    consumption: Optional[float] = None
    temperature: Optional[float] = None
    is_anomalous: bool = False
