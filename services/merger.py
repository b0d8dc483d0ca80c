"""Merging of normalized source rows into one record per interval."""

from __future__ import annotations

import logging
from functools import reduce
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping

from models.records import (
    ANOMALY_SOURCE,
    ENERGY_SOURCE,
    WEATHER_SOURCE,
    AnomalyFlag,
    EnergyReading,
    MergedRecord,
    WeatherReading,
)

logger = logging.getLogger(__name__)

# Canonical timestamp -> the fields one source contributes for it.
PartialMapping = Mapping[int, Mapping[str, Any]]

# Fields combined with logical OR instead of overwritten.
_UNION_FIELDS = frozenset({"is_anomalous"})


def _warn_duplicate(source: str, timestamp: int) -> None:
    logger.warning(
        "Duplicate timestamp, keeping the later row",
        extra={"source": source, "timestamp": timestamp},
    )


def energy_pass(readings: Iterable[EnergyReading]) -> PartialMapping:
    partial: Dict[int, Mapping[str, Any]] = {}
    for reading in readings:
        if reading.timestamp in partial:
            _warn_duplicate(ENERGY_SOURCE, reading.timestamp)
        partial[reading.timestamp] = {
            "consumption": reading.consumption,
            "is_anomalous": False,
        }
    return partial


def weather_pass(readings: Iterable[WeatherReading]) -> PartialMapping:
    partial: Dict[int, Mapping[str, Any]] = {}
    for reading in readings:
        if reading.timestamp in partial:
            _warn_duplicate(WEATHER_SOURCE, reading.timestamp)
        partial[reading.timestamp] = {"temperature": reading.temperature}
    return partial


def anomaly_pass(flags: Iterable[AnomalyFlag]) -> PartialMapping:
    partial: Dict[int, Mapping[str, Any]] = {}
    for flag in flags:
        if flag.timestamp in partial:
            _warn_duplicate(ANOMALY_SOURCE, flag.timestamp)
        partial[flag.timestamp] = {"is_anomalous": True}
    return partial


def _combine(left: PartialMapping, right: PartialMapping) -> PartialMapping:
    combined: Dict[int, Mapping[str, Any]] = dict(left)
    for timestamp, fields in right.items():
        merged = dict(combined.get(timestamp, {}))
        for name, value in fields.items():
            if name in _UNION_FIELDS:
                merged[name] = bool(merged.get(name, False)) or bool(value)
            else:
                merged[name] = value
        combined[timestamp] = merged
    return combined


def fold_partials(partials: Iterable[PartialMapping]) -> Mapping[int, MergedRecord]:
    """Fold partial mappings into a read-only mapping ordered by timestamp.

    Sources own disjoint fields apart from ``is_anomalous``, which is
    OR-combined, so the result does not depend on the order of ``partials``.
    """
    combined = reduce(_combine, partials, {})
    records = {
        timestamp: MergedRecord(**combined[timestamp]) for timestamp in sorted(combined)
    }
    return MappingProxyType(records)


class RecordMerger:
    """Pure merge component that can be unit tested in isolation."""

    def merge(
        self,
        energy: Iterable[EnergyReading],
        weather: Iterable[WeatherReading],
        anomalies: Iterable[AnomalyFlag],
    ) -> Mapping[int, MergedRecord]:
        records = fold_partials(
            [energy_pass(energy), weather_pass(weather), anomaly_pass(anomalies)]
        )

        missing_consumption = sum(1 for r in records.values() if r.consumption is None)
        missing_temperature = sum(1 for r in records.values() if r.temperature is None)
        logger.info(
            "Merged sources",
            extra={
                "record_count": len(records),
                "missing_consumption": missing_consumption,
                "missing_temperature": missing_temperature,
            },
        )
        return records
