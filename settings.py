from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


_DATA_DIR_ENV = "ENERGY_DATA_DIR"
_ENERGY_FILE_ENV = "ENERGY_FILE_NAME"
_WEATHER_FILE_ENV = "WEATHER_FILE_NAME"
_ANOMALY_FILE_ENV = "ANOMALY_FILE_NAME"
_TIMEZONE_ENV = "SOURCE_TIMEZONE"
_CACHE_MAX_AGE_ENV = "CACHE_MAX_AGE_SECONDS"
_WORKER_COUNT_ENV = "READER_WORKER_COUNT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_TIMEZONE = "UTC"
# One half-hourly interval.
DEFAULT_CACHE_MAX_AGE = 30 * 60


@dataclass(frozen=True)
class Settings:
    data_dir: str
    energy_file: str
    weather_file: str
    anomaly_file: str
    source_timezone: str
    cache_max_age: int
    reader_workers: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_int_env(name: str, default: int, minimum: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _read_timezone(default: str) -> str:
    candidate = _read_str_env(_TIMEZONE_ENV, default)
    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError):
        return default
    return candidate


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        data_dir=_read_str_env(_DATA_DIR_ENV, "./data"),
        energy_file=_read_str_env(_ENERGY_FILE_ENV, "HalfHourlyEnergyData.csv"),
        weather_file=_read_str_env(_WEATHER_FILE_ENV, "Weather.csv"),
        anomaly_file=_read_str_env(_ANOMALY_FILE_ENV, "HalfHourlyEnergyDataAnomalies.csv"),
        source_timezone=_read_timezone(DEFAULT_TIMEZONE),
        cache_max_age=_read_int_env(_CACHE_MAX_AGE_ENV, DEFAULT_CACHE_MAX_AGE, minimum=0),
        reader_workers=_read_int_env(_WORKER_COUNT_ENV, 3, minimum=1),
        log_level=_read_log_level("INFO"),
    )
