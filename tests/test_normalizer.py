from __future__ import annotations

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from models.records import AnomalyFlag, EnergyReading, SourceRow, WeatherReading
from services.errors import TimestampError
from services.normalizer import (
    normalize_anomalies,
    normalize_energy,
    normalize_weather,
    parse_day_first,
    parse_month_first,
    resolve_timezone,
    swap_day_month,
    to_epoch_millis,
)
from services.parser import parse_rows

JAN_1_2020_MS = 1577836800000


def _rows(*rows: list[str]) -> list[SourceRow]:
    return [SourceRow(line_number=n, fields=fields) for n, fields in enumerate(rows, start=2)]


def _millis(*args: int) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


def test_month_first_date_with_time() -> None:
    assert parse_month_first("01/01/2020 00:00") == JAN_1_2020_MS
    assert parse_month_first("01/05/2020 11:30") == _millis(2020, 1, 5, 11, 30)


def test_month_first_accepts_seconds_date_only_and_iso() -> None:
    assert parse_month_first("01/01/2020 00:00:00") == JAN_1_2020_MS
    assert parse_month_first("01/01/2020") == JAN_1_2020_MS
    assert parse_month_first("2020-01-01T00:00:00Z") == JAN_1_2020_MS
    assert parse_month_first("2020-01-01T01:00:00+01:00") == JAN_1_2020_MS


def test_weather_date_swaps_day_and_month() -> None:
    expected = to_epoch_millis(datetime(2020, 1, 5, 11, 0))

    assert parse_day_first("05/01/2020 11:00") == expected
    assert parse_day_first("05/01/2020 11:00") != parse_month_first("05/01/2020 11:00")


def test_weather_date_without_time_is_midnight() -> None:
    assert parse_day_first("01/01/2020") == JAN_1_2020_MS
    assert parse_day_first("31/12/2019") == _millis(2019, 12, 31)


def test_swap_day_month_keeps_time_part() -> None:
    assert swap_day_month("31/01/2020 13:30") == "01/31/2020 13:30"


@pytest.mark.parametrize("value", ["", "   ", "not a date", "13/45/2020 00:00", "2020/01"])
def test_invalid_month_first_dates_raise(value: str) -> None:
    with pytest.raises(TimestampError):
        parse_month_first(value)


@pytest.mark.parametrize("value", ["2020-01-05", "05/13/2020 11:00", "garbage"])
def test_invalid_day_first_dates_raise(value: str) -> None:
    with pytest.raises(TimestampError):
        parse_day_first(value)


def test_naive_dates_use_source_timezone() -> None:
    london = ZoneInfo("Europe/London")

    summer = parse_month_first("07/01/2020 12:00", london)

    assert summer == _millis(2020, 7, 1, 11, 0)
    assert parse_month_first("01/01/2020 00:00", london) == JAN_1_2020_MS


def test_resolve_timezone() -> None:
    assert resolve_timezone(None) is timezone.utc
    assert resolve_timezone("utc") is timezone.utc
    assert resolve_timezone("Europe/London") == ZoneInfo("Europe/London")


def test_normalize_energy_builds_readings() -> None:
    rows = _rows(["01/01/2020 00:00", "12.34"], ["01/01/2020 00:30", "11.8"])

    readings = normalize_energy(rows)

    assert readings == [
        EnergyReading(timestamp=JAN_1_2020_MS, consumption=12.34),
        EnergyReading(timestamp=JAN_1_2020_MS + 30 * 60 * 1000, consumption=11.8),
    ]


def test_invalid_rows_are_rejected_with_warning(caplog) -> None:
    rows = _rows(
        ["01/01/2020 00:00", "12.34"],
        ["yesterday", "1.0"],
        ["01/01/2020 01:00", "n/a"],
        ["01/01/2020 01:30", "nan"],
        ["01/01/2020 02:00", "inf"],
        ["01/01/2020 02:30", "-Infinity"],
    )

    with caplog.at_level(logging.WARNING, logger="services.normalizer"):
        readings = normalize_energy(rows)

    assert readings == [EnergyReading(timestamp=JAN_1_2020_MS, consumption=12.34)]
    rejected = [(r.row_number, r.reason) for r in caplog.records]
    assert rejected == [
        (3, "invalid timestamp"),
        (4, "invalid numeric value"),
        (5, "invalid numeric value"),
        (6, "invalid numeric value"),
        (7, "invalid numeric value"),
    ]
    assert all(r.source == "energy" for r in caplog.records)


def test_non_finite_temperature_is_rejected(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="services.normalizer"):
        readings = normalize_weather(_rows(["01/01/2020", "inf", "x"]))

    assert readings == []
    assert caplog.records[0].invalid_value == "inf"


def test_warning_names_file_line_after_blank_lines(caplog) -> None:
    rows = parse_rows("T,C\n\n01/01/2020 00:00,1\nbad,2\n", "energy", min_fields=2)

    with caplog.at_level(logging.WARNING, logger="services.normalizer"):
        readings = normalize_energy(rows)

    assert readings == [EnergyReading(timestamp=JAN_1_2020_MS, consumption=1.0)]
    assert [r.row_number for r in caplog.records] == [4]


def test_normalize_weather_ignores_unused_field() -> None:
    readings = normalize_weather(_rows(["01/01/2020", "5.67", "x"]))

    assert readings == [WeatherReading(timestamp=JAN_1_2020_MS, temperature=5.67)]


def test_normalize_weather_rejects_month_first_only_dates(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="services.normalizer"):
        readings = normalize_weather(_rows(["01/13/2020 00:00", "4.0"]))

    assert readings == []
    assert caplog.records[0].source == "weather"
    assert caplog.records[0].invalid_value == "01/13/2020 00:00"


def test_normalize_anomalies_only_reads_timestamp() -> None:
    flags = normalize_anomalies(_rows(["01/01/2020 00:00", "whatever"], ["01/01/2020 00:30"]))

    assert flags == [
        AnomalyFlag(timestamp=JAN_1_2020_MS),
        AnomalyFlag(timestamp=JAN_1_2020_MS + 30 * 60 * 1000),
    ]
