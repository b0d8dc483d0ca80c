from __future__ import annotations

from models.records import MergedRecord
from services.chart import (
    ANOMALY_COLOR,
    NORMAL_COLOR,
    build_chart_options,
    build_series,
    readable_time,
)

T0 = 1577836800000
HALF_HOUR = 30 * 60 * 1000


def test_readable_time() -> None:
    assert readable_time(T0) == "01/01/2020, 00:00"
    assert readable_time(T0 + 23 * HALF_HOUR) == "01/01/2020, 11:30"


def test_series_colors_anomalies_and_leaves_temperature_gaps() -> None:
    records = {
        T0 + HALF_HOUR: MergedRecord(consumption=11.8, is_anomalous=True),
        T0: MergedRecord(consumption=12.34, temperature=0.0),
    }

    series = build_series(records)

    assert series.categories == ["01/01/2020, 00:00", "01/01/2020, 00:30"]
    assert series.consumption == [
        {"y": 12.34, "color": NORMAL_COLOR},
        {"y": 11.8, "color": ANOMALY_COLOR},
    ]
    assert series.temperature == [0.0, None]
    assert series.anomalies == ["01/01/2020, 00:30"]


def test_chart_options_use_dual_axes() -> None:
    series = build_series({T0: MergedRecord(consumption=1.0, temperature=2.0)})

    options = build_chart_options(series)

    assert options["xAxis"]["categories"] == ["01/01/2020, 00:00"]
    assert options["yAxis"][1]["opposite"] is True
    consumption, temperature = options["series"]
    assert consumption["type"] == "column"
    assert temperature["type"] == "spline"
    assert temperature["yAxis"] == 1
    assert temperature["data"] == [2.0]
