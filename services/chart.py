"""Builds chart series from the merged dataset."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Mapping, Optional

from models.records import MergedRecord

ANOMALY_COLOR = "#FF0000"
NORMAL_COLOR = "#0000FF"
TEMPERATURE_COLOR = "#000000"


def readable_time(timestamp: int, tz: tzinfo = timezone.utc) -> str:
    """Format epoch milliseconds as ``DD/MM/YYYY, HH:MM``."""
    moment = datetime.fromtimestamp(timestamp / 1000, tz=tz)
    return moment.strftime("%d/%m/%Y, %H:%M")


@dataclass
class ChartSeries:
    categories: List[str] = field(default_factory=list)
    consumption: List[Dict[str, Any]] = field(default_factory=list)
    temperature: List[Optional[float]] = field(default_factory=list)
    anomalies: List[str] = field(default_factory=list)


def build_series(
    records: Mapping[int, MergedRecord], tz: tzinfo = timezone.utc
) -> ChartSeries:
    """One chart point per interval, in timestamp order.

    Intervals with no temperature reading become ``None`` so the spline shows
    a gap instead of joining across it.
    """
    series = ChartSeries()
    for timestamp in sorted(records):
        record = records[timestamp]
        label = readable_time(timestamp, tz)
        series.categories.append(label)
        series.temperature.append(record.temperature)
        if record.is_anomalous:
            series.anomalies.append(label)
        series.consumption.append(
            {
                "y": record.consumption,
                "color": ANOMALY_COLOR if record.is_anomalous else NORMAL_COLOR,
            }
        )
    return series


def build_chart_options(series: ChartSeries) -> Dict[str, Any]:
    """Highcharts options for the consumption/temperature dual-axis chart.

    The tooltip formatter is attached client side, since it has to be a
    JavaScript function.
    """
    return {
        "chart": {"zooming": {"type": "x"}},
        "title": {"text": "Consumption vs Temperature (and Anomalies)"},
        "xAxis": {"categories": series.categories},
        "yAxis": [
            {
                "labels": {"format": "{value}W"},
                "title": {"text": "Consumption"},
            },
            {
                "labels": {"format": "{value}°C"},
                "title": {"text": "Temperature"},
                "opposite": True,
            },
        ],
        "tooltip": {"shared": True},
        "series": [
            {
                "name": "Consumption",
                "type": "column",
                "data": series.consumption,
                "tooltip": {"valueSuffix": "W"},
                "color": NORMAL_COLOR,
            },
            {
                "name": "Temperature",
                "type": "spline",
                "yAxis": 1,
                "data": series.temperature,
                "tooltip": {"valueSuffix": "°C"},
                "color": TEMPERATURE_COLOR,
            },
        ],
    }
