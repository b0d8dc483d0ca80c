from __future__ import annotations

from datetime import timezone, tzinfo
from typing import Any, Dict, Iterable, Optional

import typer

from services.chart import readable_time


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _sorted_points(payload: Dict[str, Dict[str, Any]]) -> list[tuple[int, Dict[str, Any]]]:
    return sorted((int(key), point) for key, point in payload.items())


def _label(timestamp: Optional[int], tz: tzinfo) -> Optional[str]:
    return readable_time(timestamp, tz) if timestamp is not None else None


def render_summary(payload: Dict[str, Dict[str, Any]], tz: tzinfo = timezone.utc) -> None:
    points = _sorted_points(payload)
    consumptions = [p["consumption"] for _, p in points if p.get("consumption") is not None]
    temperatures = [p["temperature"] for _, p in points if p.get("temperature") is not None]
    anomalous = [ts for ts, p in points if p.get("isAnomalous")]

    echo_heading("Energy Dataset")
    echo_key_values(
        [
            ("records", len(points)),
            ("first", _label(points[0][0], tz) if points else None),
            ("last", _label(points[-1][0], tz) if points else None),
            ("anomalies", len(anomalous)),
        ]
    )

    typer.echo()
    echo_heading("Consumption")
    if consumptions:
        echo_key_values(
            [
                ("count", len(consumptions)),
                ("min", min(consumptions)),
                ("max", max(consumptions)),
                ("total", round(sum(consumptions), 3)),
            ]
        )
    else:
        typer.echo("No consumption readings.")

    typer.echo()
    echo_heading("Temperature")
    if temperatures:
        echo_key_values(
            [
                ("count", len(temperatures)),
                ("missing", len(points) - len(temperatures)),
                ("min", min(temperatures)),
                ("max", max(temperatures)),
            ]
        )
    else:
        typer.echo("No temperature readings.")


def render_anomalies(payload: Dict[str, Dict[str, Any]], tz: tzinfo = timezone.utc) -> None:
    echo_heading("Anomalies")
    anomalous = [(ts, p) for ts, p in _sorted_points(payload) if p.get("isAnomalous")]
    if not anomalous:
        typer.echo("No anomalous intervals.")
        return
    for timestamp, point in anomalous:
        consumption = point.get("consumption")
        shown = f"{consumption}W" if consumption is not None else "no consumption"
        typer.secho(f"  - {readable_time(timestamp, tz)}: {shown}", fg=typer.colors.RED)
