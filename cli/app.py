from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Optional

import typer

from app.schemas import to_graph_data
from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_anomalies, render_summary
from logging_config import configure_logging
from services.dashboard import DashboardService, build_default_service
from services.errors import DashboardError
from services.merger import RecordMerger
from services.normalizer import resolve_timezone
from settings import get_settings
from storage.data_files import build_default_data_directory


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for inspecting the energy anomaly dashboard data.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


def _source_timezone() -> tzinfo:
    return resolve_timezone(get_settings().source_timezone)


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Dashboard API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for the API to respond.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("fetch")
def fetch_command(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload."),
) -> None:
    """Fetch the merged dataset from the API and summarize it."""
    state = _get_state(ctx)
    payload = state.client.get_energy()
    if as_json:
        typer.echo(json.dumps(payload, indent=2))
        return
    render_summary(payload, _source_timezone())


@app.command("anomalies")
def anomalies_command(ctx: typer.Context) -> None:
    """List the anomalous intervals reported by the API."""
    state = _get_state(ctx)
    render_anomalies(state.client.get_energy(), _source_timezone())


@app.command("merge")
def merge_command(
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        "-d",
        file_okay=False,
        help="Directory holding the source CSV files (defaults to ENERGY_DATA_DIR or ./data).",
    ),
) -> None:
    """Merge the local source files without a running server and print JSON."""
    configure_logging()
    if data_dir is None:
        service = build_default_service()
    else:
        settings = get_settings()
        service = DashboardService(
            data_directory=build_default_data_directory(str(data_dir)),
            merger=RecordMerger(),
            source_timezone=resolve_timezone(settings.source_timezone),
            workers=settings.reader_workers,
        )

    try:
        records = service.build_records()
    except DashboardError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    finally:
        service.shutdown()
        build_default_service.cache_clear()

    payload = {
        key: point.model_dump(by_alias=True, exclude_none=True)
        for key, point in to_graph_data(records).items()
    }
    typer.echo(json.dumps(payload, indent=2))
