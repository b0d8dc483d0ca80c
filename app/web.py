from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.api import get_service, to_http_exception
from services.chart import build_chart_options, build_series
from services.dashboard import DashboardService
from services.errors import DashboardError


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
def ui_index(
    request: Request,
    service: DashboardService = Depends(get_service),
) -> HTMLResponse:
    try:
        records = service.build_records()
    except DashboardError as exc:
        raise to_http_exception(exc) from exc

    series = build_series(records, tz=service.source_timezone)
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "chart_options": build_chart_options(series),
            "anomalies": series.anomalies,
            "record_count": len(records),
        },
    )
