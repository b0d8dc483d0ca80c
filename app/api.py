"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.schemas import GraphData, HealthStatus, to_graph_data
from services.dashboard import DashboardService, build_default_service
from services.errors import DashboardError, FetchFailure, ParseFailure
from settings import get_settings

router = APIRouter()


def get_service() -> DashboardService:
    return build_default_service()


def to_http_exception(exc: DashboardError) -> HTTPException:
    if isinstance(exc, FetchFailure):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
        detail = f"Unable to fetch data from source {exc.source!r}: {exc.reason}"
    elif isinstance(exc, ParseFailure):
        code = status.HTTP_502_BAD_GATEWAY
        detail = f"Unable to parse data from source {exc.source!r}: {exc.reason}"
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
        detail = str(exc)
    return HTTPException(status_code=code, detail=detail)


@router.get(
    "/api/energy",
    response_model=GraphData,
    response_model_exclude_none=True,
    summary="Consumption, temperature and anomaly flag per half-hour interval.",
)
def get_energy(
    response: Response,
    service: DashboardService = Depends(get_service),
) -> GraphData:
    try:
        records = service.build_records()
    except DashboardError as exc:
        raise to_http_exception(exc) from exc

    max_age = get_settings().cache_max_age
    if max_age:
        response.headers["Cache-Control"] = f"public, max-age={max_age}"
    else:
        response.headers["Cache-Control"] = "no-store"
    return to_graph_data(records)


@router.get(
    "/health",
    response_model=HealthStatus,
    response_model_exclude_none=True,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> HealthStatus:
    return HealthStatus(status="ok")


@router.get(
    "/",
    response_model=HealthStatus,
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> HealthStatus:
    return HealthStatus(status="ok", detail="See /ui for the dashboard and /api/energy for data.")
