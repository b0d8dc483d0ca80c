"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import MergedRecord


class DataPoint(BaseModel):
    """One merged interval as exposed over HTTP.

    ``consumption`` and ``temperature`` are left out of the payload when the
    owning source had no row for the interval.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    consumption: Optional[float] = None
    temperature: Optional[float] = None
    is_anomalous: bool = Field(False, alias="isAnomalous")

    @classmethod
    def from_record(cls, record: MergedRecord) -> "DataPoint":
        return cls(
            consumption=record.consumption,
            temperature=record.temperature,
            is_anomalous=record.is_anomalous,
        )


# Canonical timestamp (as a string) -> data point.
GraphData = Dict[str, DataPoint]


def to_graph_data(records: Mapping[int, MergedRecord]) -> GraphData:
    return {str(timestamp): DataPoint.from_record(record) for timestamp, record in records.items()}


class HealthStatus(BaseModel):
    status: str
    detail: Optional[str] = None
