"""Orchestration of reading, parsing and merging the dashboard sources."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import timezone, tzinfo
from functools import lru_cache
from typing import Dict, Mapping, Optional

from models.records import (
    ANOMALY_SOURCE,
    ENERGY_SOURCE,
    SOURCE_MIN_FIELDS,
    WEATHER_SOURCE,
    MergedRecord,
)
from services.merger import RecordMerger
from services.normalizer import (
    normalize_anomalies,
    normalize_energy,
    normalize_weather,
    resolve_timezone,
)
from services.parser import parse_rows
from settings import get_settings
from storage.data_files import DataDirectory, build_default_data_directory

logger = logging.getLogger(__name__)


class DashboardService:
    """Builds the merged per-interval dataset from the three source files."""

    def __init__(
        self,
        data_directory: DataDirectory,
        merger: RecordMerger,
        source_timezone: tzinfo = timezone.utc,
        workers: int = 3,
    ) -> None:
        self.data_directory = data_directory
        self.merger = merger
        self.source_timezone = source_timezone
        self.executor = ThreadPoolExecutor(max_workers=workers)

    def build_records(self) -> Mapping[int, MergedRecord]:
        """Read every source and merge them.

        A :class:`~services.errors.FetchFailure` or
        :class:`~services.errors.ParseFailure` from any source propagates and
        nothing is returned.
        """
        start_time = time.perf_counter()
        texts = self._read_sources()

        rows = {
            source: parse_rows(text, source, min_fields=SOURCE_MIN_FIELDS[source])
            for source, text in texts.items()
        }
        tz = self.source_timezone
        records = self.merger.merge(
            energy=normalize_energy(rows[ENERGY_SOURCE], tz),
            weather=normalize_weather(rows[WEATHER_SOURCE], tz),
            anomalies=normalize_anomalies(rows[ANOMALY_SOURCE], tz),
        )

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            "Built dashboard dataset",
            extra={"record_count": len(records), "duration_ms": duration_ms},
        )
        return records

    def shutdown(self) -> None:
        """Clean up executor resources during application shutdown."""
        self.executor.shutdown(wait=False, cancel_futures=True)

    def _read_sources(self) -> Dict[str, str]:
        futures: Dict[str, Future[str]] = {
            source: self.executor.submit(self.data_directory.read_text, source)
            for source in (ENERGY_SOURCE, WEATHER_SOURCE, ANOMALY_SOURCE)
        }
        try:
            return {source: future.result() for source, future in futures.items()}
        except Exception:
            for future in futures.values():
                future.cancel()
            raise


@lru_cache
def build_default_service(workers: Optional[int] = None) -> DashboardService:
    """Factory that wires the service from environment settings."""
    settings = get_settings()
    return DashboardService(
        data_directory=build_default_data_directory(),
        merger=RecordMerger(),
        source_timezone=resolve_timezone(settings.source_timezone),
        workers=workers or settings.reader_workers,
    )
