from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from models.records import ANOMALY_SOURCE, ENERGY_SOURCE, WEATHER_SOURCE
from services.errors import FetchFailure
from settings import get_settings

logger = logging.getLogger(__name__)


class DataDirectory:
    """Read-only access to the dashboard's source files under one directory."""

    def __init__(self, root_path: Path, file_names: Dict[str, str]) -> None:
        self.root_path = root_path
        self.file_names = dict(file_names)

    def path_for(self, source: str) -> Path:
        try:
            name = self.file_names[source]
        except KeyError:
            raise FetchFailure(source, "unknown source") from None
        return self.root_path / name

    def read_text(self, source: str) -> str:
        path = self.path_for(source)
        try:
            # utf-8-sig drops a spreadsheet BOM from the header cell.
            text = path.read_text(encoding="utf-8-sig")
        except FileNotFoundError as exc:
            raise FetchFailure(source, f"file {path.name!r} not found") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise FetchFailure(source, f"unable to read {path.name!r}: {exc}") from exc

        logger.debug("Read source file", extra={"source": source, "path": str(path)})
        return text


@lru_cache
def build_default_data_directory(root_path: Optional[str] = None) -> DataDirectory:
    settings = get_settings()
    root = Path(settings.data_dir if root_path is None else root_path)
    return DataDirectory(
        root_path=root,
        file_names={
            ENERGY_SOURCE: settings.energy_file,
            WEATHER_SOURCE: settings.weather_file,
            ANOMALY_SOURCE: settings.anomaly_file,
        },
    )
