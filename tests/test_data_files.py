from __future__ import annotations

import pytest

from services.errors import FetchFailure
from storage.data_files import DataDirectory, build_default_data_directory


def test_read_text_returns_file_contents(tmp_path) -> None:
    (tmp_path / "energy.csv").write_text("Timestamp,Consumption\n")
    directory = DataDirectory(tmp_path, {"energy": "energy.csv"})

    assert directory.read_text("energy") == "Timestamp,Consumption\n"


def test_read_text_strips_byte_order_mark(tmp_path) -> None:
    (tmp_path / "energy.csv").write_bytes("\ufeffTimestamp,Consumption\n".encode("utf-8"))
    directory = DataDirectory(tmp_path, {"energy": "energy.csv"})

    assert directory.read_text("energy").startswith("Timestamp")


def test_missing_file_raises_fetch_failure(tmp_path) -> None:
    directory = DataDirectory(tmp_path, {"weather": "Weather.csv"})

    with pytest.raises(FetchFailure) as excinfo:
        directory.read_text("weather")

    assert excinfo.value.source == "weather"
    assert "Weather.csv" in excinfo.value.reason


def test_unknown_source_raises_fetch_failure(tmp_path) -> None:
    directory = DataDirectory(tmp_path, {})

    with pytest.raises(FetchFailure):
        directory.path_for("energy")


def test_undecodable_file_raises_fetch_failure(tmp_path) -> None:
    (tmp_path / "energy.csv").write_bytes(b"\xff\xfe\x00bad")
    directory = DataDirectory(tmp_path, {"energy": "energy.csv"})

    with pytest.raises(FetchFailure):
        directory.read_text("energy")


def test_default_directory_explicit_root(tmp_path) -> None:
    try:
        directory = build_default_data_directory(str(tmp_path))
        assert directory.root_path == tmp_path
        assert set(directory.file_names) == {"energy", "weather", "anomalies"}
    finally:
        build_default_data_directory.cache_clear()
