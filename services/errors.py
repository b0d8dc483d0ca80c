"""Exceptions raised while loading and merging the dashboard sources."""

from __future__ import annotations

from typing import Optional


class DashboardError(Exception):
    """Base class for failures that abort building the merged dataset."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{reason} (source {source!r})")


class FetchFailure(DashboardError):
    """A source could not be read."""


class ParseFailure(DashboardError):
    """A source's text is structurally malformed."""

    def __init__(self, source: str, reason: str, row_number: Optional[int] = None) -> None:
        self.row_number = row_number
        if row_number is not None:
            reason = f"{reason} at row {row_number}"
        super().__init__(source, reason)


class TimestampError(ValueError):
    """A date string could not be converted to a canonical timestamp."""
