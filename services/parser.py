"""Turns source text into raw rows."""

from __future__ import annotations

import csv
import io
import logging
from typing import List

from models.records import RawRow, SourceRow
from services.errors import ParseFailure

logger = logging.getLogger(__name__)


def _is_blank(row: RawRow) -> bool:
    return not any(field.strip() for field in row)


def parse_rows(text: str, source: str, min_fields: int = 1) -> List[SourceRow]:
    """Split ``text`` into rows, dropping the header row and blank lines.

    Each row keeps the file line it was read from, so later warnings can
    point at the right line even after blank lines were skipped.

    Raises :class:`ParseFailure` if the text has unbalanced quoting or a data
    row carries fewer than ``min_fields`` fields. Nothing is returned for a
    source that fails.
    """
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    rows: List[SourceRow] = []
    try:
        for index, row in enumerate(reader):
            if index == 0:
                # header
                continue
            if _is_blank(row):
                continue
            if len(row) < min_fields:
                raise ParseFailure(
                    source,
                    f"expected at least {min_fields} fields, found {len(row)}",
                    row_number=reader.line_num,
                )
            rows.append(
                SourceRow(
                    line_number=reader.line_num,
                    fields=[field.strip() for field in row],
                )
            )
    except csv.Error as exc:
        raise ParseFailure(source, f"malformed CSV: {exc}", row_number=reader.line_num) from exc

    logger.debug("Parsed source rows", extra={"source": source, "row_count": len(rows)})
    return rows
