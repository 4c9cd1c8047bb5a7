"""
Preview frames and file exports for dedup results.

Polars frames are used for on-screen previews; the Excel report goes through
pandas with the xlsxwriter engine.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence

import pandas as pd
import polars as pl

from .dedup import DedupResult
from .tables import Table, split_row

LOGGER = logging.getLogger(__name__)

EXCEL_ROW_LIMIT = 1_048_575


def sanitize_for_excel(val):
    """Prevent formula injection in Excel."""
    if val is None:
        return ""
    s = str(val)
    if s.startswith(("=", "+", "-", "@")):
        return "'" + s
    return s


def _frame_columns(headers: Sequence[str]) -> List[str]:
    """Make header names usable as frame columns: blanks get ``col_N``, repeats get a suffix."""

    columns: List[str] = []
    used = set()
    for idx, header in enumerate(headers):
        name = header.strip() or f"col_{idx + 1}"
        original = name
        suffix = 1
        while name in used:
            suffix += 1
            name = f"{original}_{suffix}"
        used.add(name)
        columns.append(name)
    return columns


def _fit_row(fields: List[str], width: int) -> List[str]:
    if len(fields) < width:
        return fields + [""] * (width - len(fields))
    if len(fields) > width:
        # Extra commas stay in the last column so no text is lost.
        return fields[: width - 1] + [",".join(fields[width - 1 :])]
    return fields


def table_to_frame(table: Table, limit: int | None = None) -> pl.DataFrame:
    """Split a table's rows into a string-typed Polars frame for display."""

    columns = _frame_columns(table.headers)
    rows = table.rows if limit is None else table.rows[:limit]
    data = [_fit_row(split_row(row), len(columns)) for row in rows]
    schema = {col: pl.Utf8 for col in columns}
    return pl.DataFrame(data, schema=schema, orient="row")


def files_frame(tables: Sequence[Table]) -> pl.DataFrame:
    """One line per loaded file: name, column count, row count."""

    return pl.DataFrame(
        {
            "file": [t.name for t in tables],
            "columns": [len(t.headers) for t in tables],
            "rows": [t.row_count for t in tables],
        },
        schema={"file": pl.Utf8, "columns": pl.Int64, "rows": pl.Int64},
    )


def summary_records(result: DedupResult) -> List[Dict[str, object]]:
    return [
        {"Metric": "Files processed", "Value": result.table_count},
        {"Metric": "Key column", "Value": result.key},
        {"Metric": "Case sensitive", "Value": "Yes" if result.case_sensitive else "No"},
        {"Metric": "Unique keys", "Value": result.unique_count},
        {"Metric": "Duplicates dropped", "Value": result.duplicate_count},
    ]


def write_csv_output(result: DedupResult, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(result.to_csv_text(), encoding="utf-8")
    LOGGER.info("Wrote deduplicated CSV: %s", path)
    return path


def write_excel_report(result: DedupResult, path: Path, max_rows: int = 200_000) -> Path:
    """
    Write the merged rows to a ``Deduplicated`` sheet (one cell per field,
    header lines included as they appear in the output) plus a ``Summary`` sheet.
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    limit = min(max_rows, EXCEL_ROW_LIMIT)
    rows = result.rows
    if len(rows) > limit:
        LOGGER.warning("Truncating Excel output to %d of %d rows", limit, len(rows))
        rows = rows[:limit]

    cells = [[sanitize_for_excel(v) for v in split_row(row)] for row in rows]
    df_rows = pd.DataFrame(cells)
    df_summary = pd.DataFrame(summary_records(result))

    with pd.ExcelWriter(path, engine="xlsxwriter") as writer:
        df_rows.to_excel(writer, sheet_name="Deduplicated", index=False, header=False)
        df_summary.to_excel(writer, sheet_name="Summary", index=False)

        workbook = writer.book
        fmt_header = workbook.add_format({"bold": True, "bg_color": "#D3D3D3", "border": 1})
        sheet = writer.sheets["Deduplicated"]
        for idx in result.header_positions:
            if idx < len(cells):
                sheet.write_row(idx, 0, cells[idx], fmt_header)
        writer.sheets["Summary"].set_column(0, 0, 22)

    LOGGER.info("Wrote Excel report: %s", path)
    return path
