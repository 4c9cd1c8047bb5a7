"""
First-seen deduplication across several tables.

Every table contributes its own header line to the output, followed by the rows
whose key has not been seen in any earlier row of any table. Keys are the field
at the key column's index after a plain comma split. Case folding applies to
the comparison only; emitted rows are always the original strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

from .errors import KeyNotFoundInTable
from .tables import Table, split_row

LOGGER = logging.getLogger(__name__)

# Key used for rows too short to reach the key column. Distinct from "".
MISSING_FIELD = object()


@dataclass(frozen=True)
class DedupResult:
    rows: Tuple[str, ...]
    duplicate_count: int
    key: str = ""
    case_sensitive: bool = True
    table_count: int = 0
    # Index in ``rows`` of each table's header line.
    header_positions: Tuple[int, ...] = ()

    @property
    def unique_count(self) -> int:
        """Retained data rows (output rows minus one header line per table)."""

        return len(self.rows) - self.table_count

    def to_csv_text(self) -> str:
        return "\n".join(self.rows)

    def summary(self) -> str:
        mode = "Case Sensitive" if self.case_sensitive else "Case Insensitive"
        return (
            f"Processed {self.table_count} files, finding {self.duplicate_count} duplicates "
            f"and {self.unique_count} unique keys ({mode})."
        )


def key_index(table: Table, key: str) -> int:
    try:
        return table.headers.index(key)
    except ValueError as exc:
        raise KeyNotFoundInTable(table.name, key) from exc


def extract_key(row: str, index: int, case_sensitive: bool = True):
    fields = split_row(row)
    if index >= len(fields):
        return MISSING_FIELD
    value = fields[index]
    return value if case_sensitive else value.lower()


def deduplicate(tables: Sequence[Table], key: str, case_sensitive: bool = True) -> DedupResult:
    """
    Merge ``tables`` in order, keeping the first row seen for each key value.

    Raises KeyNotFoundInTable before producing any output if ``key`` is not a
    header of every table.
    """

    indexes: List[int] = [key_index(table, key) for table in tables]

    seen: Set[object] = set()
    output: List[str] = []
    header_positions: List[int] = []
    dupes = 0

    for table, index in zip(tables, indexes):
        header_positions.append(len(output))
        output.append(table.header_line)
        table_dupes = 0
        for row in table.rows:
            candidate = extract_key(row, index, case_sensitive)
            if candidate in seen:
                table_dupes += 1
                continue
            seen.add(candidate)
            output.append(row)
        dupes += table_dupes
        LOGGER.debug("'%s': %d row(s), %d duplicate(s) on '%s'", table.name, table.row_count, table_dupes, key)

    result = DedupResult(
        rows=tuple(output),
        duplicate_count=dupes,
        key=key,
        case_sensitive=case_sensitive,
        table_count=len(tables),
        header_positions=tuple(header_positions),
    )
    LOGGER.info(
        "Deduplicated %d file(s) on '%s': %d unique, %d duplicate(s)",
        len(tables),
        key,
        result.unique_count,
        dupes,
    )
    return result


def compute_result(tables: Sequence[Table], key: Optional[str], case_sensitive: bool = True) -> Optional[DedupResult]:
    """On-demand dedup; None when no key column is chosen."""

    if key is None:
        return None
    return deduplicate(tables, key, case_sensitive)
