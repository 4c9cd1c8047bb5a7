"""
Table parsing for uploaded CSV text.

Parsing is deliberately naive: lines are split on ``\\n``, carriage returns and
``#`` characters are stripped, and only the header line is split on commas.
Data rows are kept as raw strings so consumers split them only when they need
field level access. Quoted fields containing commas or newlines are not
supported and will misparse.

Unlike the browser tool this replaces, the empty line after a terminating
newline is not kept as a data row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

LOGGER = logging.getLogger(__name__)

DELIMITER = ","
STRIP_CHARS = ("\r", "#")


@dataclass(frozen=True)
class Table:
    """One parsed CSV file: header names plus unsplit data rows."""

    name: str
    headers: Tuple[str, ...]
    rows: Tuple[str, ...] = ()

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def header_line(self) -> str:
        return DELIMITER.join(self.headers)

    def split_rows(self) -> List[List[str]]:
        return [split_row(row) for row in self.rows]


def split_row(row: str) -> List[str]:
    return row.split(DELIMITER)


def _sanitize_line(line: str) -> str:
    for ch in STRIP_CHARS:
        line = line.replace(ch, "")
    return line


def parse_table(name: str, content: str) -> Table:
    """
    Parse raw file text into a Table.

    Never raises on content. Empty input gives ``headers == ("",)`` and no
    rows. The empty string left after a terminating newline is the line
    terminator, not a data row, and is dropped; interior blank lines are kept.
    """

    lines = [_sanitize_line(line) for line in content.split("\n")]
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()

    headers = tuple(lines[0].split(DELIMITER))
    rows = tuple(lines[1:])

    if headers == ("",):
        LOGGER.warning("File '%s' has no header line; loaded as an empty table", name)
    LOGGER.debug("Parsed '%s': %d column(s), %d row(s)", name, len(headers), len(rows))
    return Table(name=name, headers=headers, rows=rows)
