from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .dedup import DedupResult, compute_result
from .errors import UnknownKeyColumn
from .headers import intersect_headers
from .tables import Table

LOGGER = logging.getLogger(__name__)


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def name_sort_key(name: str) -> Tuple[str, str, str]:
    """
    Locale-style collation: letters first compare without accents or case,
    then accents break ties, then case with lowercase first.
    """

    return (_strip_accents(name).casefold(), name.casefold(), name.swapcase())


@dataclass
class Session:
    """
    Loaded tables plus the state derived from them.

    ``common_headers`` follows every change to ``tables``. ``result`` is cleared
    whenever tables, the selected key or the case flag change and is rebuilt by
    ``select_key`` or ``current_result``.
    """

    case_sensitive: bool = True
    tables: List[Table] = field(default_factory=list)
    common_headers: List[str] = field(default_factory=list, init=False)
    selected_key: Optional[str] = field(default=None, init=False)
    result: Optional[DedupResult] = field(default=None, init=False)

    def __post_init__(self) -> None:
        initial, self.tables = list(self.tables), []
        self.add_tables(initial)

    @property
    def table_names(self) -> List[str]:
        return [table.name for table in self.tables]

    @property
    def can_deduplicate(self) -> bool:
        return len(self.tables) > 1 and bool(self.common_headers)

    def file_summaries(self) -> List[Tuple[str, int]]:
        return [(table.name, table.row_count) for table in self.tables]

    def get_table(self, name: str) -> Optional[Table]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def _refresh_headers(self) -> None:
        self.common_headers = intersect_headers(self.tables)
        if self.selected_key is not None and self.selected_key not in self.common_headers:
            LOGGER.info("Column '%s' is no longer shared by all files; clearing selection", self.selected_key)
            self.selected_key = None

    def add_tables(self, new_tables: Iterable[Table]) -> List[Table]:
        """Add tables whose names are not loaded yet. Returns the ones actually added."""

        existing = set(self.table_names)
        added: List[Table] = []
        for table in new_tables:
            if table.name in existing:
                LOGGER.debug("Skipping '%s': a file with that name is already loaded", table.name)
                continue
            existing.add(table.name)
            added.append(table)

        if not added:
            return added

        self.tables = sorted([*self.tables, *added], key=lambda t: name_sort_key(t.name))
        self.result = None
        self._refresh_headers()
        LOGGER.info("Loaded %d file(s); %d common column(s)", len(added), len(self.common_headers))
        return added

    def remove_table(self, name: str) -> bool:
        remaining = [table for table in self.tables if table.name != name]
        if len(remaining) == len(self.tables):
            return False

        self.tables = remaining
        self.result = None
        self._refresh_headers()
        LOGGER.info("Removed '%s'; %d file(s) remain", name, len(self.tables))
        return True

    def set_case_sensitive(self, flag: bool) -> None:
        self.case_sensitive = bool(flag)
        self.result = None

    def select_key(self, header: str) -> DedupResult:
        """
        Deduplicate on ``header`` and store the result.

        The key must be one of ``common_headers``. Nothing is modified when the
        key is rejected or the dedup itself fails.
        """

        if header not in self.common_headers:
            raise UnknownKeyColumn(header, self.common_headers)

        result = compute_result(self.tables, header, self.case_sensitive)
        self.selected_key = header
        self.result = result
        return result

    def compute_result(self) -> Optional[DedupResult]:
        """Dedup from the current inputs without touching stored state."""

        return compute_result(self.tables, self.selected_key, self.case_sensitive)

    def current_result(self) -> Optional[DedupResult]:
        """Stored result, rebuilt first if it was invalidated."""

        if self.result is None and self.selected_key is not None:
            self.result = self.compute_result()
        return self.result

    def clear(self) -> None:
        self.tables = []
        self.common_headers = []
        self.selected_key = None
        self.result = None
