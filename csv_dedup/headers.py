from __future__ import annotations

from typing import Iterable, List, Sequence

from .tables import Table


def _uniq(seq: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for val in seq:
        if val in seen:
            continue
        seen.add(val)
        ordered.append(val)
    return ordered


def intersect_headers(tables: Sequence[Table]) -> List[str]:
    """
    Column names present in every table.

    Output follows the first table's header order so repeated calls on the same
    tables always agree. Empty when no tables are given.
    """

    if not tables:
        return []

    shared = set(tables[0].headers)
    for table in tables[1:]:
        shared &= set(table.headers)
    return [name for name in _uniq(tables[0].headers) if name in shared]
