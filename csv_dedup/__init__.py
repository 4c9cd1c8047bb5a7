"""
Merge CSV files on their shared columns and drop rows whose key column repeats
an earlier row.
"""

from .dedup import DedupResult, compute_result, deduplicate  # noqa: F401
from .errors import DedupError, KeyNotFoundInTable, LoadError, UnknownKeyColumn  # noqa: F401
from .headers import intersect_headers  # noqa: F401
from .session import Session  # noqa: F401
from .tables import Table, parse_table  # noqa: F401

__all__ = [
    "DedupResult",
    "compute_result",
    "deduplicate",
    "DedupError",
    "KeyNotFoundInTable",
    "LoadError",
    "UnknownKeyColumn",
    "intersect_headers",
    "Session",
    "Table",
    "parse_table",
]
