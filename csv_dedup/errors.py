from __future__ import annotations


class DedupError(ValueError):
    """Base class for errors surfaced to the caller of the dedup pipeline."""


class KeyNotFoundInTable(DedupError):
    """Raised when the dedup key column is missing from one of the tables."""

    def __init__(self, table_name: str, key: str) -> None:
        self.table_name = table_name
        self.key = key
        super().__init__(f"Column '{key}' not found in headers of '{table_name}'")


class UnknownKeyColumn(DedupError):
    """Raised when a key outside the common headers is selected."""

    def __init__(self, key: str, common_headers=None) -> None:
        self.key = key
        self.common_headers = list(common_headers or [])
        available = ", ".join(self.common_headers) or "<none>"
        super().__init__(f"Column '{key}' is not shared by all loaded files (available: {available})")


class LoadError(DedupError):
    """Raised when a file cannot be read or decoded."""
