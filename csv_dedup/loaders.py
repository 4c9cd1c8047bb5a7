"""
Reading files into Tables.

This is the I/O edge of the pipeline: bytes are decoded with the first encoding
that works and handed to ``parse_table``. Several files may be parsed in a
thread pool; the returned list is always ordered by file name so completion
order never shows up in the output.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import DEFAULT_ENCODINGS
from .errors import LoadError
from .session import name_sort_key
from .tables import Table, parse_table

LOGGER = logging.getLogger(__name__)


def decode_content(data: bytes, encodings: Optional[Sequence[str]] = None, *, name: str = "<bytes>") -> str:
    """Decode with the first codec that succeeds."""

    for enc in encodings or DEFAULT_ENCODINGS:
        try:
            text = data.decode(enc)
        except UnicodeDecodeError:
            continue
        except LookupError as exc:
            raise LoadError(f"Unknown encoding '{enc}' configured") from exc
        LOGGER.debug("Decoded '%s' as %s", name, enc)
        return text
    raise LoadError(f"Could not decode '{name}' with any of: {', '.join(encodings or DEFAULT_ENCODINGS)}")


def parse_many(sources: Iterable[Tuple[str, bytes]], encodings=None, max_workers: int = 1) -> List[Table]:
    """Decode and parse ``(name, raw bytes)`` pairs, returned sorted by name."""

    items = list(sources)

    def load_one(item: Tuple[str, bytes]) -> Table:
        name, data = item
        return parse_table(name, decode_content(data, encodings, name=name))

    if max_workers <= 1 or len(items) <= 1:
        tables = [load_one(item) for item in items]
    else:
        tables = []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(load_one, item) for item in items]
            for future in as_completed(futures):
                tables.append(future.result())

    return sorted(tables, key=lambda t: name_sort_key(t.name))


def read_path(path: Path) -> Tuple[str, bytes]:
    try:
        return path.name, path.read_bytes()
    except OSError as exc:
        raise LoadError(f"Could not read {path}: {exc}") from exc


def load_tables(paths: Iterable[Path], encodings=None, max_workers: int = 1) -> List[Table]:
    """Read CSV files from disk. Tables are named after the file name."""

    sources = [read_path(Path(p)) for p in paths]
    tables = parse_many(sources, encodings=encodings, max_workers=max_workers)
    LOGGER.info("Read %d file(s) from disk", len(tables))
    return tables


def tables_from_uploads(uploads: Iterable, encodings=None, max_workers: int = 1) -> List[Table]:
    """
    Parse upload objects exposing ``.name`` and ``.getvalue()`` (e.g. Streamlit's
    UploadedFile or a named BytesIO).
    """

    sources = []
    for upload in uploads:
        data = upload.getvalue()
        if isinstance(data, str):
            data = data.encode("utf-8")
        sources.append((upload.name, data))
    return parse_many(sources, encodings=encodings, max_workers=max_workers)
