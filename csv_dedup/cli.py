#!/usr/bin/env python3
"""Command line front end for the CSV deduplicator.

Examples
--------
List the columns shared by every file::

    csv-dedup headers customers_2023.csv customers_2024.csv

Merge the files keeping the first row per e-mail address, ignoring case::

    csv-dedup dedupe customers_*.csv --key email --ignore-case --output merged.csv

The interactive dashboard lives in ``csv_dedup/streamlit_app.py``
(``streamlit run csv_dedup/streamlit_app.py``).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import ConfigError, Settings, load_settings
from .errors import DedupError
from .loaders import load_tables
from .reports import write_csv_output, write_excel_report
from .session import Session

LOGGER = logging.getLogger(__name__)

EXIT_USAGE = 2


def _load_session(args: argparse.Namespace, settings: Settings) -> Session:
    session = Session(case_sensitive=settings.case_sensitive)
    tables = load_tables(args.files, encodings=settings.encodings, max_workers=settings.max_workers)
    session.add_tables(tables)
    return session


def _output_path(path: Path, settings: Settings) -> Path:
    """Relative output paths land in the configured output directory."""

    return path if path.is_absolute() else settings.output_dir / path


def cmd_headers(args: argparse.Namespace, settings: Settings) -> int:
    session = _load_session(args, settings)
    if not session.common_headers:
        LOGGER.warning("The files share no columns.")
    for header in session.common_headers:
        print(header)
    return 0


def cmd_dedupe(args: argparse.Namespace, settings: Settings) -> int:
    session = _load_session(args, settings)
    if args.case_sensitive is not None:
        session.set_case_sensitive(args.case_sensitive)

    LOGGER.info("Common columns (%d): %s", len(session.common_headers), ", ".join(session.common_headers) or "<none>")
    result = session.select_key(args.key)

    if args.output:
        write_csv_output(result, _output_path(args.output, settings))
    else:
        sys.stdout.write(result.to_csv_text() + "\n")

    if args.excel:
        write_excel_report(result, _output_path(args.excel, settings), max_rows=settings.excel_max_rows)

    # Always shown, whatever the log level.
    sys.stderr.write(result.summary() + "\n")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Merge CSV files and drop rows whose key column repeats an earlier row.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config (default: $CSV_DEDUP_CONFIG or ./csv_dedup.yaml if present)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command")

    headers = subparsers.add_parser("headers", help="Print the columns shared by every file.")
    headers.add_argument("files", nargs="+", type=Path, help="CSV files to inspect")
    headers.set_defaults(func=cmd_headers)

    dedupe = subparsers.add_parser("dedupe", help="Merge files and drop duplicate keys.")
    dedupe.add_argument("files", nargs="+", type=Path, help="CSV files to merge")
    dedupe.add_argument("--key", required=True, help="Common column that identifies a row")
    case = dedupe.add_mutually_exclusive_group()
    case.add_argument(
        "--ignore-case",
        dest="case_sensitive",
        action="store_false",
        default=None,
        help="Treat keys differing only by case as duplicates.",
    )
    case.add_argument(
        "--case-sensitive",
        dest="case_sensitive",
        action="store_true",
        default=None,
        help="Compare keys exactly (default unless the config says otherwise).",
    )
    dedupe.add_argument("--output", type=Path, help="Write the merged CSV here instead of stdout (relative paths go under output_dir).")
    dedupe.add_argument("--excel", type=Path, help="Also write an Excel report to this path.")
    dedupe.set_defaults(func=cmd_dedupe)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return EXIT_USAGE

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
        LOGGER.error("Config error: %s", exc)
        return EXIT_USAGE

    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        return args.func(args, settings)
    except DedupError as exc:
        LOGGER.error("%s", exc)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
