"""Command-line runner for device inventory reconciliation.

This script loads every CSV export in a folder, detects which inventory source
each one came from, merges all sources onto the chosen base source, and writes
a timestamped CSV report under `output/` by default.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path

from device_inventory import (
    SOURCE_ORDER,
    InputLimits,
    MergeEngine,
    ReconciliationError,
    Report,
    SourceAssignment,
    SourceKind,
    build_output_path,
    check_inputs,
    detect_sources,
    discover_csv_files,
    find_duplicate_names,
    load_datasets,
    parse_source_kind,
    write_report_csv,
)
from device_inventory.loader import DEFAULT_MAX_FILE_BYTES, DEFAULT_MAX_FILES

DEFAULT_OUTPUT_DIR = Path("output")
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger("reconcile")


def _log_duplicate_names(assignment: SourceAssignment) -> None:
    """Warn about device names that occur more than once in a provided source."""

    for kind in assignment.provided_kinds:
        duplicates = find_duplicate_names(assignment.dataset_for(kind), kind.definition.name_column)
        for duplicate in duplicates:
            logger.warning(
                "%s lists %r %d times; record %d is used",
                kind.label,
                duplicate["name"],
                duplicate["occurrences"],
                duplicate["first_position"] + 1,
            )


def _log_summary(report: Report) -> None:
    """Log per-source presence counts for a finished report."""

    for kind, counts in report.summary().items():
        if kind is report.base:
            continue
        if counts["not_provided"] == len(report):
            logger.info("%s: not provided", kind.label)
            continue
        logger.info("%s: %d matched, %d not found", kind.label, counts["matched"], counts["not_found"])


def run(
    *,
    folder: Path,
    base: SourceKind | str,
    output_dir: Path = DEFAULT_OUTPUT_DIR,
    limits: InputLimits | None = None,
    indexed: bool = False,
    now: datetime | None = None,
) -> Path | None:
    """Reconcile every CSV in `folder` and return the written report path.

    A base source is only detected from a file with at least one record, so a
    report is always written once detection succeeds. Raises a
    `ReconciliationError` subclass when inputs are invalid or the base source
    is missing, including a base export that has a header row but no records;
    nothing is written in that case.
    """

    base = parse_source_kind(base)
    paths = discover_csv_files(folder)
    check_inputs(paths, limits)
    logger.info("Reconciling %d CSV files from %s", len(paths), folder)

    assignment = detect_sources(load_datasets(paths))
    report = MergeEngine(assignment, indexed=indexed).build_report(base)

    _log_duplicate_names(assignment)
    _log_summary(report)
    return write_report_csv(report, build_output_path(output_dir, base, now=now))


def _prompt_folder(input_fn: Callable[[str], str] = input) -> Path:
    """Ask for the input folder until a non-empty answer is given."""

    while True:
        answer = input_fn("Folder containing the CSV exports: ").strip().strip('"')
        if answer:
            return Path(answer)


def _prompt_base(input_fn: Callable[[str], str] = input) -> SourceKind:
    """Ask which source drives the report until a known source is chosen."""

    menu = "\n".join(f"  {position}. {kind.label} ({kind.value})" for position, kind in enumerate(SOURCE_ORDER, 1))
    while True:
        answer = input_fn(f"Base source:\n{menu}\nChoice: ")
        try:
            return parse_source_kind(answer)
        except ValueError:
            print(f"Unknown source: {answer!r}")


def _source_kind_arg(value: str) -> SourceKind:
    """argparse `type` wrapper around `parse_source_kind`."""

    try:
        return parse_source_kind(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _positive_int(value: str) -> int:
    """argparse `type` for counts that must be at least 1."""

    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value!r}")
    return number


def _positive_float(value: str) -> float:
    """argparse `type` for sizes that must be greater than zero."""

    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from exc
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value!r}")
    return number


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for report generation."""

    choices = ", ".join(f"{kind.value} ({kind.label})" for kind in SOURCE_ORDER)
    parser = argparse.ArgumentParser(description="Merge device inventory exports onto one base source.")
    parser.add_argument("--folder", type=Path, help="Folder containing the CSV exports (prompted if omitted)")
    parser.add_argument(
        "--base",
        type=_source_kind_arg,
        help=f"Source that drives the report, one of: {choices} (prompted if omitted)",
    )
    parser.add_argument("--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR, help="Directory for the report CSV")
    parser.add_argument(
        "--max-files",
        type=_positive_int,
        default=DEFAULT_MAX_FILES,
        help="Maximum number of CSV files",
    )
    parser.add_argument(
        "--max-file-size-mb",
        type=_positive_float,
        default=DEFAULT_MAX_FILE_BYTES / (1024 * 1024),
        help="Maximum size of any one CSV file, in MiB",
    )
    parser.add_argument("--indexed", action="store_true", help="Index each source by device name before merging")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Entrypoint for command-line execution."""

    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    folder = args.folder or _prompt_folder()
    base = args.base or _prompt_base()
    limits = InputLimits(max_files=args.max_files, max_file_bytes=int(args.max_file_size_mb * 1024 * 1024))

    try:
        output_path = run(folder=folder, base=base, output_dir=args.output_dir, limits=limits, indexed=args.indexed)
    except ReconciliationError as exc:
        logger.error("%s", exc)
        return 1

    print(f"Wrote device inventory report: {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
