"""CSV discovery, input sanity checks, and parsing into datasets."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .errors import InputValidationError
from .models import Dataset

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILES = 4
DEFAULT_MAX_FILE_BYTES = 50 * 1024 * 1024


@dataclass(frozen=True, slots=True)
class InputLimits:
    """Thresholds applied to input files before they are parsed."""

    max_files: int = DEFAULT_MAX_FILES
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES


def discover_csv_files(folder: str | Path) -> list[Path]:
    """Return CSV files directly inside `folder`, sorted by file name."""

    path = Path(folder)
    if not path.is_dir():
        raise InputValidationError(f"Input folder does not exist: {path}")

    return sorted(
        (child for child in path.iterdir() if child.is_file() and child.suffix.lower() == ".csv"),
        key=lambda child: child.name,
    )


def check_inputs(paths: Sequence[Path], limits: InputLimits | None = None) -> None:
    """Raise `InputValidationError` when the input file set breaks `limits`."""

    limits = limits or InputLimits()

    if not paths:
        raise InputValidationError("No CSV files were found to reconcile")

    if len(paths) > limits.max_files:
        raise InputValidationError(f"Found {len(paths)} CSV files; at most {limits.max_files} are supported")

    for path in paths:
        size = path.stat().st_size
        if size > limits.max_file_bytes:
            raise InputValidationError(
                f"{path.name} is {size} bytes, larger than the {limits.max_file_bytes} byte limit"
            )


def load_dataset(csv_path: str | Path) -> Dataset:
    """Parse one CSV export into a dataset.

    Header strings are kept exactly as exported because source detection and
    field mapping depend on them. Blank rows are skipped; short rows are padded
    with empty strings.
    """

    path = Path(csv_path)
    rows: list[dict[str, str]] = []

    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        headers = reader.fieldnames
        if not headers:
            raise InputValidationError(f"{path.name} has no header row")

        for line_number, raw_row in enumerate(reader, start=2):
            if None in raw_row:
                # DictReader uses `None` for extra unnamed columns.
                logger.warning("%s row %d has more columns than the header; extras ignored", path.name, line_number)

            row = {header: raw_row.get(header) or "" for header in headers}
            if not any(value.strip() for value in row.values()):
                logger.debug("%s row %d is blank and was skipped", path.name, line_number)
                continue
            rows.append(row)

    if not rows:
        logger.warning("%s has a header row but no records", path.name)
    logger.debug("Loaded %d records from %s", len(rows), path.name)
    return Dataset.from_rows(rows, source_file=path.name, headers=headers)


def load_datasets(paths: Iterable[str | Path]) -> list[Dataset]:
    """Load several CSV exports, preserving input order."""

    return [load_dataset(path) for path in paths]
