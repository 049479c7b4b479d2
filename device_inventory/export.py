"""Write merged reports to timestamped CSV files."""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path

from .models import Report
from .sources import SourceKind

logger = logging.getLogger(__name__)

OUTPUT_PREFIX = "device_inventory"


def build_output_path(output_dir: str | Path, base: SourceKind, *, now: datetime | None = None) -> Path:
    """Return `<output_dir>/device_inventory_<base>_<YYYYMMDD_HHMMSS>.csv`."""

    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return Path(output_dir) / f"{OUTPUT_PREFIX}_{base.value}_{stamp}.csv"


def write_report_csv(report: Report, output_path: str | Path) -> Path | None:
    """Write report rows to CSV and return the written path.

    An empty report has nothing to export: no file is created and None is
    returned.
    """

    if report.is_empty:
        logger.warning("%s export has no records; nothing to export", report.base.label)
        return None

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(report.columns))
        writer.writeheader()
        writer.writerows(report.rows())

    logger.info("Wrote %d rows to %s", len(report), path)
    return path
