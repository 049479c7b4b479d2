"""Tests for report file naming and CSV writing."""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path

import pytest

from device_inventory.export import build_output_path, write_report_csv
from device_inventory.merge import build_report
from device_inventory.models import Dataset, Report, SourceAssignment
from device_inventory.sources import SourceKind, output_columns


def test_build_output_path_includes_base_and_timestamp(tmp_path: Path) -> None:
    """Output names carry the base source and a sortable timestamp."""
    path = build_output_path(tmp_path, SourceKind.ENDPOINT_PROTECTION, now=datetime(2026, 1, 2, 3, 4, 5))
    assert path == tmp_path / "device_inventory_endpoint_protection_20260102_030405.csv"


def test_write_report_csv_writes_header_and_rows(tmp_path: Path) -> None:
    """Written CSV has the full report header and one row per device."""
    assignment = SourceAssignment(
        {
            SourceKind.IDENTITY: Dataset.from_rows([{"displayName": "LAPTOP-1"}, {"displayName": "LAPTOP-2"}]),
            SourceKind.TICKETING: Dataset.from_rows([{"Display Name": "LAPTOP-2", "Serial Number": "SN2"}]),
        }
    )
    report = build_report(SourceKind.IDENTITY, assignment)
    output_path = tmp_path / "nested" / "report.csv"

    written = write_report_csv(report, output_path)

    assert written == output_path
    with output_path.open(encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        rows = list(reader)
    assert reader.fieldnames == list(output_columns())
    assert [row["identity_display_name"] for row in rows] == ["LAPTOP-1", "LAPTOP-2"]
    assert [row["in_ticketing"] for row in rows] == ["False", "True"]
    assert [row["in_recovery_tracking"] for row in rows] == ["", ""]
    assert rows[1]["ticketing_serial_number"] == "SN2"


def test_write_report_csv_skips_empty_report(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """An empty report is nothing to export: no file is created."""
    output_path = tmp_path / "report.csv"

    with caplog.at_level(logging.WARNING):
        written = write_report_csv(Report(base=SourceKind.TICKETING), output_path)

    assert written is None
    assert not output_path.exists()
    assert "nothing to export" in caplog.text
