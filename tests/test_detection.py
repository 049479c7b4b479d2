"""Schema-fingerprint detection tests.

File names are never consulted, so these tests build datasets directly and
vary only column sets and input order.
"""

from __future__ import annotations

import logging

import pytest

from device_inventory.detection import detect_source, detect_sources
from device_inventory.models import Dataset
from device_inventory.sources import SOURCE_ORDER, SourceKind


def _dataset_for(kind: SourceKind, name: str = "LAPTOP-1", *, source_file: str | None = None) -> Dataset:
    """Build a one-record dataset carrying every native column of `kind`."""
    record = {native: "" for native in kind.definition.column_map}
    record[kind.definition.name_column] = name
    return Dataset.from_rows([record], source_file=source_file or f"{kind.value}.csv")


def test_detect_sources_assigns_each_kind_regardless_of_input_order() -> None:
    """Every dataset lands on its source even when inputs are shuffled."""
    recovery = _dataset_for(SourceKind.RECOVERY_TRACKING)
    identity = _dataset_for(SourceKind.IDENTITY)
    endpoint = _dataset_for(SourceKind.ENDPOINT_PROTECTION)
    ticketing = _dataset_for(SourceKind.TICKETING)

    assignment = detect_sources([recovery, identity, endpoint, ticketing])

    assert assignment.dataset_for(SourceKind.IDENTITY) is identity
    assert assignment.dataset_for(SourceKind.TICKETING) is ticketing
    assert assignment.dataset_for(SourceKind.ENDPOINT_PROTECTION) is endpoint
    assert assignment.dataset_for(SourceKind.RECOVERY_TRACKING) is recovery
    assert assignment.provided_kinds == SOURCE_ORDER


def test_detect_sources_leaves_missing_kinds_unassigned(caplog: pytest.LogCaptureFixture) -> None:
    """Kinds without a matching dataset are absent, and a notice is logged."""
    caplog.set_level(logging.INFO, logger="device_inventory")

    assignment = detect_sources([_dataset_for(SourceKind.TICKETING, source_file="assets.csv")])

    assert assignment.provided_kinds == (SourceKind.TICKETING,)
    assert assignment.dataset_for(SourceKind.IDENTITY) is None
    assert not assignment.is_provided(SourceKind.RECOVERY_TRACKING)
    assert "FreshService data found: assets.csv" in caplog.text
    assert "Azure AD data not found" in caplog.text
    assert "Sophos data not found" in caplog.text
    assert "Absolute data not found" in caplog.text


def test_detect_sources_with_no_datasets_is_not_an_error() -> None:
    """An empty input list simply yields an assignment with nothing provided."""
    assignment = detect_sources([])
    assert assignment.provided_kinds == ()


def test_empty_dataset_never_matches() -> None:
    """A dataset with no records has no columns to fingerprint."""
    assert Dataset().columns == frozenset()
    assert detect_source(SourceKind.IDENTITY, [Dataset(), Dataset()]) is None


def test_only_first_record_columns_are_inspected() -> None:
    """Fingerprints found only in later records do not count."""
    dataset = Dataset.from_rows([{"displayName": "LAPTOP-1"}, {"joinType (trustType)": "Azure AD joined"}])
    assert detect_source(SourceKind.IDENTITY, [dataset]) is None


def test_fingerprint_match_is_exact() -> None:
    """Header case and spacing must match the export exactly."""
    dataset = Dataset.from_rows([{"used by": "alice", "Display Name": "LAPTOP-1"}])
    assert detect_source(SourceKind.TICKETING, [dataset]) is None


def test_first_matching_dataset_wins() -> None:
    """When two datasets carry the same fingerprint, the earlier one is used."""
    first = _dataset_for(SourceKind.IDENTITY, "FIRST")
    second = _dataset_for(SourceKind.IDENTITY, "SECOND")

    assignment = detect_sources([first, second])

    assert assignment.dataset_for(SourceKind.IDENTITY) is first


def test_assignment_is_not_exclusive(caplog: pytest.LogCaptureFixture) -> None:
    """One dataset may satisfy several fingerprints and is assigned to each."""
    combined = Dataset.from_rows(
        [{"Name": "LAPTOP-1", "Health Status": "Good", "Encryption status": "Encrypted"}],
        source_file="combined.csv",
    )

    assignment = detect_sources([combined])

    assert assignment.dataset_for(SourceKind.ENDPOINT_PROTECTION) is combined
    assert assignment.dataset_for(SourceKind.RECOVERY_TRACKING) is combined
    assert "combined.csv matched the fingerprints of several sources: Sophos, Absolute" in caplog.text


def test_header_only_export_is_named_when_its_source_is_missing(caplog: pytest.LogCaptureFixture) -> None:
    """A fingerprint in the header of an empty export is reported, not hidden."""
    header_only = Dataset.from_rows(
        [],
        source_file="azure.csv",
        headers=["displayName", "joinType (trustType)"],
    )

    assignment = detect_sources([header_only, _dataset_for(SourceKind.TICKETING)])

    assert assignment.dataset_for(SourceKind.IDENTITY) is None
    assert "Azure AD data not found: azure.csv has a 'joinType (trustType)' column but no records" in caplog.text
    assert "Sophos data not found (no file has a 'Health Status' column)" in caplog.text
