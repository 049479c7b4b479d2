"""Core typed models shared by detection, matching, and merge modules."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TypeAlias, TypedDict

from .sources import SOURCE_ORDER, SourceKind, output_columns

Record: TypeAlias = Mapping[str, str]


@dataclass(frozen=True, slots=True)
class Dataset:
    """One parsed CSV export: an ordered, read-only sequence of records.

    `headers` is the file's header row as read. It only feeds diagnostics;
    detection uses `columns`.
    """

    records: tuple[Record, ...] = ()
    source_file: str | None = None
    headers: tuple[str, ...] = ()

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Mapping[str, str]],
        *,
        source_file: str | None = None,
        headers: Iterable[str] = (),
    ) -> Dataset:
        """Copy raw rows into read-only records."""

        return cls(
            records=tuple(MappingProxyType(dict(row)) for row in rows),
            source_file=source_file,
            headers=tuple(headers),
        )

    @property
    def columns(self) -> frozenset[str]:
        """Return the column names of the first record.

        Only the first record is inspected, so an empty dataset has no columns.
        """

        if not self.records:
            return frozenset()
        return frozenset(self.records[0])

    @property
    def total_records(self) -> int:
        """Return the number of records in the dataset."""

        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def label(self) -> str:
        """Return a display name for log messages."""

        return self.source_file or "<unnamed dataset>"


@dataclass(frozen=True, slots=True)
class SourceAssignment:
    """Which dataset, if any, was detected for each source kind."""

    datasets: Mapping[SourceKind, Dataset | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Detach from the caller's dict so later edits cannot change lookups.
        object.__setattr__(self, "datasets", MappingProxyType(dict(self.datasets)))

    def dataset_for(self, kind: SourceKind) -> Dataset | None:
        """Return the dataset assigned to `kind`, or None when not provided."""

        return self.datasets.get(kind)

    def is_provided(self, kind: SourceKind) -> bool:
        return self.dataset_for(kind) is not None

    @property
    def provided_kinds(self) -> tuple[SourceKind, ...]:
        """Return provided kinds in fixed source order."""

        return tuple(kind for kind in SOURCE_ORDER if self.is_provided(kind))


def _flag_text(flag: bool | None) -> str:
    """Render a presence flag for CSV output; unprovided sources stay blank."""

    if flag is None:
        return ""
    return "True" if flag else "False"


@dataclass(frozen=True, slots=True)
class DeviceRecord:
    """One merged output row built from a single base-source record.

    `presence` holds True (matched), False (not found), or None (source not
    provided) for every source kind. `fields` holds every canonical field of
    every source, blank where no data was merged.
    """

    base: SourceKind
    presence: Mapping[SourceKind, bool | None]
    fields: Mapping[str, str]

    @property
    def device_name(self) -> str:
        """Return the base source's device name for this row."""

        return self.fields[self.base.definition.canonical_name_field]

    def found_in(self, kind: SourceKind) -> bool | None:
        return self.presence.get(kind)

    def fields_for(self, kind: SourceKind) -> dict[str, str]:
        """Return the canonical fields contributed by one source."""

        return {name: self.fields.get(name, "") for name in kind.definition.canonical_fields}

    def as_row(self) -> dict[str, str]:
        """Flatten into an ordered dict keyed by `output_columns()`."""

        row = {kind.definition.presence_column: _flag_text(self.found_in(kind)) for kind in SOURCE_ORDER}
        for kind in SOURCE_ORDER:
            row.update(self.fields_for(kind))
        return row


class PresenceSummary(TypedDict):
    """Per-source presence counts across a report."""

    matched: int
    not_found: int
    not_provided: int


@dataclass(frozen=True, slots=True)
class Report:
    """Ordered merge output, one record per base-source record."""

    base: SourceKind
    records: tuple[DeviceRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[DeviceRecord]:
        return iter(self.records)

    @property
    def is_empty(self) -> bool:
        """Return whether there is nothing to export."""

        return not self.records

    @property
    def columns(self) -> tuple[str, ...]:
        return output_columns()

    def rows(self) -> list[dict[str, str]]:
        """Return flattened rows ready for a CSV writer."""

        return [record.as_row() for record in self.records]

    def summary(self) -> dict[SourceKind, PresenceSummary]:
        """Count matched, not-found, and not-provided rows per source."""

        counts: dict[SourceKind, PresenceSummary] = {
            kind: {"matched": 0, "not_found": 0, "not_provided": 0} for kind in SOURCE_ORDER
        }
        for record in self.records:
            for kind in SOURCE_ORDER:
                flag = record.found_in(kind)
                if flag is None:
                    counts[kind]["not_provided"] += 1
                elif flag:
                    counts[kind]["matched"] += 1
                else:
                    counts[kind]["not_found"] += 1
        return counts
