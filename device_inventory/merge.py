"""Merge every source's data onto the records of a chosen base source."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from types import MappingProxyType
from typing import TypeAlias

from .errors import MissingBaseSourceError
from .matching import NameIndex, find_by_name
from .models import DeviceRecord, Record, Report, SourceAssignment
from .sources import SOURCE_ORDER, SourceKind, blank_fields, map_fields, parse_source_kind

logger = logging.getLogger(__name__)

Lookup: TypeAlias = Callable[[str], Record | None]


def assemble_report(base: SourceKind, records: Iterable[DeviceRecord]) -> Report:
    """Collect merged records into an immutable report, preserving order."""

    return Report(base=base, records=tuple(records))


class MergeEngine:
    """Builds a report for any base source from one source assignment.

    Lookups scan each dataset linearly by default. With `indexed=True` a
    name index is built per source on first use, which gives the same
    first-occurrence results with constant-time lookups.
    """

    def __init__(self, assignment: SourceAssignment, *, indexed: bool = False) -> None:
        self.assignment = assignment
        self.indexed = indexed
        self._lookups: dict[SourceKind, Lookup] = {}

    def _lookup_for(self, kind: SourceKind) -> Lookup | None:
        """Return a name lookup for a provided source, or None if not provided."""

        dataset = self.assignment.dataset_for(kind)
        if dataset is None:
            return None

        if kind not in self._lookups:
            name_column = kind.definition.name_column
            if self.indexed:
                self._lookups[kind] = NameIndex.build(dataset, name_column).find
            else:
                self._lookups[kind] = lambda name: find_by_name(dataset, name_column, name)
        return self._lookups[kind]

    def merge_record(self, base: SourceKind, record: Record) -> DeviceRecord:
        """Merge one base record with its matches from every other source."""

        name = record.get(base.definition.name_column) or ""
        if not name:
            logger.debug(
                "%s record has an empty %r value; it matches unnamed records in other sources",
                base.label,
                base.definition.name_column,
            )
        presence: dict[SourceKind, bool | None] = {}
        fields: dict[str, str] = {}

        for kind in SOURCE_ORDER:
            if kind is base:
                presence[kind] = True
                fields.update(map_fields(kind, record))
                continue

            lookup = self._lookup_for(kind)
            if lookup is None:
                presence[kind] = None
                fields.update(blank_fields(kind))
                continue

            match = lookup(name)
            if match is None:
                presence[kind] = False
                fields.update(blank_fields(kind))
            else:
                presence[kind] = True
                fields.update(map_fields(kind, match))

        return DeviceRecord(
            base=base,
            presence=MappingProxyType(presence),
            fields=MappingProxyType(fields),
        )

    def build_report(self, base: SourceKind | str) -> Report:
        """Merge every record of the base source, in base file order.

        Raises `MissingBaseSourceError` before doing any work when the base
        source was not provided.
        """

        base = parse_source_kind(base)
        base_dataset = self.assignment.dataset_for(base)
        if base_dataset is None:
            raise MissingBaseSourceError(base)

        report = assemble_report(base, (self.merge_record(base, record) for record in base_dataset.records))
        other_sources = sum(1 for kind in self.assignment.provided_kinds if kind is not base)
        logger.info("Merged %d %s records against %d other sources", len(report), base.label, other_sources)
        return report


def build_report(base: SourceKind | str, assignment: SourceAssignment, *, indexed: bool = False) -> Report:
    """Build a merged report for `base` from a source assignment."""

    return MergeEngine(assignment, indexed=indexed).build_report(base)
