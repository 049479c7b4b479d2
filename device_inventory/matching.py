"""Exact device-name lookups against a single dataset."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TypedDict

from .models import Dataset, Record


class DuplicateNameInfo(TypedDict):
    """A device name that occurs more than once within one dataset."""

    name: str
    occurrences: int
    first_position: int


def find_by_name(dataset: Dataset | None, name_column: str, target_name: str) -> Record | None:
    """Return the first record whose `name_column` equals `target_name`.

    Comparison is exact: no trimming and no case folding. Returns None when the
    dataset is absent, empty, or has no matching record.
    """

    if dataset is None:
        return None
    for record in dataset.records:
        if record.get(name_column) == target_name:
            return record
    return None


@dataclass(frozen=True, slots=True)
class NameIndex:
    """Name-to-record lookup built once per dataset.

    Duplicate names resolve to the first occurrence in file order, so lookups
    agree with `find_by_name`.
    """

    name_column: str
    records_by_name: dict[str, Record] = field(default_factory=dict)

    @classmethod
    def build(cls, dataset: Dataset, name_column: str) -> NameIndex:
        records_by_name: dict[str, Record] = {}
        for record in dataset.records:
            name = record.get(name_column)
            if name is None:
                continue
            records_by_name.setdefault(name, record)
        return cls(name_column=name_column, records_by_name=records_by_name)

    def find(self, target_name: str) -> Record | None:
        return self.records_by_name.get(target_name)


def find_duplicate_names(dataset: Dataset | None, name_column: str) -> list[DuplicateNameInfo]:
    """Return names that appear more than once in a dataset.

    Lookups always use the first occurrence; this helper only exposes where
    that rule applied so it can be reported.
    """

    if dataset is None:
        return []

    occurrences: defaultdict[str, int] = defaultdict(int)
    first_positions: dict[str, int] = {}
    for position, record in enumerate(dataset.records):
        name = record.get(name_column)
        if name is None:
            continue
        occurrences[name] += 1
        first_positions.setdefault(name, position)

    duplicates: list[DuplicateNameInfo] = []
    for name in sorted(occurrences):
        if occurrences[name] <= 1:
            continue
        duplicates.append(
            {
                "name": name,
                "occurrences": occurrences[name],
                "first_position": first_positions[name],
            }
        )
    return duplicates
