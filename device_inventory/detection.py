"""Identify which dataset belongs to which source by schema fingerprint."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from .models import Dataset, SourceAssignment
from .sources import SOURCE_ORDER, SourceKind

logger = logging.getLogger(__name__)


def detect_source(kind: SourceKind, datasets: Sequence[Dataset]) -> int | None:
    """Return the index of the first dataset carrying `kind`'s fingerprint column."""

    fingerprint = kind.definition.fingerprint
    for index, dataset in enumerate(datasets):
        if fingerprint in dataset.columns:
            return index
    return None


def _warn_not_found(kind: SourceKind, datasets: Sequence[Dataset]) -> None:
    """Log why `kind` was not detected.

    A header-only export carries the fingerprint in its header row but has no
    first record to inspect, so it is named explicitly.
    """

    fingerprint = kind.definition.fingerprint
    header_only = [dataset.label for dataset in datasets if dataset.is_empty and fingerprint in dataset.headers]
    if header_only:
        logger.warning(
            "%s data not found: %s has a %r column but no records",
            kind.label,
            ", ".join(header_only),
            fingerprint,
        )
        return
    logger.warning("%s data not found (no file has a %r column)", kind.label, fingerprint)


def detect_sources(datasets: Sequence[Dataset]) -> SourceAssignment:
    """Assign datasets to source kinds without relying on file names.

    Each kind takes the first dataset (in input order) whose first record has
    the kind's fingerprint column. Assignment is not exclusive: one dataset may
    satisfy several fingerprints, in which case it is assigned to each of them
    and a warning is logged. Kinds with no matching dataset are left unassigned.
    """

    assigned: dict[SourceKind, Dataset | None] = {}
    kinds_by_index: defaultdict[int, list[SourceKind]] = defaultdict(list)

    for kind in SOURCE_ORDER:
        index = detect_source(kind, datasets)
        if index is None:
            assigned[kind] = None
            _warn_not_found(kind, datasets)
            continue

        dataset = datasets[index]
        assigned[kind] = dataset
        kinds_by_index[index].append(kind)
        logger.info("%s data found: %s (%d records)", kind.label, dataset.label, dataset.total_records)

    for index, kinds in kinds_by_index.items():
        if len(kinds) > 1:
            labels = ", ".join(kind.label for kind in kinds)
            logger.warning("%s matched the fingerprints of several sources: %s", datasets[index].label, labels)

    return SourceAssignment(datasets=assigned)
