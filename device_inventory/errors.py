"""Exception types raised by the reconciliation pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .sources import SourceKind


class ReconciliationError(Exception):
    """Base class for unrecoverable reconciliation failures."""


class MissingBaseSourceError(ReconciliationError):
    """Raised when the selected base source was not detected among the inputs."""

    def __init__(self, kind: SourceKind) -> None:
        self.kind = kind
        super().__init__(
            f"Base source {kind.label} ({kind.value}) was not found in the input files; "
            f"expected a CSV with a {kind.definition.fingerprint!r} column and at least one record"
        )


class InputValidationError(ReconciliationError):
    """Raised when input files fail discovery or sanity checks."""
