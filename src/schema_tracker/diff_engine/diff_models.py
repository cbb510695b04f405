"""Diff engine entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiffMode(str, Enum):
    """How much of a structural delta to return."""

    SUMMARY = "summary"
    FULL = "full"


@dataclass(frozen=True)
class DiffResult:
    """Structural delta between two schema documents.

    In summary mode ``additions`` and ``deletions`` hold a bounded preview of the most
    significant lines; the counts are always exact.
    """

    from_snapshot_ref: str
    to_snapshot_ref: str
    mode: DiffMode
    additions: tuple[str, ...]
    deletions: tuple[str, ...]
    addition_count: int
    deletion_count: int
    unified: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Return True when the documents are structurally identical."""
        return self.addition_count == 0 and self.deletion_count == 0

    @property
    def is_truncated(self) -> bool:
        """Return True when the preview omits changed lines."""
        return (
            len(self.additions) < self.addition_count
            or len(self.deletions) < self.deletion_count
        )
