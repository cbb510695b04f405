"""Snapshot store entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

SNAPSHOT_ID_FORMAT = "%Y%m%d_%H%M%S_%f"


def snapshot_id_for(captured_at: datetime) -> str:
    """Derive the fixed-width snapshot id from a capture time."""
    return captured_at.astimezone(UTC).strftime(SNAPSHOT_ID_FORMAT)


@dataclass(frozen=True)
class SchemaSnapshot:
    """One captured schema with its capture metadata."""

    captured_at: datetime
    content_hash: str
    document: Mapping[str, Any]
    revision_id: str | None = None
    note: str | None = None

    @property
    def snapshot_id(self) -> str:
        """Return the id derived from the capture time."""
        return snapshot_id_for(self.captured_at)


@dataclass(frozen=True)
class SnapshotLoadFailure:
    """A file in the snapshot directory that could not be loaded."""

    path: Path
    reason: str


@dataclass(frozen=True)
class SnapshotListing:
    """Snapshots found in a directory, in capture order, plus skipped files."""

    snapshots: tuple[SchemaSnapshot, ...]
    failures: tuple[SnapshotLoadFailure, ...]
