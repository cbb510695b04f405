"""Snapshot store exports."""

from .snapshot_models import (
    SchemaSnapshot,
    SnapshotListing,
    SnapshotLoadFailure,
    snapshot_id_for,
)
from .snapshot_repository import (
    DEFAULT_FILENAME_PREFIX,
    LATEST_REFERENCE,
    PREVIOUS_REFERENCE,
    SnapshotFormatError,
    SnapshotNotFoundError,
    SnapshotStoreError,
    create_snapshot,
    find_snapshot,
    load_all,
    load_latest,
    load_snapshot_file,
    save_snapshot,
    scan_snapshots,
    snapshot_from_record,
    snapshot_to_record,
)

__all__ = [
    "DEFAULT_FILENAME_PREFIX",
    "LATEST_REFERENCE",
    "PREVIOUS_REFERENCE",
    "SchemaSnapshot",
    "SnapshotFormatError",
    "SnapshotListing",
    "SnapshotLoadFailure",
    "SnapshotNotFoundError",
    "SnapshotStoreError",
    "create_snapshot",
    "find_snapshot",
    "load_all",
    "load_latest",
    "load_snapshot_file",
    "save_snapshot",
    "scan_snapshots",
    "snapshot_from_record",
    "snapshot_to_record",
    "snapshot_id_for",
]
