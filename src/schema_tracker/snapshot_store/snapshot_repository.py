"""Snapshot persistence service.

Each snapshot is written to its own JSON file named after its UTC capture time, so
the lexical order of file names is the chronological order of captures.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Collection, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from schema_tracker.schema_management.schema_projection import (
    SchemaValidationError,
    require_object_root,
    validate_json_tree,
)
from schema_tracker.structural_hashing import compute_content_hash

from .snapshot_models import (
    SchemaSnapshot,
    SnapshotListing,
    SnapshotLoadFailure,
    snapshot_id_for,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_FILENAME_PREFIX = "schema"
LATEST_REFERENCE = "latest"
PREVIOUS_REFERENCE = "previous"

_FRACTION_PATTERN = re.compile(r"\.(\d+)")


class SnapshotStoreError(Exception):
    """Raised when a snapshot file or directory cannot be read or written."""


class SnapshotFormatError(SnapshotStoreError):
    """Raised when a file does not contain a valid snapshot record."""


class SnapshotNotFoundError(SnapshotStoreError):
    """Raised when a snapshot reference does not resolve."""


def create_snapshot(
    document: Mapping[str, Any],
    *,
    captured_at: datetime,
    revision_id: str | None = None,
    note: str | None = None,
    ignored_keys: Collection[str] = (),
) -> SchemaSnapshot:
    """Build a snapshot record for a schema document."""
    root = require_object_root(document)
    if captured_at.tzinfo is None:
        captured_at = captured_at.replace(tzinfo=UTC)
    return SchemaSnapshot(
        captured_at=captured_at.astimezone(UTC),
        content_hash=compute_content_hash(root, ignored_keys=ignored_keys),
        document=root,
        revision_id=revision_id,
        note=note,
    )


def snapshot_to_record(snapshot: SchemaSnapshot) -> dict[str, Any]:
    """Return the JSON record persisted for one snapshot."""
    return {
        "timestamp": snapshot.captured_at.isoformat(),
        "git_commit": snapshot.revision_id,
        "schema_hash": snapshot.content_hash,
        "note": snapshot.note,
        "schema": snapshot.document,
    }


def save_snapshot(
    snapshot: SchemaSnapshot,
    directory: Path | str,
    *,
    prefix: str = DEFAULT_FILENAME_PREFIX,
) -> Path:
    """Write a snapshot to its own file and return the file path.

    Raises:
      SnapshotStoreError: If the snapshot cannot be serialized as UTF-8 JSON, the
        directory cannot be created, the target file already exists, or writing fails.
    """
    try:
        text = json.dumps(
            snapshot_to_record(snapshot), indent=2, ensure_ascii=False, allow_nan=False
        )
        payload = (text + "\n").encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SnapshotStoreError(
            f"Snapshot {snapshot.snapshot_id} cannot be serialized as UTF-8 JSON: {exc}"
        ) from exc

    target_dir = _ensure_directory(directory)
    destination = target_dir / f"{prefix}_{snapshot.snapshot_id}.json"
    try:
        with destination.open("xb") as handle:
            handle.write(payload)
    except FileExistsError as exc:
        raise SnapshotStoreError(f"Snapshot file already exists: {destination}") from exc
    except OSError as exc:
        raise SnapshotStoreError(f"Failed to write snapshot file {destination}: {exc}") from exc
    _LOGGER.info("Saved snapshot %s to %s", snapshot.snapshot_id, destination)
    return destination


def load_snapshot_file(path: Path | str) -> SchemaSnapshot:
    """Load a single snapshot file."""
    snapshot_path = Path(path)
    try:
        text = snapshot_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SnapshotStoreError(f"Failed to read snapshot file {snapshot_path}: {exc}") from exc
    try:
        record = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise SnapshotFormatError(f"Invalid JSON in snapshot file {snapshot_path}: {exc}") from exc
    return snapshot_from_record(record, source=snapshot_path)


def snapshot_from_record(record: Any, *, source: Path | str = "<record>") -> SchemaSnapshot:
    """Rebuild a snapshot from its persisted record."""
    if not isinstance(record, Mapping):
        raise SnapshotFormatError(f"Snapshot record in {source} must be a JSON object.")
    missing = [key for key in ("timestamp", "schema_hash", "schema") if key not in record]
    if missing:
        raise SnapshotFormatError(
            f"Snapshot record in {source} is missing: {', '.join(missing)}"
        )
    try:
        document = require_object_root(record["schema"])
        validate_json_tree(document)
    except SchemaValidationError as exc:
        raise SnapshotFormatError(f"Snapshot record in {source}: {exc}") from exc
    return SchemaSnapshot(
        captured_at=_parse_timestamp(record["timestamp"], source),
        content_hash=_require_string(record["schema_hash"], "schema_hash", source),
        document=document,
        revision_id=_optional_string(record.get("git_commit"), "git_commit", source),
        note=_optional_string(record.get("note"), "note", source),
    )


def scan_snapshots(directory: Path | str) -> SnapshotListing:
    """List all snapshots in a directory, skipping and reporting unreadable files."""
    snapshot_dir = _ensure_directory(directory)
    snapshots: list[SchemaSnapshot] = []
    failures: list[SnapshotLoadFailure] = []
    for path in sorted(snapshot_dir.glob("*.json")):
        try:
            snapshots.append(load_snapshot_file(path))
        except SnapshotStoreError as exc:
            _LOGGER.warning("Skipping snapshot file %s: %s", path, exc)
            failures.append(SnapshotLoadFailure(path=path, reason=str(exc)))
    snapshots.sort(key=lambda snapshot: (snapshot.captured_at, snapshot.snapshot_id))
    return SnapshotListing(snapshots=tuple(snapshots), failures=tuple(failures))


def load_all(directory: Path | str) -> list[SchemaSnapshot]:
    """Return every loadable snapshot ordered by capture time."""
    return list(scan_snapshots(directory).snapshots)


def load_latest(directory: Path | str) -> SchemaSnapshot | None:
    """Return the most recent snapshot, or None for an empty directory."""
    snapshots = load_all(directory)
    return snapshots[-1] if snapshots else None


def find_snapshot(directory: Path | str, reference: str) -> SchemaSnapshot:
    """Resolve ``latest``, ``previous`` or a snapshot id to a stored snapshot."""
    snapshots = load_all(directory)
    if reference == LATEST_REFERENCE:
        if not snapshots:
            raise SnapshotNotFoundError(f"No snapshots stored in {directory}.")
        return snapshots[-1]
    if reference == PREVIOUS_REFERENCE:
        if len(snapshots) < 2:
            raise SnapshotNotFoundError(f"Fewer than two snapshots stored in {directory}.")
        return snapshots[-2]
    for snapshot in snapshots:
        if snapshot.snapshot_id == reference:
            return snapshot
    raise SnapshotNotFoundError(f"Snapshot '{reference}' not found in {directory}.")


def _ensure_directory(directory: Path | str) -> Path:
    snapshot_dir = Path(directory)
    try:
        snapshot_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SnapshotStoreError(
            f"Failed to create snapshot directory {snapshot_dir}: {exc}"
        ) from exc
    return snapshot_dir


def _parse_timestamp(value: Any, source: Path | str) -> datetime:
    if not isinstance(value, str):
        raise SnapshotFormatError(f"Snapshot timestamp in {source} must be a string.")
    # Fractions beyond microseconds (e.g. nanosecond RFC 3339 output) are truncated.
    normalized = _FRACTION_PATTERN.sub(lambda match: "." + match.group(1)[:6], value, count=1)
    try:
        parsed = datetime.fromisoformat(normalized)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)
    except (ValueError, OverflowError) as exc:
        raise SnapshotFormatError(f"Invalid snapshot timestamp in {source}: {value}") from exc


def _require_string(value: Any, field_name: str, source: Path | str) -> str:
    if not isinstance(value, str) or not value:
        raise SnapshotFormatError(f"Snapshot {field_name} in {source} must be a non-empty string.")
    return value


def _optional_string(value: Any, field_name: str, source: Path | str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SnapshotFormatError(f"Snapshot {field_name} in {source} must be a string.")
    return value
