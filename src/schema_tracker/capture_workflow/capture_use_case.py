"""Snapshot capture use-case service."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from schema_tracker.configuration.runtime_settings import SnapshotSettings
from schema_tracker.schema_management import (
    SchemaError,
    infer_schema_from_sample,
    load_schema_file,
)
from schema_tracker.snapshot_store import (
    SnapshotStoreError,
    create_snapshot,
    load_latest,
    save_snapshot,
)

from .capture_contracts import CaptureOutcome, CaptureRequest

_LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class CaptureError(Exception):
    """Raised when a capture use case cannot be completed."""


def execute_capture(
    request: CaptureRequest,
    *,
    settings: SnapshotSettings,
    clock: Clock | None = None,
) -> CaptureOutcome:
    """Capture the requested schema as a new snapshot and return the outcome."""
    resolved_clock = clock or _utc_now
    document = _load_capture_document(request)
    try:
        previous = load_latest(settings.directory)
        snapshot = create_snapshot(
            document,
            captured_at=resolved_clock(),
            revision_id=request.revision_id,
            note=request.note,
            ignored_keys=settings.ignored_keys,
        )
        path = save_snapshot(snapshot, settings.directory, prefix=settings.filename_prefix)
    except (SchemaError, SnapshotStoreError) as exc:
        raise CaptureError(str(exc)) from exc

    unchanged = previous is not None and previous.content_hash == snapshot.content_hash
    if unchanged:
        _LOGGER.info("Captured schema matches latest snapshot %s", previous.snapshot_id)
    return CaptureOutcome(snapshot=snapshot, path=path, unchanged_from_latest=unchanged)


def _load_capture_document(request: CaptureRequest) -> Mapping[str, Any]:
    if bool(request.schema_path) == bool(request.sample_path):
        raise CaptureError("Provide exactly one of a schema file or a sample document.")
    try:
        if request.schema_path:
            return load_schema_file(request.schema_path).root
        sample = _read_sample(Path(request.sample_path or ""))
        return infer_schema_from_sample(sample, title=request.title)
    except SchemaError as exc:
        raise CaptureError(str(exc)) from exc


def _read_sample(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise CaptureError(f"Failed to read sample document {path}: {exc}") from exc
    except (json.JSONDecodeError, RecursionError) as exc:
        raise CaptureError(f"Invalid JSON in sample document {path}: {exc}") from exc


def _utc_now() -> datetime:
    return datetime.now(UTC)
