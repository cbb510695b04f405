"""Capture workflow entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from schema_tracker.snapshot_store.snapshot_models import SchemaSnapshot

DEFAULT_INFERRED_TITLE = "Document"


@dataclass(frozen=True)
class CaptureRequest:
    """Input contract for capturing one snapshot.

    Exactly one of ``schema_path`` (a generated JSON Schema document) and
    ``sample_path`` (a JSON instance to infer a schema from) must be set.
    """

    schema_path: str | None = None
    sample_path: str | None = None
    note: str | None = None
    revision_id: str | None = None
    title: str = DEFAULT_INFERRED_TITLE


@dataclass(frozen=True)
class CaptureOutcome:
    """Output contract for one completed capture."""

    snapshot: SchemaSnapshot
    path: Path
    unchanged_from_latest: bool
