"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SnapshotSettings:
    """Where and how snapshots are stored."""

    directory: Path
    filename_prefix: str
    ignored_keys: tuple[str, ...]


@dataclass(frozen=True)
class AnalysisSettings:
    """Corpus usage analysis settings."""

    schema_version_field: str
    sample_cap: int
    workers: int


@dataclass(frozen=True)
class DiffSettings:
    """Diff rendering settings."""

    preview_limit: int


@dataclass(frozen=True)
class TrackerConfiguration:
    """Top-level configuration aggregate."""

    path: Path | None
    snapshots: SnapshotSettings
    analysis: AnalysisSettings
    diff: DiffSettings
