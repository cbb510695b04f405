"""Diff engine exports."""

from .diff_models import DiffMode, DiffResult
from .schema_differ import DEFAULT_PREVIEW_LIMIT, diff_schemas, diff_snapshots

__all__ = [
    "DEFAULT_PREVIEW_LIMIT",
    "DiffMode",
    "DiffResult",
    "diff_schemas",
    "diff_snapshots",
]
