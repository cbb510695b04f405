"""Line-level structural diff service for schema documents."""

from __future__ import annotations

import difflib
from collections.abc import Collection, Sequence
from typing import Any

from schema_tracker.schema_management.schema_projection import require_object_root
from schema_tracker.snapshot_store.snapshot_models import SchemaSnapshot
from schema_tracker.structural_hashing.canonical_form import (
    CanonicalLine,
    render_canonical_lines,
)

from .diff_models import DiffMode, DiffResult

DEFAULT_PREVIEW_LIMIT = 10

_SIGNIFICANT_KEYWORDS = frozenset({"properties", "required", "type"})


def diff_schemas(
    from_document: Any,
    to_document: Any,
    mode: DiffMode = DiffMode.SUMMARY,
    *,
    from_ref: str = "from",
    to_ref: str = "to",
    preview_limit: int = DEFAULT_PREVIEW_LIMIT,
    ignored_keys: Collection[str] = (),
) -> DiffResult:
    """Compare two schema documents through their canonical line renderings.

    Raises:
      SchemaValidationError: If either document is not a JSON object at the root.
    """
    from_root = require_object_root(from_document, side="from")
    to_root = require_object_root(to_document, side="to")
    from_lines = render_canonical_lines(from_root, ignored_keys=ignored_keys)
    to_lines = render_canonical_lines(to_root, ignored_keys=ignored_keys)
    deleted, added = _changed_lines(from_lines, to_lines)

    if mode is DiffMode.FULL:
        return DiffResult(
            from_snapshot_ref=from_ref,
            to_snapshot_ref=to_ref,
            mode=mode,
            additions=tuple(line.text.strip() for line in added),
            deletions=tuple(line.text.strip() for line in deleted),
            addition_count=len(added),
            deletion_count=len(deleted),
            unified=_unified_view(from_lines, to_lines, from_ref, to_ref),
        )
    return DiffResult(
        from_snapshot_ref=from_ref,
        to_snapshot_ref=to_ref,
        mode=mode,
        additions=_preview(added, preview_limit),
        deletions=_preview(deleted, preview_limit),
        addition_count=len(added),
        deletion_count=len(deleted),
    )


def diff_snapshots(
    from_snapshot: SchemaSnapshot,
    to_snapshot: SchemaSnapshot,
    mode: DiffMode = DiffMode.SUMMARY,
    *,
    preview_limit: int = DEFAULT_PREVIEW_LIMIT,
    ignored_keys: Collection[str] = (),
) -> DiffResult:
    """Compare two stored snapshots, labelling the result with their ids."""
    return diff_schemas(
        from_snapshot.document,
        to_snapshot.document,
        mode,
        from_ref=from_snapshot.snapshot_id,
        to_ref=to_snapshot.snapshot_id,
        preview_limit=preview_limit,
        ignored_keys=ignored_keys,
    )


def _changed_lines(
    from_lines: Sequence[CanonicalLine], to_lines: Sequence[CanonicalLine]
) -> tuple[list[CanonicalLine], list[CanonicalLine]]:
    matcher = difflib.SequenceMatcher(
        None,
        [line.text for line in from_lines],
        [line.text for line in to_lines],
        autojunk=False,
    )
    deleted: list[CanonicalLine] = []
    added: list[CanonicalLine] = []
    for tag, from_start, from_end, to_start, to_end in matcher.get_opcodes():
        if tag in ("delete", "replace"):
            deleted.extend(from_lines[from_start:from_end])
        if tag in ("insert", "replace"):
            added.extend(to_lines[to_start:to_end])
    return deleted, added


def _preview(lines: Sequence[CanonicalLine], limit: int) -> tuple[str, ...]:
    ranked = sorted(
        enumerate(lines),
        key=lambda item: (_significance(item[1]), item[1].depth, item[0]),
    )
    selected = sorted(ranked[: max(limit, 0)], key=lambda item: item[0])
    return tuple(line.text.strip() for _, line in selected)


def _significance(line: CanonicalLine) -> int:
    if line.last_segment in _SIGNIFICANT_KEYWORDS or line.parent_segment == "properties":
        return 0
    return 1


def _unified_view(
    from_lines: Sequence[CanonicalLine],
    to_lines: Sequence[CanonicalLine],
    from_ref: str,
    to_ref: str,
) -> tuple[str, ...]:
    return tuple(
        line.rstrip("\n")
        for line in difflib.unified_diff(
            [line.text for line in from_lines],
            [line.text for line in to_lines],
            fromfile=from_ref,
            tofile=to_ref,
            lineterm="",
        )
    )
