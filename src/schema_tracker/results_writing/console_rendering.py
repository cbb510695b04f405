"""Plain-text rendering of results for the command line."""

from __future__ import annotations

from collections.abc import Sequence

from schema_tracker.compatibility_checking.verdict_models import CompatibilityVerdict
from schema_tracker.diff_engine.diff_models import DiffMode, DiffResult
from schema_tracker.snapshot_store.snapshot_models import SchemaSnapshot
from schema_tracker.structural_hashing import short_hash
from schema_tracker.usage_analysis.usage_models import FieldUsageReport


def render_snapshot_line(snapshot: SchemaSnapshot) -> str:
    """Render one snapshot listing line."""
    revision = snapshot.revision_id[:8] if snapshot.revision_id else "-"
    note = snapshot.note or ""
    return f"{snapshot.snapshot_id}  {short_hash(snapshot.content_hash)}  {revision:<8}  {note}"


def render_diff(result: DiffResult) -> list[str]:
    """Render a diff result as output lines."""
    lines = [
        f"{result.from_snapshot_ref} -> {result.to_snapshot_ref}: "
        f"{result.addition_count} additions, {result.deletion_count} deletions"
    ]
    if result.is_empty:
        lines.append("No structural changes.")
        return lines
    if result.mode is DiffMode.FULL and result.unified:
        lines.extend(result.unified)
        return lines
    lines.extend(f"+ {line}" for line in result.additions)
    lines.extend(f"- {line}" for line in result.deletions)
    if result.is_truncated:
        lines.append("... (use --full to show every changed line)")
    return lines


def render_usage_summary(report: FieldUsageReport, limit: int | None = None) -> list[str]:
    """Render the usage report as output lines, least-used fields first."""
    lines = [f"Documents analyzed: {report.total_documents}"]
    if report.failures:
        lines.append(
            f"Documents excluded: {len(report.failures)} ({report.parse_failures} parse failures)"
        )
    ordered = sorted(report.field_usage.items(), key=lambda item: (item[1].count, item[0]))
    if limit is not None:
        ordered = ordered[:limit]
    for path, usage in ordered:
        lines.append(f"{usage.percentage:6.1f}%  {usage.count:>6}  {path}")
    if report.schema_versions:
        lines.append("Schema versions:")
        for version, count in report.schema_versions.items():
            lines.append(f"  {version or '(unspecified)'}: {count}")
    return lines


def render_verdicts(verdicts: Sequence[CompatibilityVerdict]) -> list[str]:
    """Render compatibility verdicts as output lines."""
    lines: list[str] = []
    for verdict in verdicts:
        status = "OK" if verdict.compatible else "INCOMPATIBLE"
        lines.append(f"{status}  {verdict.path}")
        lines.extend(f"    {violation}" for violation in verdict.violations)
    compatible = sum(1 for verdict in verdicts if verdict.compatible)
    lines.append(f"{compatible}/{len(verdicts)} documents compatible")
    return lines
