"""JSON-ready views of analysis results."""

from __future__ import annotations

from typing import Any

from schema_tracker.compatibility_checking.verdict_models import CompatibilityVerdict
from schema_tracker.diff_engine.diff_models import DiffResult
from schema_tracker.usage_analysis.usage_models import FieldUsageReport


def usage_report_to_dict(report: FieldUsageReport) -> dict[str, Any]:
    """Return the usage report as plain JSON-serializable data."""
    return {
        "total_documents": report.total_documents,
        "parse_failures": report.parse_failures,
        "field_usage": {
            path: {
                "count": usage.count,
                "percentage": usage.percentage,
                "sample_values": list(usage.sample_values),
            }
            for path, usage in report.field_usage.items()
        },
        "schema_versions": dict(report.schema_versions),
        "failures": [
            {"source": failure.source, "kind": failure.kind.value, "reason": failure.reason}
            for failure in report.failures
        ],
    }


def diff_result_to_dict(result: DiffResult) -> dict[str, Any]:
    """Return the diff result as plain JSON-serializable data."""
    return {
        "from": result.from_snapshot_ref,
        "to": result.to_snapshot_ref,
        "mode": result.mode.value,
        "addition_count": result.addition_count,
        "deletion_count": result.deletion_count,
        "additions": list(result.additions),
        "deletions": list(result.deletions),
    }


def verdict_to_dict(verdict: CompatibilityVerdict) -> dict[str, Any]:
    """Return one compatibility verdict as plain JSON-serializable data."""
    return {
        "path": verdict.path,
        "compatible": verdict.compatible,
        "violations": list(verdict.violations),
    }
