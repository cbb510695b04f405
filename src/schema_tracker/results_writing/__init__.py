"""Results writing domain exports."""

from .console_rendering import (
    render_diff,
    render_snapshot_line,
    render_usage_summary,
    render_verdicts,
)
from .report_serialization import diff_result_to_dict, usage_report_to_dict, verdict_to_dict
from .usage_report_writer import (
    FIELD_USAGE_SHEET_NAME,
    RUN_INFO_SHEET_NAME,
    SCHEMA_VERSIONS_SHEET_NAME,
    write_usage_report_json,
    write_usage_workbook,
)

__all__ = [
    "FIELD_USAGE_SHEET_NAME",
    "RUN_INFO_SHEET_NAME",
    "SCHEMA_VERSIONS_SHEET_NAME",
    "diff_result_to_dict",
    "render_diff",
    "render_snapshot_line",
    "render_usage_summary",
    "render_verdicts",
    "usage_report_to_dict",
    "verdict_to_dict",
    "write_usage_report_json",
    "write_usage_workbook",
]
