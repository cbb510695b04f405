"""Usage report file writers."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from schema_tracker.usage_analysis.usage_models import FieldUsageReport

from .report_serialization import usage_report_to_dict

FIELD_USAGE_SHEET_NAME = "FieldUsage"
SCHEMA_VERSIONS_SHEET_NAME = "SchemaVersions"
RUN_INFO_SHEET_NAME = "RunInfo"

FIELD_USAGE_COLUMNS: tuple[str, ...] = ("Field path", "Count", "Percentage", "Sample values")


def write_usage_report_json(report: FieldUsageReport, output_path: Path | str) -> Path:
    """Write the usage report as pretty-printed JSON and return the resolved path."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(usage_report_to_dict(report), indent=2, ensure_ascii=False)
    output.write_text(text + "\n", encoding="utf-8")
    return output.resolve()


def write_usage_workbook(
    report: FieldUsageReport,
    output_path: Path | str,
    run_info: Mapping[str, Any] | None = None,
) -> Path:
    """Write the usage report as an Excel workbook and return the resolved path."""
    workbook = Workbook()
    usage_sheet = workbook.active
    usage_sheet.title = FIELD_USAGE_SHEET_NAME
    _write_header(usage_sheet, FIELD_USAGE_COLUMNS)
    for row, (path, usage) in enumerate(report.field_usage.items(), start=2):
        usage_sheet.cell(row=row, column=1, value=path)
        usage_sheet.cell(row=row, column=2, value=usage.count)
        percentage_cell = usage_sheet.cell(row=row, column=3, value=usage.percentage / 100)
        percentage_cell.number_format = "0.0%"
        usage_sheet.cell(row=row, column=4, value=_format_samples(usage.sample_values))
    usage_sheet.freeze_panes = "A2"

    versions_sheet = workbook.create_sheet(SCHEMA_VERSIONS_SHEET_NAME)
    _write_header(versions_sheet, ("Schema version", "Documents"))
    for row, (version, count) in enumerate(report.schema_versions.items(), start=2):
        versions_sheet.cell(row=row, column=1, value=version or "(unspecified)")
        versions_sheet.cell(row=row, column=2, value=count)

    _write_run_info_sheet(workbook, report, run_info or {})

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output.resolve()


def _write_header(sheet, columns: Sequence[str]) -> None:
    for column, label in enumerate(columns, start=1):
        cell = sheet.cell(row=1, column=column, value=label)
        cell.style = "Headline 1"
        sheet.column_dimensions[get_column_letter(column)].width = max(12, len(label) + 6)
    sheet.column_dimensions["A"].width = 50


def _format_samples(values: Sequence[Any]) -> str:
    return "\n".join(json.dumps(value, ensure_ascii=False, sort_keys=True) for value in values)


def _write_run_info_sheet(
    workbook, report: FieldUsageReport, run_info: Mapping[str, Any]
) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    entries = (
        *run_info.items(),
        ("total_documents", report.total_documents),
        ("field_paths", len(report.field_usage)),
        ("parse_failures", report.parse_failures),
        ("excluded_documents", len(report.failures)),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)
