"""Field usage analysis service."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from schema_tracker.schema_management.field_paths import join_index, join_key, resolve_dotted_path
from schema_tracker.schema_management.schema_models import JsonKind
from schema_tracker.schema_management.schema_projection import classify_json_value
from schema_tracker.structural_hashing.canonical_form import canonical_json

from .usage_models import DocumentFailure, FailureKind, FieldUsage, FieldUsageReport

_LOGGER = logging.getLogger(__name__)

DEFAULT_SAMPLE_CAP = 5
DEFAULT_SCHEMA_VERSION_FIELD = "$schema"
UNSPECIFIED_VERSION = ""


@dataclass(frozen=True)
class _AnalysisOptions:
    """Read-only settings applied to every document."""

    schema_version_field: str
    sample_cap: int


@dataclass
class _UsageTally:
    """Mutable accumulator owned by one analysis pass."""

    total_documents: int = 0
    counts: dict[str, int] = field(default_factory=dict)
    samples: dict[str, list[Any]] = field(default_factory=dict)
    sample_keys: dict[str, set[str]] = field(default_factory=dict)
    schema_versions: dict[str, int] = field(default_factory=dict)

    def add_sample(self, path: str, value: Any, cap: int) -> None:
        values = self.samples.setdefault(path, [])
        if len(values) >= cap:
            return
        keys = self.sample_keys.setdefault(path, set())
        key = canonical_json(value)
        if key in keys:
            return
        keys.add(key)
        values.append(value)


def analyze_usage(
    documents: Sequence[Any],
    *,
    schema_version_field: str = DEFAULT_SCHEMA_VERSION_FIELD,
    sample_cap: int = DEFAULT_SAMPLE_CAP,
    workers: int = 1,
    failures: Sequence[DocumentFailure] = (),
) -> FieldUsageReport:
    """Tally per-field presence, sample values and declared schema versions.

    Args:
      documents: Parsed JSON documents in corpus order.
      schema_version_field: Dotted key path, resolved from each document root, holding
        the declared schema identifier.
      sample_cap: Maximum number of distinct sample values kept per field-path.
      workers: Number of threads scanning contiguous corpus chunks. The merged result
        is identical to a sequential scan.
      failures: Documents excluded before analysis, carried into the report.
    """
    if sample_cap < 0:
        raise ValueError("sample_cap must not be negative.")
    if workers < 1:
        raise ValueError("workers must be at least 1.")
    options = _AnalysisOptions(schema_version_field=schema_version_field, sample_cap=sample_cap)

    if workers == 1 or len(documents) <= 1:
        tally = _tally_documents(documents, options)
    else:
        chunk_size = math.ceil(len(documents) / workers)
        chunks = [
            documents[start : start + chunk_size]
            for start in range(0, len(documents), chunk_size)
        ]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            partials = list(executor.map(lambda chunk: _tally_documents(chunk, options), chunks))
        tally = _merge_tallies(partials, options.sample_cap)

    report = _build_report(tally, failures)
    _LOGGER.info(
        "Analyzed %d documents, %d field paths, %d excluded",
        report.total_documents,
        len(report.field_usage),
        len(report.failures),
    )
    return report


def _tally_documents(documents: Sequence[Any], options: _AnalysisOptions) -> _UsageTally:
    tally = _UsageTally()
    for document in documents:
        _tally_document(document, tally, options)
    return tally


def _tally_document(document: Any, tally: _UsageTally, options: _AnalysisOptions) -> None:
    present: dict[str, None] = {}
    _visit(document, "", present, tally, options.sample_cap)
    for path in present:
        tally.counts[path] = tally.counts.get(path, 0) + 1
    version = _declared_version(document, options.schema_version_field)
    tally.schema_versions[version] = tally.schema_versions.get(version, 0) + 1
    tally.total_documents += 1
    _LOGGER.debug("Document %d: %d field paths", tally.total_documents, len(present))


def _visit(
    value: Any,
    path: str,
    present: dict[str, None],
    tally: _UsageTally,
    sample_cap: int,
) -> None:
    kind = classify_json_value(value)
    if path:
        present[path] = None
        if not kind.is_container:
            tally.add_sample(path, value, sample_cap)
    if kind is JsonKind.OBJECT:
        for key, child in value.items():
            _visit(child, join_key(path, key), present, tally, sample_cap)
    elif kind is JsonKind.ARRAY:
        item_path = join_index(path)
        for item in value:
            _visit(item, item_path, present, tally, sample_cap)


def _declared_version(document: Any, version_field: str) -> str:
    found, value = resolve_dotted_path(document, version_field)
    if not found or value is None:
        return UNSPECIFIED_VERSION
    if isinstance(value, str):
        return value
    return canonical_json(value)


def _merge_tallies(partials: Sequence[_UsageTally], sample_cap: int) -> _UsageTally:
    merged = _UsageTally()
    for partial in partials:
        merged.total_documents += partial.total_documents
        for path, count in partial.counts.items():
            merged.counts[path] = merged.counts.get(path, 0) + count
        for path, values in partial.samples.items():
            for value in values:
                merged.add_sample(path, value, sample_cap)
        for version, count in partial.schema_versions.items():
            merged.schema_versions[version] = merged.schema_versions.get(version, 0) + count
    return merged


def _build_report(tally: _UsageTally, failures: Sequence[DocumentFailure]) -> FieldUsageReport:
    total = tally.total_documents
    field_usage = {
        path: FieldUsage(
            count=tally.counts[path],
            percentage=_percentage(tally.counts[path], total),
            sample_values=tuple(tally.samples.get(path, ())),
        )
        for path in sorted(tally.counts)
    }
    return FieldUsageReport(
        total_documents=total,
        field_usage=field_usage,
        schema_versions={key: tally.schema_versions[key] for key in sorted(tally.schema_versions)},
        parse_failures=sum(1 for failure in failures if failure.kind is FailureKind.PARSE),
        failures=tuple(failures),
    )


def _percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return 100.0 * count / total
