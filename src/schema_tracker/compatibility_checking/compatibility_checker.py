"""Required-field and type-set compatibility checks.

Only ``type``, ``required``, ``properties``, ``items`` and ``anyOf``/``oneOf`` type
unions are evaluated. Patterns, enums, numeric bounds and ``$ref`` targets are not.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from schema_tracker.schema_management.field_paths import display_path, join_index, join_key
from schema_tracker.schema_management.schema_models import JsonKind
from schema_tracker.schema_management.schema_projection import (
    classify_json_value,
    require_object_root,
)
from schema_tracker.usage_analysis.usage_models import CorpusReadResult, FailureKind

from .verdict_models import CompatibilityVerdict

_LOGGER = logging.getLogger(__name__)

_UNION_KEYWORDS = ("anyOf", "oneOf")
_FAILURE_VERBS = {FailureKind.READ: "read", FailureKind.PARSE: "parsed"}


@dataclass(frozen=True)
class _TypeConstraint:
    """Allowed runtime types at one schema node; None means unconstrained."""

    allowed: frozenset[str] | None

    def accepts(self, value: Any) -> bool:
        if self.allowed is None:
            return True
        return bool(_runtime_type_names(value) & self.allowed)

    def describe(self) -> str:
        return "|".join(sorted(self.allowed or ()))


def check_document(
    reference: Mapping[str, Any], document: Any, *, path: str = "<document>"
) -> CompatibilityVerdict:
    """Check one parsed document against the reference schema.

    Raises:
      SchemaValidationError: If the reference is not a JSON object at the root.
    """
    root = require_object_root(reference)
    violations: list[str] = []
    _check_node(root, document, "", violations)
    _LOGGER.debug("Checked %s: %d violations", path, len(violations))
    return CompatibilityVerdict(path=path, violations=tuple(violations))


def check_corpus(
    reference: Mapping[str, Any], corpus: CorpusReadResult
) -> tuple[CompatibilityVerdict, ...]:
    """Check every corpus document; excluded documents become failed verdicts."""
    root = require_object_root(reference)
    verdicts = [
        check_document(root, document.value, path=document.source)
        for document in corpus.documents
    ]
    verdicts.extend(
        CompatibilityVerdict(
            path=failure.source,
            violations=(
                f"document could not be {_FAILURE_VERBS[failure.kind]}: {failure.reason}",
            ),
        )
        for failure in corpus.failures
    )
    return tuple(verdicts)


def _check_node(schema: Any, value: Any, path: str, violations: list[str]) -> None:
    if not isinstance(schema, Mapping):
        return
    constraint = _type_constraint(schema)
    if not constraint.accepts(value):
        violations.append(
            f"{display_path(path)}: expected type {constraint.describe()}, "
            f"got {_describe_runtime_type(value)}"
        )
        return

    kind = classify_json_value(value)
    if kind is JsonKind.OBJECT:
        for object_schema in _object_schemas(schema):
            _check_object(object_schema, value, path, violations)
    elif kind is JsonKind.ARRAY:
        items = schema.get("items")
        if isinstance(items, Mapping):
            for index, item in enumerate(value):
                _check_node(items, item, join_index(path, index), violations)


def _check_object(
    schema: Mapping[str, Any], value: Mapping[str, Any], path: str, violations: list[str]
) -> None:
    required = schema.get("required")
    if isinstance(required, Sequence) and not isinstance(required, str):
        for name in required:
            if isinstance(name, str) and name not in value:
                violations.append(f"{join_key(path, name)}: required field is missing")

    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return
    for name, child_schema in properties.items():
        if name in value:
            _check_node(child_schema, value[name], join_key(path, name), violations)


def _object_schemas(schema: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return the node itself plus union branches that describe object properties."""
    schemas = [schema]
    for keyword in _UNION_KEYWORDS:
        branches = schema.get(keyword)
        if not isinstance(branches, Sequence) or isinstance(branches, str):
            continue
        schemas.extend(
            branch
            for branch in branches
            if isinstance(branch, Mapping) and ("properties" in branch or "required" in branch)
        )
    return schemas


def _type_constraint(schema: Mapping[str, Any]) -> _TypeConstraint:
    declared = _declared_types(schema.get("type"))
    if declared is not None:
        return _TypeConstraint(allowed=declared)
    if "$ref" in schema:
        return _TypeConstraint(allowed=None)

    union: set[str] = set()
    has_union = False
    for keyword in _UNION_KEYWORDS:
        branches = schema.get(keyword)
        if not isinstance(branches, Sequence) or isinstance(branches, str):
            continue
        for branch in branches:
            has_union = True
            branch_types = _type_constraint(branch) if isinstance(branch, Mapping) else None
            if branch_types is None or branch_types.allowed is None:
                return _TypeConstraint(allowed=None)
            union.update(branch_types.allowed)
    return _TypeConstraint(allowed=frozenset(union) if has_union else None)


def _declared_types(raw_type: Any) -> frozenset[str] | None:
    if isinstance(raw_type, str):
        return frozenset({raw_type})
    if isinstance(raw_type, Sequence) and raw_type:
        names = frozenset(item for item in raw_type if isinstance(item, str))
        return names or None
    return None


def _runtime_type_names(value: Any) -> frozenset[str]:
    kind = classify_json_value(value)
    if kind is not JsonKind.NUMBER:
        return frozenset({kind.value})
    if isinstance(value, int) or value.is_integer():
        return frozenset({"number", "integer"})
    return frozenset({"number"})


def _describe_runtime_type(value: Any) -> str:
    kind = classify_json_value(value)
    if kind is JsonKind.NUMBER and isinstance(value, int):
        return "integer"
    return kind.value
