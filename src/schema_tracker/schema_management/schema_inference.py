"""Infer a JSON Schema document from one sample instance."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .schema_models import JsonKind
from .schema_projection import classify_json_value, require_object_root, validate_json_tree

DRAFT_07_URI = "http://json-schema.org/draft-07/schema#"


def infer_schema_from_sample(sample: Any, *, title: str) -> dict[str, Any]:
    """Build a draft-07 schema describing the structure of ``sample``.

    Every field whose sample value is not null is listed as required. Null fields are
    described as optional with a type determined at runtime.
    """
    root = require_object_root(sample)
    validate_json_tree(root)
    schema: dict[str, Any] = {
        "$schema": DRAFT_07_URI,
        "title": title,
        "type": "object",
    }
    schema.update(_object_body(root))
    return schema


def _object_body(value: Mapping[str, Any]) -> dict[str, Any]:
    properties = {name: _infer_field(child, name) for name, child in value.items()}
    required = [name for name, child in value.items() if child is not None]
    return {"properties": properties, "required": required}


def _infer_field(value: Any, field_name: str) -> dict[str, Any]:
    kind = classify_json_value(value)
    if kind is JsonKind.NULL:
        return {
            "anyOf": [{"type": "null"}, {}],
            "description": f"Optional field: {field_name}",
        }
    if kind is JsonKind.NUMBER:
        type_name = "number" if isinstance(value, float) else "integer"
        return {"type": type_name, "description": f"{type_name.capitalize()} field: {field_name}"}
    if kind is JsonKind.ARRAY:
        items = _infer_field(value[0], "array_item") if value else {}
        return {
            "type": "array",
            "items": items,
            "description": f"Array field: {field_name}",
        }
    if kind is JsonKind.OBJECT:
        schema: dict[str, Any] = {"type": "object", "description": f"Object field: {field_name}"}
        schema.update(_object_body(value))
        return schema
    return {"type": kind.value, "description": f"{kind.value.capitalize()} field: {field_name}"}
