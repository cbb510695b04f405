"""Schema loading and JSON value classification service."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .schema_models import JsonKind, SchemaDocument

MAX_NESTING_DEPTH = 200


class SchemaError(Exception):
    """Raised for schema parsing or shape failures."""


class SchemaParseError(SchemaError):
    """Raised when schema text is not valid JSON."""


class SchemaValidationError(SchemaError):
    """Raised when a schema document is structurally malformed."""

    def __init__(self, message: str, *, side: str | None = None) -> None:
        super().__init__(message)
        self.side = side


def classify_json_value(value: Any) -> JsonKind:
    """Return the JSON variant of a parsed value.

    Booleans are classified before numbers because ``bool`` subclasses ``int``.
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, int):
        return JsonKind.NUMBER
    if isinstance(value, float):
        if not math.isfinite(value):
            raise SchemaValidationError(f"Non-finite number is not valid JSON: {value!r}")
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, Mapping):
        return JsonKind.OBJECT
    if isinstance(value, Sequence) and not isinstance(value, bytes | bytearray):
        return JsonKind.ARRAY
    raise SchemaValidationError(f"Unsupported JSON value of type {type(value).__name__}.")


def validate_json_tree(value: Any, *, max_depth: int = MAX_NESTING_DEPTH) -> None:
    """Check that a value can be traversed, hashed and written as UTF-8 JSON.

    The walk is iterative so that over-deep input is reported instead of exhausting
    the interpreter stack. Raises SchemaValidationError for non-JSON values,
    non-finite numbers, strings holding lone surrogates and containers nested deeper
    than ``max_depth``.
    """
    pending: list[tuple[Any, int]] = [(value, 1)]
    while pending:
        current, depth = pending.pop()
        kind = classify_json_value(current)
        if kind is JsonKind.STRING:
            _require_utf8_text(current)
            continue
        if not kind.is_container:
            continue
        if depth > max_depth:
            raise SchemaValidationError(f"JSON nesting exceeds {max_depth} levels.")
        if kind is JsonKind.OBJECT:
            for key, child in current.items():
                if isinstance(key, str):
                    _require_utf8_text(key)
                pending.append((child, depth + 1))
        else:
            pending.extend((child, depth + 1) for child in current)


def require_object_root(document: Any, *, side: str | None = None) -> Mapping[str, Any]:
    """Return the document root when it is a JSON object, raise otherwise."""
    if isinstance(document, SchemaDocument):
        document = document.root
    if not isinstance(document, Mapping):
        label = f"'{side}' schema" if side else "Schema"
        kind = _describe_kind(document)
        raise SchemaValidationError(
            f"{label} must be a JSON object at the root, got {kind}.", side=side
        )
    return document


def load_schema_document(text: str, source_path: Path | None = None) -> SchemaDocument:
    """Parse schema text into a structured document."""
    try:
        root = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        location = f" in {source_path}" if source_path else ""
        raise SchemaParseError(f"Invalid JSON schema{location}: {exc}") from exc
    require_object_root(root)
    try:
        validate_json_tree(root)
    except SchemaValidationError as exc:
        location = f" in {source_path}" if source_path else ""
        raise SchemaParseError(f"Unsupported JSON schema{location}: {exc}") from exc
    return SchemaDocument(root=root, source_path=source_path)


def load_schema_file(path: Path | str) -> SchemaDocument:
    """Read and parse a schema file written by the schema generator."""
    schema_path = Path(path)
    try:
        text = schema_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaError(f"Failed to read schema file {schema_path}: {exc}") from exc
    return load_schema_document(text, schema_path)


def _require_utf8_text(text: str) -> None:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise SchemaValidationError(f"String is not valid UTF-8 text: {exc.reason}") from exc


def _describe_kind(value: Any) -> str:
    try:
        return classify_json_value(value).value
    except SchemaValidationError:
        return type(value).__name__
