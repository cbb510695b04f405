"""Canonical text forms of JSON values used for hashing and diffing."""

from __future__ import annotations

import json
import re
from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from schema_tracker.schema_management.field_paths import join_index, join_key
from schema_tracker.schema_management.schema_models import JsonKind
from schema_tracker.schema_management.schema_projection import (
    SchemaValidationError,
    classify_json_value,
)

_INDENT = "  "
_SEGMENT_DELIMITER = re.compile(r"[.\[]")
_PATH_DECODER = json.JSONDecoder()


@dataclass(frozen=True)
class CanonicalLine:
    """One rendered line of a canonical document rendering."""

    path: str
    depth: int
    text: str

    @property
    def last_segment(self) -> str:
        """Return the final key of the path, without array positions."""
        return _split_segments(self.path)[-1] if self.path else ""

    @property
    def parent_segment(self) -> str:
        """Return the key preceding the final one, or an empty string."""
        segments = _split_segments(self.path)
        return segments[-2] if len(segments) > 1 else ""


def strip_ignored_keys(document: Any, ignored_keys: Collection[str]) -> Any:
    """Drop the named keys from a root object."""
    if not ignored_keys or not isinstance(document, Mapping):
        return document
    return {key: value for key, value in document.items() if key not in ignored_keys}


def canonical_json(value: Any) -> str:
    """Serialize a JSON value with sorted keys and no insignificant whitespace."""
    try:
        return json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise SchemaValidationError(f"Value cannot be canonicalized as JSON: {exc}") from exc


def render_canonical_lines(
    document: Any, *, ignored_keys: Collection[str] = ()
) -> list[CanonicalLine]:
    """Render a document as path-qualified lines in canonical order."""
    lines: list[CanonicalLine] = []
    _render_children(strip_ignored_keys(document, ignored_keys), "", 0, lines)
    return lines


def _render_children(value: Any, path: str, depth: int, lines: list[CanonicalLine]) -> None:
    kind = classify_json_value(value)
    if kind is JsonKind.OBJECT:
        for key in sorted(value):
            _render_node(value[key], join_key(path, key), depth, lines)
    elif kind is JsonKind.ARRAY:
        for index, item in enumerate(value):
            _render_node(item, join_index(path, index), depth, lines)


def _render_node(value: Any, path: str, depth: int, lines: list[CanonicalLine]) -> None:
    kind = classify_json_value(value)
    prefix = f"{_INDENT * depth}{path}:"
    if not kind.is_container or not value or _is_scalar_array(kind, value):
        lines.append(CanonicalLine(path=path, depth=depth, text=f"{prefix} {_inline(value)}"))
        return
    lines.append(CanonicalLine(path=path, depth=depth, text=prefix))
    _render_children(value, path, depth + 1, lines)


def _is_scalar_array(kind: JsonKind, value: Sequence[Any]) -> bool:
    if kind is not JsonKind.ARRAY:
        return False
    return all(not classify_json_value(item).is_container for item in value)


def _inline(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, allow_nan=False, sort_keys=True)
    except (TypeError, ValueError) as exc:
        raise SchemaValidationError(f"Value cannot be rendered as JSON: {exc}") from exc


def _split_segments(path: str) -> list[str]:
    """Return the object keys of a field-path, skipping array positions."""
    segments: list[str] = []
    position = 0
    while position < len(path):
        char = path[position]
        if char == ".":
            position += 1
        elif char == "[" and path.startswith('"', position + 1):
            key, end = _PATH_DECODER.raw_decode(path, position + 1)
            segments.append(key)
            position = end + 1
        elif char == "[":
            position = path.index("]", position) + 1
        else:
            delimiter = _SEGMENT_DELIMITER.search(path, position)
            end = delimiter.start() if delimiter else len(path)
            segments.append(path[position:end])
            position = end
    return segments or [path]
