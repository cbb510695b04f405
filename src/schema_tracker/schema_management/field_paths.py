"""Field-path notation helpers.

Object keys are joined with dots (``tool_use.id``). Keys that would be ambiguous in
dotted form are written in bracket notation (``metadata["a.b"]``). Array positions are
either explicit (``history[2]``) or collapsed (``history[]``).
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

ROOT_PATH = "$"
ARRAY_SEGMENT = "[]"

_PLAIN_KEY = re.compile(r"^[^.\[\]\s\"]+$")


def join_key(prefix: str, key: str) -> str:
    """Append one object key to a field-path."""
    if not _PLAIN_KEY.match(key):
        return f"{prefix}[{json.dumps(key, ensure_ascii=False)}]"
    return key if not prefix else f"{prefix}.{key}"


def join_index(prefix: str, index: int | None = None) -> str:
    """Append an array position, or the collapsed ``[]`` segment when index is None."""
    segment = ARRAY_SEGMENT if index is None else f"[{index}]"
    return f"{prefix}{segment}"


def display_path(path: str) -> str:
    """Return a printable path, naming the root explicitly."""
    return path or ROOT_PATH


def resolve_dotted_path(document: Any, dotted_path: str) -> tuple[bool, Any]:
    """Resolve a dotted key path from the document root.

    Returns a ``(found, value)`` pair. Only object keys are followed.
    """
    current = document
    for segment in dotted_path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return False, None
        current = current[segment]
    return True, current
