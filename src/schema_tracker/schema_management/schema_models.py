"""Schema management entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class JsonKind(str, Enum):
    """Variants of a parsed JSON value."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"

    @property
    def is_container(self) -> bool:
        """Return True for arrays and objects."""
        return self in (JsonKind.ARRAY, JsonKind.OBJECT)


@dataclass(frozen=True)
class SchemaDocument:
    """JSON Schema document as produced by an external schema generator."""

    root: Any
    source_path: Path | None = None
