"""Usage analysis entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class FailureKind(str, Enum):
    """Why a corpus document was excluded."""

    READ = "read"
    PARSE = "parse"


@dataclass(frozen=True)
class DocumentFailure:
    """A corpus document that could not be read or parsed."""

    source: str
    kind: FailureKind
    reason: str


@dataclass(frozen=True)
class CorpusDocument:
    """One parsed corpus document and where it came from."""

    source: str
    value: Any


@dataclass(frozen=True)
class CorpusReadResult:
    """Parsed corpus documents plus the documents that were excluded."""

    documents: tuple[CorpusDocument, ...]
    failures: tuple[DocumentFailure, ...]

    @property
    def values(self) -> tuple[Any, ...]:
        """Return the parsed document values in corpus order."""
        return tuple(document.value for document in self.documents)


@dataclass(frozen=True)
class FieldUsage:
    """Presence statistics for one field-path."""

    count: int
    percentage: float
    sample_values: tuple[Any, ...]


@dataclass(frozen=True)
class FieldUsageReport:
    """Field usage aggregated over a corpus."""

    total_documents: int
    field_usage: Mapping[str, FieldUsage]
    schema_versions: Mapping[str, int]
    parse_failures: int = 0
    failures: tuple[DocumentFailure, ...] = ()
