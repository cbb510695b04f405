"""Corpus loading service."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable
from pathlib import Path

from schema_tracker.schema_management.schema_projection import (
    SchemaValidationError,
    validate_json_tree,
)

from .usage_models import CorpusDocument, CorpusReadResult, DocumentFailure, FailureKind

_LOGGER = logging.getLogger(__name__)


class CorpusReadError(Exception):
    """Raised when no document of a corpus could be read."""


def glob_corpus(root: Path | str, pattern: str) -> list[Path]:
    """Return the files below ``root`` matching ``pattern`` in sorted order."""
    return sorted(path for path in Path(root).glob(pattern) if path.is_file())


def read_corpus(paths: Iterable[Path | str]) -> CorpusReadResult:
    """Read and parse corpus files, recording per-file failures.

    Raises:
      CorpusReadError: If files were given but none of them could be parsed.
    """
    entries: list[tuple[str, str]] = []
    read_failures: list[DocumentFailure] = []
    path_count = 0
    for raw_path in paths:
        path_count += 1
        path = Path(raw_path)
        try:
            entries.append((str(path), path.read_text(encoding="utf-8")))
        except (OSError, UnicodeDecodeError) as exc:
            _LOGGER.warning("Skipping unreadable corpus file %s: %s", path, exc)
            read_failures.append(
                DocumentFailure(source=str(path), kind=FailureKind.READ, reason=str(exc))
            )

    parsed = parse_corpus_texts(entries)
    result = CorpusReadResult(
        documents=parsed.documents,
        failures=tuple(read_failures) + parsed.failures,
    )
    if path_count and not result.documents:
        raise CorpusReadError(f"None of the {path_count} corpus files could be read.")
    return result


def parse_corpus_texts(entries: Iterable[tuple[str, str]]) -> CorpusReadResult:
    """Parse ``(source, text)`` pairs into corpus documents.

    Documents holding non-finite numbers, lone surrogates or nesting deeper than the
    traversal limit are recorded as parse failures.
    """
    documents: list[CorpusDocument] = []
    failures: list[DocumentFailure] = []
    for source, text in entries:
        try:
            value = json.loads(
                text, parse_constant=_reject_constant, parse_float=_parse_finite_float
            )
            validate_json_tree(value)
        except (ValueError, RecursionError, SchemaValidationError) as exc:
            _LOGGER.warning("Skipping corpus document %s: %s", source, exc)
            failures.append(DocumentFailure(source=source, kind=FailureKind.PARSE, reason=str(exc)))
            continue
        documents.append(CorpusDocument(source=source, value=value))
    return CorpusReadResult(documents=tuple(documents), failures=tuple(failures))


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range for a JSON number")
    return value


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not a valid JSON number")
