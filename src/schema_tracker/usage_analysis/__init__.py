"""Usage analysis exports."""

from .corpus_reader import CorpusReadError, glob_corpus, parse_corpus_texts, read_corpus
from .usage_analyzer import (
    DEFAULT_SAMPLE_CAP,
    DEFAULT_SCHEMA_VERSION_FIELD,
    UNSPECIFIED_VERSION,
    analyze_usage,
)
from .usage_models import (
    CorpusDocument,
    CorpusReadResult,
    DocumentFailure,
    FailureKind,
    FieldUsage,
    FieldUsageReport,
)

__all__ = [
    "DEFAULT_SAMPLE_CAP",
    "DEFAULT_SCHEMA_VERSION_FIELD",
    "UNSPECIFIED_VERSION",
    "CorpusDocument",
    "CorpusReadError",
    "CorpusReadResult",
    "DocumentFailure",
    "FailureKind",
    "FieldUsage",
    "FieldUsageReport",
    "analyze_usage",
    "glob_corpus",
    "parse_corpus_texts",
    "read_corpus",
]
