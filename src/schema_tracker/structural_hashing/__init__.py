"""Structural hashing exports."""

from .canonical_form import (
    CanonicalLine,
    canonical_json,
    render_canonical_lines,
    strip_ignored_keys,
)
from .schema_hasher import CONTENT_HASH_LENGTH, compute_content_hash, short_hash

__all__ = [
    "CONTENT_HASH_LENGTH",
    "CanonicalLine",
    "canonical_json",
    "compute_content_hash",
    "render_canonical_lines",
    "short_hash",
    "strip_ignored_keys",
]
