"""Content hashing service for schema documents."""

from __future__ import annotations

import hashlib
from collections.abc import Collection
from typing import Any

from .canonical_form import canonical_json, strip_ignored_keys

CONTENT_HASH_LENGTH = 64


def compute_content_hash(document: Any, *, ignored_keys: Collection[str] = ()) -> str:
    """Return the SHA-256 hex digest of the document's canonical form.

    Key insertion order never affects the digest; array order does. Lone surrogates
    are encoded with ``surrogatepass`` so every string has a byte form.
    """
    canonical = canonical_json(strip_ignored_keys(document, ignored_keys))
    return hashlib.sha256(canonical.encode("utf-8", errors="surrogatepass")).hexdigest()


def short_hash(content_hash: str, length: int = 12) -> str:
    """Return the abbreviated hash used in console output."""
    return content_hash[:length]
