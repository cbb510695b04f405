"""Compatibility checking exports."""

from .compatibility_checker import check_corpus, check_document
from .verdict_models import CompatibilityVerdict

__all__ = [
    "CompatibilityVerdict",
    "check_corpus",
    "check_document",
]
