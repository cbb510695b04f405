"""Compatibility checking entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompatibilityVerdict:
    """Outcome of checking one document against a reference schema."""

    path: str
    violations: tuple[str, ...]

    @property
    def compatible(self) -> bool:
        """Return True when no violations were found."""
        return not self.violations
