"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from schema_tracker.diff_engine import DEFAULT_PREVIEW_LIMIT
from schema_tracker.snapshot_store import DEFAULT_FILENAME_PREFIX
from schema_tracker.usage_analysis import DEFAULT_SAMPLE_CAP, DEFAULT_SCHEMA_VERSION_FIELD

from .runtime_settings import AnalysisSettings, DiffSettings, SnapshotSettings, TrackerConfiguration

DEFAULT_SNAPSHOT_DIRECTORY = "schemas"
DEFAULT_IGNORED_KEYS: tuple[str, ...] = ("_generation_timestamp",)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(
    config_path: Path | str | None, *, base_dir: Path | str | None = None
) -> TrackerConfiguration:
    """Load and validate the configuration file.

    Without a file every setting takes its default and relative paths resolve against
    ``base_dir`` (the working directory when omitted).
    """
    if config_path is None:
        return _build_configuration({}, path=None, base_path=Path(base_dir or Path.cwd()))

    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read configuration file {path}: {exc}") from exc
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    return _build_configuration(parsed, path=path, base_path=path.resolve().parent)


def _build_configuration(
    parsed: Mapping[str, Any], *, path: Path | None, base_path: Path
) -> TrackerConfiguration:
    return TrackerConfiguration(
        path=path,
        snapshots=_parse_snapshots_section(parsed.get("snapshots"), base_path),
        analysis=_parse_analysis_section(parsed.get("analysis")),
        diff=_parse_diff_section(parsed.get("diff")),
    )


def _parse_snapshots_section(value: Any, base_path: Path) -> SnapshotSettings:
    section = _optional_mapping(value, "snapshots")
    directory = _require_non_empty_string(
        section.get("directory", DEFAULT_SNAPSHOT_DIRECTORY), "snapshots.directory"
    )
    prefix = _require_non_empty_string(
        section.get("filename_prefix", DEFAULT_FILENAME_PREFIX), "snapshots.filename_prefix"
    )
    ignored_keys = _normalize_string_sequence(
        section.get("ignored_keys", list(DEFAULT_IGNORED_KEYS)), "snapshots.ignored_keys"
    )
    return SnapshotSettings(
        directory=_resolve_path(base_path, directory),
        filename_prefix=prefix,
        ignored_keys=ignored_keys,
    )


def _parse_analysis_section(value: Any) -> AnalysisSettings:
    section = _optional_mapping(value, "analysis")
    version_field = _require_non_empty_string(
        section.get("schema_version_field", DEFAULT_SCHEMA_VERSION_FIELD),
        "analysis.schema_version_field",
    )
    sample_cap = _require_positive_int(
        section.get("sample_cap", DEFAULT_SAMPLE_CAP), "analysis.sample_cap"
    )
    workers = _require_positive_int(section.get("workers", 1), "analysis.workers")
    return AnalysisSettings(
        schema_version_field=version_field,
        sample_cap=sample_cap,
        workers=workers,
    )


def _parse_diff_section(value: Any) -> DiffSettings:
    section = _optional_mapping(value, "diff")
    preview_limit = _require_positive_int(
        section.get("preview_limit", DEFAULT_PREVIEW_LIMIT), "diff.preview_limit"
    )
    return DiffSettings(preview_limit=preview_limit)


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
