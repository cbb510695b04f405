"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "schema-tracker.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration for schema-tracker.
# Every setting is optional; the values below are the defaults.

snapshots:
  # Directory holding one JSON file per captured snapshot, relative to this file.
  directory: "schemas"
  # Snapshot files are named <filename_prefix>_<YYYYmmdd>_<HHMMSS>_<ffffff>.json.
  filename_prefix: "schema"
  # Root-level schema keys left out of content hashes and diffs.
  ignored_keys:
    - "_generation_timestamp"

analysis:
  # Dotted key path holding the schema identifier each corpus document declares.
  schema_version_field: "$schema"
  # Distinct sample values kept per field path.
  sample_cap: 5
  # Threads scanning the corpus; results are identical for any value.
  workers: 1

diff:
  # Changed lines shown per side in summary mode.
  preview_limit: 10
"""


def build_placeholder_configuration() -> str:
    """Build the YAML configuration scaffold with inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the configuration scaffold to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
