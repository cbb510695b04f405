"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import (
    DEFAULT_IGNORED_KEYS,
    DEFAULT_SNAPSHOT_DIRECTORY,
    ConfigurationError,
    load_configuration,
)
from .runtime_settings import (
    AnalysisSettings,
    DiffSettings,
    SnapshotSettings,
    TrackerConfiguration,
)

__all__ = [
    "AnalysisSettings",
    "DiffSettings",
    "SnapshotSettings",
    "TrackerConfiguration",
    "ConfigurationError",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_IGNORED_KEYS",
    "DEFAULT_SNAPSHOT_DIRECTORY",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
