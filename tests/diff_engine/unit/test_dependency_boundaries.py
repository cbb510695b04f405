"""Boundary tests for core domain dependencies."""

from __future__ import annotations

from pathlib import Path


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def test_core_domains_do_not_import_outer_layers() -> None:
    package_dir = _project_root() / "src" / "schema_tracker"
    core_domains = (
        "schema_management",
        "structural_hashing",
        "snapshot_store",
        "diff_engine",
        "usage_analysis",
        "compatibility_checking",
    )
    forbidden_import_fragments = (
        "schema_tracker.cli",
        "schema_tracker.configuration",
        "schema_tracker.results_writing",
        "schema_tracker.capture_workflow",
        "import click",
        "import yaml",
        "openpyxl",
    )

    for domain in core_domains:
        for module_path in sorted((package_dir / domain).glob("*.py")):
            text = module_path.read_text(encoding="utf-8")
            for fragment in forbidden_import_fragments:
                assert fragment not in text, (
                    f"Forbidden core dependency in {module_path}: {fragment}"
                )
