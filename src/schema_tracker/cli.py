"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import click

from schema_tracker.capture_workflow import CaptureError, CaptureRequest, execute_capture
from schema_tracker.capture_workflow.capture_contracts import DEFAULT_INFERRED_TITLE
from schema_tracker.compatibility_checking import check_corpus
from schema_tracker.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    TrackerConfiguration,
    load_configuration,
    write_placeholder_configuration,
)
from schema_tracker.diff_engine import DiffMode, diff_schemas
from schema_tracker.results_writing import (
    diff_result_to_dict,
    render_diff,
    render_snapshot_line,
    render_usage_summary,
    render_verdicts,
    verdict_to_dict,
    write_usage_report_json,
    write_usage_workbook,
)
from schema_tracker.schema_management import SchemaError, load_schema_file
from schema_tracker.snapshot_store import (
    LATEST_REFERENCE,
    PREVIOUS_REFERENCE,
    SnapshotFormatError,
    SnapshotStoreError,
    find_snapshot,
    load_snapshot_file,
    scan_snapshots,
)
from schema_tracker.structural_hashing import short_hash
from schema_tracker.usage_analysis import (
    CorpusReadError,
    CorpusReadResult,
    analyze_usage,
    glob_corpus,
    read_corpus,
)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="schema-tracker")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help=f"Path to the YAML configuration file (default: ./{DEFAULT_CONFIG_FILENAME} if present)",
)
@click.option("--verbose", is_flag=True, default=False, help="Log progress details to stderr.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Track JSON schema evolution across code revisions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )
    ctx.obj = {"config_path": config_path}


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration file to write",
)
def generate_config(output_path: str) -> None:
    """Generate a YAML configuration file with the default settings."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="capture")
@click.option(
    "--schema",
    "schema_path",
    required=False,
    type=click.Path(path_type=str),
    help="JSON Schema document written by the schema generator",
)
@click.option(
    "--from-sample",
    "sample_path",
    required=False,
    type=click.Path(path_type=str),
    help="JSON document to infer the schema from",
)
@click.option("-n", "--note", required=False, help="Note stored with the snapshot")
@click.option(
    "--revision", "revision_id", required=False, help="Source revision id, e.g. a commit hash"
)
@click.option(
    "--title",
    default=DEFAULT_INFERRED_TITLE,
    show_default=True,
    help="Schema title used with --from-sample",
)
@click.pass_context
def capture(
    ctx: click.Context,
    schema_path: str | None,
    sample_path: str | None,
    note: str | None,
    revision_id: str | None,
    title: str,
) -> None:
    """Capture the current schema as a new snapshot."""
    configuration = _load_settings(ctx)
    request = CaptureRequest(
        schema_path=schema_path,
        sample_path=sample_path,
        note=note,
        revision_id=revision_id,
        title=title,
    )
    try:
        outcome = execute_capture(request, settings=configuration.snapshots)
    except CaptureError as exc:
        raise CliError(str(exc)) from exc

    click.echo(str(outcome.path))
    click.echo(f"  hash: {short_hash(outcome.snapshot.content_hash)}")
    if revision_id:
        click.echo(f"  revision: {revision_id[:8]}")
    if note:
        click.echo(f"  note: {note}")
    if outcome.unchanged_from_latest:
        click.echo("  unchanged from the latest snapshot")


@cli.command(name="list")
@click.pass_context
def list_snapshots(ctx: click.Context) -> None:
    """List captured snapshots in capture order."""
    configuration = _load_settings(ctx)
    try:
        listing = scan_snapshots(configuration.snapshots.directory)
    except SnapshotStoreError as exc:
        raise CliError(str(exc)) from exc
    for failure in listing.failures:
        click.echo(f"skipped {failure.path}: {failure.reason}", err=True)
    if not listing.snapshots:
        click.echo("No snapshots captured yet.")
    for snapshot in listing.snapshots:
        click.echo(render_snapshot_line(snapshot))


@cli.command(name="diff")
@click.argument("from_ref", required=False)
@click.argument("to_ref", required=False)
@click.option("--full", is_flag=True, default=False, help="Show every changed line.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the diff as JSON.")
@click.pass_context
def diff(
    ctx: click.Context, from_ref: str | None, to_ref: str | None, full: bool, as_json: bool
) -> None:
    """Compare two snapshots or schema files.

    FROM and TO are snapshot ids, 'latest', 'previous', or paths to snapshot or
    schema files. They default to 'previous' and 'latest'.
    """
    configuration = _load_settings(ctx)
    directory = configuration.snapshots.directory
    from_label, from_document = _resolve_schema_reference(
        directory, from_ref or PREVIOUS_REFERENCE
    )
    to_label, to_document = _resolve_schema_reference(directory, to_ref or LATEST_REFERENCE)
    try:
        result = diff_schemas(
            from_document,
            to_document,
            DiffMode.FULL if full else DiffMode.SUMMARY,
            from_ref=from_label,
            to_ref=to_label,
            preview_limit=configuration.diff.preview_limit,
            ignored_keys=configuration.snapshots.ignored_keys,
        )
    except SchemaError as exc:
        raise CliError(str(exc)) from exc

    if as_json:
        click.echo(json.dumps(diff_result_to_dict(result), indent=2, ensure_ascii=False))
        return
    for line in render_diff(result):
        click.echo(line)


@cli.command(name="analyze")
@click.option(
    "--pattern", required=True, help="Glob pattern selecting corpus documents, e.g. '**/*.json'"
)
@click.option(
    "--root",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False, path_type=str),
    help="Directory the pattern is resolved against",
)
@click.option(
    "--version-field",
    "version_field",
    required=False,
    help="Dotted key path holding each document's declared schema identifier",
)
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path of the JSON usage report to write",
)
@click.option(
    "--workbook",
    "workbook_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path of the Excel usage workbook to write",
)
@click.pass_context
def analyze(
    ctx: click.Context,
    pattern: str,
    root: str,
    version_field: str | None,
    output_path: str | None,
    workbook_path: str | None,
) -> None:
    """Report how often each field occurs across a corpus of JSON documents."""
    configuration = _load_settings(ctx)
    analysis = configuration.analysis
    corpus = _read_corpus_or_fail(root, pattern)
    try:
        report = analyze_usage(
            corpus.values,
            schema_version_field=version_field or analysis.schema_version_field,
            sample_cap=analysis.sample_cap,
            workers=analysis.workers,
            failures=corpus.failures,
        )
    except SchemaError as exc:
        raise CliError(str(exc)) from exc
    for failure in report.failures:
        click.echo(f"skipped {failure.source}: {failure.reason}", err=True)
    for line in render_usage_summary(report):
        click.echo(line)

    try:
        if output_path:
            click.echo(str(write_usage_report_json(report, output_path)))
        if workbook_path:
            run_info = {"root": str(Path(root).resolve()), "pattern": pattern}
            click.echo(str(write_usage_workbook(report, workbook_path, run_info)))
    except OSError as exc:
        raise CliError(str(exc)) from exc


@cli.command(name="check")
@click.option(
    "--reference",
    required=True,
    help="Snapshot id, 'latest', 'previous', or path to a snapshot or schema file",
)
@click.option(
    "--pattern", required=True, help="Glob pattern selecting corpus documents, e.g. '**/*.json'"
)
@click.option(
    "--root",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False, path_type=str),
    help="Directory the pattern is resolved against",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print verdicts as JSON.")
@click.pass_context
def check(ctx: click.Context, reference: str, pattern: str, root: str, as_json: bool) -> None:
    """Check corpus documents against a reference schema's required fields and types."""
    configuration = _load_settings(ctx)
    label, reference_document = _resolve_schema_reference(
        configuration.snapshots.directory, reference
    )
    corpus = _read_corpus_or_fail(root, pattern)
    try:
        verdicts = check_corpus(reference_document, corpus)
    except SchemaError as exc:
        raise CliError(str(exc)) from exc

    if as_json:
        payload = [verdict_to_dict(verdict) for verdict in verdicts]
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        for line in render_verdicts(verdicts):
            click.echo(line)

    incompatible = sum(1 for verdict in verdicts if not verdict.compatible)
    if incompatible:
        raise CliError(
            f"{incompatible} of {len(verdicts)} documents are incompatible with {label}."
        )


def _load_settings(ctx: click.Context) -> TrackerConfiguration:
    config_path = (ctx.obj or {}).get("config_path")
    if config_path is None and Path(DEFAULT_CONFIG_FILENAME).exists():
        config_path = DEFAULT_CONFIG_FILENAME
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _resolve_schema_reference(directory: Path, reference: str) -> tuple[str, Mapping[str, Any]]:
    candidate = Path(reference)
    try:
        if candidate.is_file():
            return reference, _load_schema_or_snapshot_file(candidate)
        snapshot = find_snapshot(directory, reference)
    except (SchemaError, SnapshotStoreError) as exc:
        raise CliError(str(exc)) from exc
    return snapshot.snapshot_id, snapshot.document


def _load_schema_or_snapshot_file(path: Path) -> Mapping[str, Any]:
    try:
        return load_snapshot_file(path).document
    except SnapshotFormatError:
        return load_schema_file(path).root


def _read_corpus_or_fail(root: str, pattern: str) -> CorpusReadResult:
    paths = glob_corpus(root, pattern)
    if not paths:
        raise CliError(f"No documents match '{pattern}' under {Path(root).resolve()}.")
    try:
        return read_corpus(paths)
    except CorpusReadError as exc:
        raise CliError(str(exc)) from exc


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
