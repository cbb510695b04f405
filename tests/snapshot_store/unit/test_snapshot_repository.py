"""Snapshot store tests."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest
from schema_tracker.schema_management.schema_projection import SchemaValidationError
from schema_tracker.snapshot_store import (
    SnapshotFormatError,
    SnapshotNotFoundError,
    SnapshotStoreError,
    create_snapshot,
    find_snapshot,
    load_all,
    load_latest,
    load_snapshot_file,
    save_snapshot,
    scan_snapshots,
)
from schema_tracker.structural_hashing import compute_content_hash

_BASE_TIME = datetime(2025, 8, 20, 12, 30, 45, 123456, tzinfo=UTC)


def _schema(model_type: str = "string") -> dict:
    return {
        "type": "object",
        "required": ["conversation_id"],
        "properties": {
            "conversation_id": {"type": "string"},
            "model": {"type": [model_type, "null"]},
        },
    }


def _snapshot(offset_seconds: int = 0, **kwargs):
    return create_snapshot(
        kwargs.pop("document", _schema()),
        captured_at=_BASE_TIME + timedelta(seconds=offset_seconds),
        **kwargs,
    )


def test_create_snapshot_derives_id_and_hash() -> None:
    snapshot = _snapshot(revision_id="71c00814247c", note="Initial baseline")

    assert snapshot.snapshot_id == "20250820_123045_123456"
    assert snapshot.content_hash == compute_content_hash(_schema())
    assert snapshot.revision_id == "71c00814247c"
    assert snapshot.note == "Initial baseline"


def test_create_snapshot_normalizes_capture_time_to_utc() -> None:
    local_time = datetime(2025, 8, 20, 14, 30, 45, tzinfo=timezone(timedelta(hours=2)))

    snapshot = create_snapshot(_schema(), captured_at=local_time)

    assert snapshot.captured_at.tzinfo == UTC
    assert snapshot.snapshot_id == "20250820_123045_000000"


def test_create_snapshot_rejects_non_object_documents() -> None:
    with pytest.raises(SchemaValidationError):
        create_snapshot(["not", "a", "schema"], captured_at=_BASE_TIME)


def test_save_writes_record_named_by_capture_time(tmp_path: Path) -> None:
    snapshot_dir = tmp_path / "schemas"

    path = save_snapshot(_snapshot(note="baseline"), snapshot_dir, prefix="conversation_schema")

    assert path == snapshot_dir / "conversation_schema_20250820_123045_123456.json"
    record = json.loads(path.read_text(encoding="utf-8"))
    assert record["timestamp"] == "2025-08-20T12:30:45.123456+00:00"
    assert record["git_commit"] is None
    assert record["schema_hash"] == compute_content_hash(_schema())
    assert record["note"] == "baseline"
    assert record["schema"] == _schema()


def test_save_never_overwrites_existing_snapshot(tmp_path: Path) -> None:
    save_snapshot(_snapshot(), tmp_path)

    with pytest.raises(SnapshotStoreError, match="already exists"):
        save_snapshot(_snapshot(), tmp_path)


def test_round_trips_snapshot_through_file(tmp_path: Path) -> None:
    original = _snapshot(revision_id="abc123", note="n")

    loaded = load_snapshot_file(save_snapshot(original, tmp_path))

    assert loaded == original


def test_load_all_orders_by_capture_time(tmp_path: Path) -> None:
    for offset in (120, 0, 60):
        save_snapshot(_snapshot(offset), tmp_path)

    snapshots = load_all(tmp_path)

    assert [snapshot.captured_at for snapshot in snapshots] == sorted(
        snapshot.captured_at for snapshot in snapshots
    )
    assert len(snapshots) == 3
    assert load_latest(tmp_path) == snapshots[-1]


def test_filename_order_matches_capture_order(tmp_path: Path) -> None:
    paths = [save_snapshot(_snapshot(offset), tmp_path) for offset in (3600, 1, 86400)]

    by_name = sorted(paths, key=lambda path: path.name)
    by_time = [paths[1], paths[0], paths[2]]

    assert by_name == by_time


def test_listing_creates_missing_directory(tmp_path: Path) -> None:
    snapshot_dir = tmp_path / "does" / "not" / "exist"

    assert load_all(snapshot_dir) == []
    assert load_latest(snapshot_dir) is None
    assert snapshot_dir.is_dir()


def test_corrupt_files_are_reported_without_hiding_others(tmp_path: Path) -> None:
    save_snapshot(_snapshot(0), tmp_path)
    save_snapshot(_snapshot(60), tmp_path)
    (tmp_path / "schema_20250820_123100_000000.json").write_text("{broken", encoding="utf-8")
    (tmp_path / "notes.json").write_text(json.dumps({"unrelated": True}), encoding="utf-8")

    listing = scan_snapshots(tmp_path)

    assert len(listing.snapshots) == 2
    assert sorted(failure.path.name for failure in listing.failures) == [
        "notes.json",
        "schema_20250820_123100_000000.json",
    ]


def test_loads_records_with_nanosecond_timestamps(tmp_path: Path) -> None:
    path = tmp_path / "conversation_schema_20250820_123045.json"
    path.write_text(
        json.dumps(
            {
                "timestamp": "2025-08-20T12:30:45.123456789+00:00",
                "git_commit": "71c00814247c3c2d6e134c3cbd0f23f6745b1466",
                "schema_hash": "f" * 64,
                "note": "Schema capture",
                "schema": _schema(),
            }
        ),
        encoding="utf-8",
    )

    snapshot = load_snapshot_file(path)

    assert snapshot.captured_at == _BASE_TIME
    assert snapshot.revision_id == "71c00814247c3c2d6e134c3cbd0f23f6745b1466"


def test_load_snapshot_file_reports_missing_keys(tmp_path: Path) -> None:
    path = tmp_path / "schema_x.json"
    path.write_text(json.dumps({"timestamp": "2025-08-20T12:30:45+00:00"}), encoding="utf-8")

    with pytest.raises(SnapshotFormatError, match="schema_hash, schema"):
        load_snapshot_file(path)


def test_load_snapshot_file_reports_unreadable_path(tmp_path: Path) -> None:
    with pytest.raises(SnapshotStoreError, match="Failed to read snapshot file"):
        load_snapshot_file(tmp_path / "missing.json")


def test_find_snapshot_resolves_references(tmp_path: Path) -> None:
    first = _snapshot(0)
    second = _snapshot(60, document=_schema("object"))
    save_snapshot(first, tmp_path)
    save_snapshot(second, tmp_path)

    assert find_snapshot(tmp_path, "latest") == second
    assert find_snapshot(tmp_path, "previous") == first
    assert find_snapshot(tmp_path, first.snapshot_id) == first
    with pytest.raises(SnapshotNotFoundError):
        find_snapshot(tmp_path, "20990101_000000_000000")


def test_find_snapshot_requires_enough_snapshots(tmp_path: Path) -> None:
    with pytest.raises(SnapshotNotFoundError):
        find_snapshot(tmp_path, "latest")
    save_snapshot(_snapshot(), tmp_path)
    with pytest.raises(SnapshotNotFoundError):
        find_snapshot(tmp_path, "previous")


def test_out_of_range_timestamp_is_reported_without_hiding_others(tmp_path: Path) -> None:
    save_snapshot(_snapshot(), tmp_path)
    (tmp_path / "schema_00010101_000000_000000.json").write_text(
        json.dumps(
            {
                "timestamp": "0001-01-01T00:00:00+05:00",
                "schema_hash": "f" * 64,
                "schema": _schema(),
            }
        ),
        encoding="utf-8",
    )

    listing = scan_snapshots(tmp_path)

    assert [snapshot.snapshot_id for snapshot in listing.snapshots] == ["20250820_123045_123456"]
    assert len(listing.failures) == 1
    assert "Invalid snapshot timestamp" in listing.failures[0].reason


def test_unencodable_snapshot_is_rejected_before_any_file_is_created(tmp_path: Path) -> None:
    snapshot = _snapshot(document={"type": "object", "title": "\ud800"})

    with pytest.raises(SnapshotStoreError, match="cannot be serialized"):
        save_snapshot(snapshot, tmp_path)

    assert list(tmp_path.iterdir()) == []


def test_over_deep_snapshot_file_is_reported_without_hiding_others(tmp_path: Path) -> None:
    save_snapshot(_snapshot(), tmp_path)
    nested = "[" * 5000 + "]" * 5000
    (tmp_path / "schema_deep.json").write_text(
        '{"timestamp": "2025-08-20T12:30:45+00:00", "schema_hash": "x", '
        f'"schema": {{"type": {nested}}}}}',
        encoding="utf-8",
    )

    listing = scan_snapshots(tmp_path)

    assert len(listing.snapshots) == 1
    assert [failure.path.name for failure in listing.failures] == ["schema_deep.json"]
