"""Capture use case tests."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from schema_tracker.capture_workflow import CaptureError, CaptureRequest, execute_capture
from schema_tracker.configuration.runtime_settings import SnapshotSettings
from schema_tracker.snapshot_store import load_all

BASE_TIME = datetime(2025, 1, 15, 10, 30, 0, tzinfo=UTC)


def _settings(tmp_path: Path) -> SnapshotSettings:
    return SnapshotSettings(
        directory=tmp_path / "schemas",
        filename_prefix="schema",
        ignored_keys=("_generation_timestamp",),
    )


def _clock(*offsets: int):
    moments = iter(BASE_TIME + timedelta(seconds=offset) for offset in offsets)
    return lambda: next(moments)


def _write_json(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_captures_schema_file(tmp_path: Path) -> None:
    schema_path = _write_json(
        tmp_path / "schema.json",
        {"type": "object", "properties": {"id": {"type": "string"}}},
    )

    outcome = execute_capture(
        CaptureRequest(schema_path=str(schema_path), note="baseline", revision_id="abc123"),
        settings=_settings(tmp_path),
        clock=_clock(0),
    )

    assert outcome.path == tmp_path / "schemas" / "schema_20250115_103000_000000.json"
    assert outcome.path.exists()
    assert outcome.unchanged_from_latest is False
    assert outcome.snapshot.note == "baseline"
    assert outcome.snapshot.revision_id == "abc123"
    assert len(outcome.snapshot.content_hash) == 64


def test_second_identical_capture_is_flagged_unchanged(tmp_path: Path) -> None:
    settings = _settings(tmp_path)
    clock = _clock(0, 60)
    first = _write_json(tmp_path / "first.json", {"type": "object", "_generation_timestamp": 1})
    second = _write_json(tmp_path / "second.json", {"type": "object", "_generation_timestamp": 2})

    execute_capture(CaptureRequest(schema_path=str(first)), settings=settings, clock=clock)
    outcome = execute_capture(
        CaptureRequest(schema_path=str(second)), settings=settings, clock=clock
    )

    assert outcome.unchanged_from_latest is True
    assert len(load_all(settings.directory)) == 2


def test_infers_schema_from_sample(tmp_path: Path) -> None:
    sample_path = _write_json(tmp_path / "sample.json", {"conversation_id": "c1", "model": None})

    outcome = execute_capture(
        CaptureRequest(sample_path=str(sample_path), title="ConversationState"),
        settings=_settings(tmp_path),
        clock=_clock(0),
    )

    document = outcome.snapshot.document
    assert document["title"] == "ConversationState"
    assert document["required"] == ["conversation_id"]
    assert document["properties"]["conversation_id"]["type"] == "string"


@pytest.mark.parametrize(
    "request_kwargs",
    [{}, {"schema_path": "a.json", "sample_path": "b.json"}],
)
def test_requires_exactly_one_source(tmp_path: Path, request_kwargs: dict) -> None:
    with pytest.raises(CaptureError, match="exactly one"):
        execute_capture(CaptureRequest(**request_kwargs), settings=_settings(tmp_path))


def test_invalid_sample_json_fails(tmp_path: Path) -> None:
    sample_path = tmp_path / "sample.json"
    sample_path.write_text("{broken", encoding="utf-8")

    with pytest.raises(CaptureError, match="Invalid JSON in sample document"):
        execute_capture(CaptureRequest(sample_path=str(sample_path)), settings=_settings(tmp_path))


def test_non_object_schema_fails(tmp_path: Path) -> None:
    schema_path = _write_json(tmp_path / "schema.json", ["not", "an", "object"])

    with pytest.raises(CaptureError, match="JSON object at the root"):
        execute_capture(CaptureRequest(schema_path=str(schema_path)), settings=_settings(tmp_path))

    assert not list((tmp_path / "schemas").glob("*.json"))


def test_capture_never_overwrites_existing_snapshot(tmp_path: Path) -> None:
    settings = _settings(tmp_path)
    schema_path = _write_json(tmp_path / "schema.json", {"type": "object"})
    request = CaptureRequest(schema_path=str(schema_path))

    execute_capture(request, settings=settings, clock=_clock(0))
    with pytest.raises(CaptureError, match="already exists"):
        execute_capture(request, settings=settings, clock=_clock(0))


@pytest.mark.parametrize(
    "contents",
    ['{"size": 1e400}', '{"title": "\\ud800"}', '{"a": ' + "[" * 5000 + "]" * 5000 + "}"],
)
def test_unsupported_sample_content_fails_without_writing(
    tmp_path: Path, contents: str
) -> None:
    sample_path = tmp_path / "sample.json"
    sample_path.write_text(contents, encoding="utf-8")

    with pytest.raises(CaptureError):
        execute_capture(CaptureRequest(sample_path=str(sample_path)), settings=_settings(tmp_path))

    assert not list((tmp_path / "schemas").glob("*.json"))
