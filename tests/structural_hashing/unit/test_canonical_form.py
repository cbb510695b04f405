"""Canonical rendering tests."""

from __future__ import annotations

from schema_tracker.structural_hashing.canonical_form import (
    canonical_json,
    render_canonical_lines,
)


def test_canonical_json_sorts_keys_without_whitespace() -> None:
    assert canonical_json({"b": 1, "a": [True, None, "é"]}) == '{"a":[true,null,"é"],"b":1}'


def test_renders_path_qualified_lines_in_sorted_order() -> None:
    document = {
        "type": "object",
        "properties": {
            "model": {"type": ["string", "null"]},
            "id": {"type": "string"},
        },
    }

    texts = [line.text for line in render_canonical_lines(document)]

    assert texts == [
        "properties:",
        "  properties.id:",
        '    properties.id.type: "string"',
        "  properties.model:",
        '    properties.model.type: ["string", "null"]',
        'type: "object"',
    ]


def test_arrays_of_containers_render_one_line_per_element() -> None:
    document = {"anyOf": [{"type": "null"}, {}], "required": []}

    texts = [line.text for line in render_canonical_lines(document)]

    assert texts == [
        "anyOf:",
        "  anyOf[0]:",
        '    anyOf[0].type: "null"',
        "  anyOf[1]: {}",
        "required: []",
    ]


def test_line_metadata_exposes_keyword_segments() -> None:
    lines = render_canonical_lines({"properties": {"model": {"type": "string"}}})
    by_path = {line.path: line for line in lines}

    assert by_path["properties.model"].parent_segment == "properties"
    assert by_path["properties.model.type"].last_segment == "type"
    assert by_path["properties.model.type"].depth == 2


def test_line_metadata_keeps_bracketed_keys_whole() -> None:
    lines = render_canonical_lines(
        {"properties": {"a.b": {"type": "string"}, "x]y": {"items": [{"type": "null"}]}}}
    )
    by_path = {line.path: line for line in lines}

    assert by_path['properties["a.b"]'].last_segment == "a.b"
    assert by_path['properties["a.b"]'].parent_segment == "properties"
    assert by_path['properties["a.b"].type'].last_segment == "type"
    assert by_path['properties["a.b"].type'].parent_segment == "a.b"
    assert by_path['properties["x]y"].items[0].type'].parent_segment == "items"


def test_ignored_keys_are_not_rendered() -> None:
    lines = render_canonical_lines(
        {"_generation_timestamp": "now", "title": "State"},
        ignored_keys=("_generation_timestamp",),
    )

    assert [line.text for line in lines] == ['title: "State"']
