"""Corpus reader tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from schema_tracker.compatibility_checking import check_corpus
from schema_tracker.usage_analysis import (
    analyze_usage,
    CorpusReadError,
    FailureKind,
    glob_corpus,
    parse_corpus_texts,
    read_corpus,
)


def _write(path: Path, contents: str | bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(contents, bytes):
        path.write_bytes(contents)
    else:
        path.write_text(contents, encoding="utf-8")
    return path


def test_glob_corpus_returns_sorted_files(tmp_path: Path) -> None:
    _write(tmp_path / "b" / "two.json", "{}")
    _write(tmp_path / "a" / "one.json", "{}")
    _write(tmp_path / "a" / "ignored.txt", "{}")
    (tmp_path / "dir.json").mkdir()

    paths = glob_corpus(tmp_path, "**/*.json")

    assert paths == [tmp_path / "a" / "one.json", tmp_path / "b" / "two.json"]


def test_reads_documents_and_records_failures(tmp_path: Path) -> None:
    good = _write(tmp_path / "good.json", json.dumps({"conversation_id": "c1"}))
    broken = _write(tmp_path / "broken.json", "{not json")
    binary = _write(tmp_path / "binary.json", b"\xff\xfe\x00")
    missing = tmp_path / "missing.json"

    result = read_corpus([good, broken, binary, missing])

    assert result.values == ({"conversation_id": "c1"},)
    assert result.documents[0].source == str(good)
    kinds = {failure.source: failure.kind for failure in result.failures}
    assert kinds == {
        str(binary): FailureKind.READ,
        str(missing): FailureKind.READ,
        str(broken): FailureKind.PARSE,
    }


def test_zero_readable_documents_aborts(tmp_path: Path) -> None:
    broken = _write(tmp_path / "broken.json", "[1,")

    with pytest.raises(CorpusReadError, match="None of the 1 corpus files"):
        read_corpus([broken])


def test_empty_path_list_is_not_an_error() -> None:
    result = read_corpus([])

    assert result.documents == ()
    assert result.failures == ()


def test_non_standard_number_constants_are_parse_failures() -> None:
    result = parse_corpus_texts([("nan.json", '{"value": NaN}'), ("ok.json", '{"value": 1}')])

    assert result.values == ({"value": 1},)
    assert [failure.source for failure in result.failures] == ["nan.json"]
    assert result.failures[0].kind is FailureKind.PARSE


def test_out_of_range_numbers_are_parse_failures(tmp_path: Path) -> None:
    good = _write(tmp_path / "good.json", '{"size": 1e300}')
    huge = _write(tmp_path / "huge.json", '{"size": 1e400}')

    result = read_corpus([good, huge])

    assert result.values == ({"size": 1e300},)
    assert [failure.source for failure in result.failures] == [str(huge)]
    assert result.failures[0].kind is FailureKind.PARSE


def test_over_deep_documents_are_parse_failures(tmp_path: Path) -> None:
    good = _write(tmp_path / "good.json", '{"a": [[1]]}')
    decoder_limit = _write(tmp_path / "very-deep.json", "[" * 5000 + "]" * 5000)
    traversal_limit = _write(tmp_path / "deep.json", "[" * 300 + "]" * 300)

    result = read_corpus([good, decoder_limit, traversal_limit])

    assert result.values == ({"a": [[1]]},)
    assert {failure.source for failure in result.failures} == {
        str(decoder_limit),
        str(traversal_limit),
    }
    assert all(failure.kind is FailureKind.PARSE for failure in result.failures)


def test_lone_surrogates_are_parse_failures() -> None:
    result = parse_corpus_texts([("bad.json", '{"title": "\\ud800"}'), ("ok.json", "{}")])

    assert result.values == ({},)
    assert [failure.source for failure in result.failures] == ["bad.json"]


def test_excluded_documents_never_abort_analysis_or_checks(tmp_path: Path) -> None:
    good = _write(tmp_path / "good.json", json.dumps({"id": "a"}))
    huge = _write(tmp_path / "huge.json", '{"id": 1e400}')
    corpus = read_corpus([good, huge])

    report = analyze_usage(corpus.values, failures=corpus.failures)
    verdicts = check_corpus({"type": "object", "required": ["id"]}, corpus)

    assert report.total_documents == 1
    assert report.parse_failures == 1
    assert [verdict.compatible for verdict in verdicts] == [True, False]
