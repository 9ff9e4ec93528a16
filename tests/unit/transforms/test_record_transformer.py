"""Unit tests for the record transform stage."""

from __future__ import annotations

import asyncio

import pytest

from core.errors import QuillDataQualityError
from transforms.filter_composer import compose_jq_filters
from transforms.record_transformer import compile_filter, stream_records, transform_records


def _program(content_filter: str = ".", id_filter: str = ".id"):
    return compile_filter(compose_jq_filters(content_filter, id_filter))


def test_transform_records_yields_identified_records_in_order() -> None:
    """Transformer should emit one identified record per input line."""
    lines = ['{"id": "a", "n": 1}\n', "\n", '{"id": "b", "n": 2}\n']

    records = list(transform_records(lines, _program()))

    assert [(record.identifier, record.obj["n"]) for record in records] == [("a", 1), ("b", 2)]


def test_transform_records_expands_multiple_filter_outputs() -> None:
    """A content filter yielding several values should yield several records."""
    lines = ['{"items": [{"id": "x"}, {"id": "y"}]}']

    records = list(transform_records(lines, _program(".items[]")))

    assert [record.identifier for record in records] == ["x", "y"]


def test_transform_records_skips_records_filtered_out() -> None:
    """A content filter yielding nothing should drop the record."""
    lines = ['{"id": "a", "keep": false}', '{"id": "b", "keep": true}']

    records = list(transform_records(lines, _program("select(.keep)")))

    assert [record.identifier for record in records] == ["b"]


def test_transform_records_is_lazy() -> None:
    """Records before a bad line should be yielded before the error is raised."""
    lines = iter(['{"id": "a"}', '{"id": ""}'])
    records = transform_records(lines, _program())

    first = next(records)

    with pytest.raises(QuillDataQualityError):
        next(records)
    assert first.identifier == "a"


@pytest.mark.parametrize("line", ['{"id": ""}', '{"other": 1}'])
def test_transform_records_rejects_missing_or_empty_identifier(line: str) -> None:
    """Empty and missing identifiers should be fatal."""
    with pytest.raises(QuillDataQualityError, match="Unable to extract id"):
        list(transform_records([line], _program()))


def test_transform_records_rejects_malformed_input_line() -> None:
    """Invalid JSON input should stop the stage."""
    with pytest.raises(QuillDataQualityError):
        list(transform_records(['{"id": "a"', '{"id": "b"}'], _program()))


def test_compile_filter_rejects_invalid_program() -> None:
    """A jq syntax error should surface as a data-quality error."""
    with pytest.raises(QuillDataQualityError, match="Invalid jq filter"):
        compile_filter(".[")


def test_stream_records_reports_line_numbers_from_async_sources() -> None:
    """Async transform should count blank lines when naming a failing line."""

    async def _lines():
        for line in ['{"id": "a"}', "", "not json"]:
            yield line

    async def _collect():
        return [record async for record in stream_records(_lines(), _program())]

    with pytest.raises(QuillDataQualityError, match="input line 3"):
        asyncio.run(_collect())
