"""Record transform stage.

This module drives the jq evaluator over newline-delimited JSON input
and yields identified records lazily. Any malformed evaluator output or
missing identifier is fatal for the run.
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterable, AsyncIterator, Iterable, Iterator

import jq

from core.constants import COMPOSED_ID_FIELD, COMPOSED_OBJECT_FIELD
from core.errors import QuillDataQualityError
from core.types import IdentifiedRecord


def compile_filter(program_text: str) -> Any:
    """Compile a jq program.

    Args:
        program_text: jq program source.

    Returns:
        Compiled jq program.

    Raises:
        QuillDataQualityError: If the program does not compile.
    """
    try:
        return jq.compile(program_text)
    except ValueError as error:
        raise QuillDataQualityError(f"Invalid jq filter '{program_text}': {error}") from error


def transform_records(lines: Iterable[str], program: Any) -> Iterator[IdentifiedRecord]:
    """Apply a compiled composed filter to each input line.

    Args:
        lines: Newline-delimited JSON input, consumed exactly once.
        program: Compiled output of ``compose_jq_filters``.

    Yields:
        Identified records in input order.

    Raises:
        QuillDataQualityError: If evaluation, output parsing, or identifier
            extraction fails for any record.
    """
    for line_number, line in enumerate(lines, 1):
        yield from transform_line(program, line, line_number)


async def stream_records(
    lines: AsyncIterable[str], program: Any
) -> AsyncIterator[IdentifiedRecord]:
    """Async counterpart of ``transform_records`` for non-blocking sources."""
    line_number = 0
    async for line in lines:
        line_number += 1
        for record in transform_line(program, line, line_number):
            yield record


def transform_line(program: Any, line: str, line_number: int) -> list[IdentifiedRecord]:
    """Apply a compiled composed filter to one input line.

    Args:
        program: Compiled output of ``compose_jq_filters``.
        line: One newline-delimited JSON input line.
        line_number: One-based position of the line, used in error messages.

    Returns:
        Identified records emitted for the line; empty for a blank line.

    Raises:
        QuillDataQualityError: If evaluation, output parsing, or identifier
            extraction fails.
    """
    if not line.strip():
        return []
    raw_output = _evaluate(program, line, line_number)
    return [
        _parse_output(output_line)
        for output_line in raw_output.splitlines()
        if output_line.strip()
    ]


def _evaluate(program: Any, line: str, line_number: int) -> str:
    """Run the program on one input line and return its raw text output."""
    try:
        return program.input_text(line).text()
    except ValueError as error:
        raise QuillDataQualityError(
            f"Error applying jq filter to input line {line_number}: {error}\ninput: {line.rstrip()}"
        ) from error


def _parse_output(output_line: str) -> IdentifiedRecord:
    """Parse one composed-filter output unit.

    Args:
        output_line: Raw JSON text emitted by jq.

    Returns:
        Identified record.

    Raises:
        QuillDataQualityError: If output is not a JSON object or lacks an id.
    """
    try:
        parsed = json.loads(output_line)
    except json.JSONDecodeError as error:
        raise QuillDataQualityError(
            f"Error parsing jq output: {error.msg}\njq output: {output_line}"
        ) from error
    if not isinstance(parsed, dict):
        raise QuillDataQualityError(f"Error parsing jq output: expected object\njq output: {output_line}")
    identifier = parsed.get(COMPOSED_ID_FIELD)
    obj = parsed.get(COMPOSED_OBJECT_FIELD)
    if not isinstance(identifier, str) or not identifier:
        raise QuillDataQualityError(
            "Unable to extract id. Input record: \n" + json.dumps(obj, indent=2)
        )
    return IdentifiedRecord(identifier=identifier, obj=obj)
