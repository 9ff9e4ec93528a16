"""Raw object upload.

This module stores newline-delimited JSON objects on the remote node
in fixed-size chunks without schemas or statements, printing one
content address per stored object.
"""

from __future__ import annotations

import json
from contextlib import aclosing
from typing import Any, Protocol

from core.errors import QuillConfigError, QuillDataQualityError, QuillRemoteError
from core.logging_config import get_logger
from core.types import UploadOutcome
from ingest.input_reader import InputStream

_LOGGER = get_logger(__name__)


class ObjectStore(Protocol):
    """Remote call used by the uploader."""

    async def store_objects(self, *payloads: Any) -> list[str]: ...


async def upload_raw_objects(
    input_stream: InputStream,
    client: ObjectStore,
    batch_size: int,
) -> UploadOutcome:
    """Store every object of an input stream.

    Args:
        input_stream: Newline-delimited JSON source.
        client: Remote object store.
        batch_size: Objects per store call.

    Returns:
        Upload summary; failed chunks are logged and skipped.

    Raises:
        QuillConfigError: If batch size is not positive.
        QuillDataQualityError: If a line is not valid JSON.
    """
    if batch_size < 1:
        raise QuillConfigError(f"Batch size must be at least 1, got {batch_size}.")
    stored_count = 0
    errors: list[str] = []
    chunk: list[Any] = []
    line_number = 0
    async with aclosing(input_stream.read_lines()) as lines:
        async for line in lines:
            line_number += 1
            if not line.strip():
                continue
            chunk.append(_parse_line(line, line_number))
            if len(chunk) >= batch_size:
                stored_count += await _store_chunk(client, chunk, errors)
                chunk = []
    if chunk:
        stored_count += await _store_chunk(client, chunk, errors)
    _LOGGER.info(
        "put_data_completed",
        source=input_stream.name,
        objects_stored=stored_count,
        failed_chunks=len(errors),
    )
    return UploadOutcome(
        objects_stored=stored_count,
        errors=tuple(errors),
        input_error=input_stream.read_error,
    )


async def _store_chunk(client: ObjectStore, chunk: list[Any], errors: list[str]) -> int:
    """Store one chunk, printing addresses, and return the stored count."""
    try:
        addresses = await client.store_objects(*chunk)
    except QuillRemoteError as error:
        errors.append(str(error))
        _LOGGER.error("put_data_failed", object_count=len(chunk), error=str(error))
        return 0
    for address in addresses:
        print(address)
    return len(addresses)


def _parse_line(line: str, line_number: int) -> Any:
    """Parse one JSON input line.

    Raises:
        QuillDataQualityError: If the line is not valid JSON.
    """
    try:
        return json.loads(line)
    except json.JSONDecodeError as error:
        raise QuillDataQualityError(
            f"Failed to parse JSON input at line {line_number}: {error.msg}"
        ) from error
