"""Input sources for newline-delimited JSON.

This module opens stdin, local files, or S3 objects as lazy line
streams. A read failure mid-stream is logged and ends the stream
without raising, so already-flushed batches can still settle.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, AsyncIterator, Iterable, Iterator

from core.config import QuillConfig
from core.constants import STDIN_SOURCE_NAME, STDIN_SOURCE_URI
from core.errors import QuillDependencyError, QuillIngestError
from core.logging_config import get_logger
from core.s3_uri import S3Location, is_s3_uri, parse_s3_uri

_LOGGER = get_logger(__name__)


class InputStream:
    """Single-pass line stream with terminal read-error tracking."""

    def __init__(self, name: str, lines: Iterable[str]) -> None:
        self.name = name
        self._lines = lines
        self.read_error: str | None = None

    def lines(self) -> Iterator[str]:
        """Yield input lines until exhaustion or a read failure.

        Yields:
            Raw text lines in source order.
        """
        try:
            yield from self._lines
        except (OSError, UnicodeDecodeError) as error:
            self.read_error = str(error)
            _LOGGER.error("input_read_failed", source=self.name, error=str(error))

    async def read_lines(self) -> AsyncIterator[str]:
        """Yield input lines without blocking the event loop.

        Each line is read in a worker thread, so in-flight batches keep
        making progress while the source is slow to produce input.

        Yields:
            Raw text lines in source order.
        """
        lines = self.lines()
        try:
            while True:
                line = await asyncio.to_thread(next, lines, None)
                if line is None:
                    return
                yield line
        finally:
            if not lines.gi_running:
                lines.close()


def open_input_stream(source_uri: str | None, config: QuillConfig) -> InputStream:
    """Open an input source as a line stream.

    Args:
        source_uri: Local file path, ``s3://bucket/key`` URI, or None/``-`` for stdin.
        config: Runtime configuration for S3 session defaults.

    Returns:
        Lazy input stream.

    Raises:
        QuillIngestError: If the source cannot be opened.
    """
    if source_uri is None or source_uri == STDIN_SOURCE_URI:
        return InputStream(STDIN_SOURCE_NAME, sys.stdin)
    if is_s3_uri(source_uri):
        return _open_s3_stream(source_uri, config)
    return _open_local_stream(Path(source_uri).expanduser())


def _open_local_stream(source_path: Path) -> InputStream:
    """Open a local file as a line stream.

    Raises:
        QuillIngestError: If the path is missing or not a file.
    """
    if not source_path.is_file():
        raise QuillIngestError(
            f"Failed to read source at {source_path}: file does not exist. "
            "Provide an existing newline-delimited JSON file."
        )
    return InputStream(str(source_path), _iter_file_lines(source_path))


def _iter_file_lines(source_path: Path) -> Iterator[str]:
    """Yield lines of a UTF-8 file, closing it when exhausted."""
    with source_path.open(encoding="utf-8") as handle:
        yield from handle


def _open_s3_stream(source_uri: str, config: QuillConfig) -> InputStream:
    """Open an S3 object as a line stream.

    Args:
        source_uri: S3 object URI.
        config: Runtime configuration for region/profile.

    Returns:
        Lazy input stream over the object body.

    Raises:
        QuillIngestError: If the object cannot be fetched.
    """
    location = parse_s3_uri(source_uri)
    s3_client = _create_s3_client(config)
    body = _get_s3_object_body(s3_client, location)
    return InputStream(source_uri, _iter_s3_lines(body))


def _create_s3_client(config: QuillConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        QuillDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise QuillDependencyError(
            "S3 input requires boto3, but it is not installed. "
            "Install boto3 to publish from s3:// sources."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _get_s3_object_body(s3_client: Any, location: S3Location) -> Any:
    """Fetch the streaming body of an S3 object.

    Raises:
        QuillIngestError: If the object cannot be read.
    """
    from botocore.exceptions import BotoCoreError, ClientError

    try:
        return s3_client.get_object(Bucket=location.bucket, Key=location.key)["Body"]
    except (BotoCoreError, ClientError) as error:
        raise QuillIngestError(
            f"Failed to read source at s3://{location.bucket}/{location.key}: {error}. "
            "Check the object key and AWS credentials."
        ) from error


def _iter_s3_lines(body: Any) -> Iterator[str]:
    """Yield decoded lines of an S3 streaming body.

    Raises:
        OSError: If the underlying stream fails mid-read.
    """
    from botocore.exceptions import BotoCoreError

    try:
        for raw_line in body.iter_lines():
            yield raw_line.decode("utf-8")
    except BotoCoreError as error:
        raise OSError(f"S3 stream read failed: {error}") from error
    finally:
        body.close()
