"""Python SDK for publish operations.

This module exposes synchronous entry points that drive the async
publish pipeline, raw uploads, and statement lookups.
"""

from __future__ import annotations

import asyncio
from typing import Any

from core.config import QuillConfig
from core.types import PublishOptions, RunOutcome, UploadOutcome
from ingest.input_reader import open_input_stream
from ingest.pipeline import run_publish
from ingest.raw_upload import upload_raw_objects
from store.remote_client import RemoteClient


class QuillClient:
    """Primary SDK entry point for publishing workflows."""

    def __init__(self, config: QuillConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or QuillConfig.from_env()

    @property
    def config(self) -> QuillConfig:
        return self._config

    def publish(self, options: PublishOptions) -> RunOutcome:
        """Publish a newline-delimited JSON source as statements.

        Args:
            options: Publish options.

        Returns:
            Outcome after every batch has settled.

        Raises:
            QuillRetrievalError: If the target schema cannot be loaded.
            QuillDataQualityError: If any record is rejected.
        """
        return asyncio.run(run_publish(options, self._config))

    def put_data(self, source_uri: str | None, batch_size: int) -> UploadOutcome:
        """Store raw JSON objects from a source and print their addresses.

        Args:
            source_uri: Local path, ``s3://`` URI, or None for stdin.
            batch_size: Objects per store call.

        Returns:
            Upload summary.
        """
        input_stream = open_input_stream(source_uri, self._config)
        return asyncio.run(self._put_data(input_stream, batch_size))

    def statement(self, statement_id: str) -> Any:
        """Fetch one published statement.

        Raises:
            QuillRemoteError: If the statement cannot be retrieved.
        """
        return asyncio.run(self._statement(statement_id))

    async def _put_data(self, input_stream: Any, batch_size: int) -> UploadOutcome:
        async with RemoteClient.from_config(self._config) as client:
            return await upload_raw_objects(input_stream, client, batch_size)

    async def _statement(self, statement_id: str) -> Any:
        async with RemoteClient.from_config(self._config) as client:
            return await client.get_statement(statement_id)
