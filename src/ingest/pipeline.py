"""Publish orchestration for newline-delimited JSON records.

This module fetches the target schema, streams records through the
transform and validation stages, accumulates batches, and publishes
them concurrently. Data-quality errors abort the run; batch errors
are isolated and reported after every batch settles.
"""

from __future__ import annotations

from contextlib import aclosing
from typing import Any, Protocol

from core.config import QuillConfig, validate_publish_options
from core.errors import QuillError, QuillRemoteError, QuillRetrievalError
from core.logging_config import get_logger
from core.types import (
    Batch,
    BatchFailure,
    BatchResult,
    DraftStatement,
    PublishOptions,
    PublishRequestOptions,
    RunOutcome,
    RunStatus,
    SelfDescribingSchema,
)
from ingest.batch_accumulator import BatchAccumulator
from ingest.batch_dispatcher import BatchDispatcher
from ingest.input_reader import InputStream, open_input_stream
from store.publisher import PublishingClient, publish_batch
from store.remote_client import RemoteClient
from store.result_reporter import format_dry_run_line, print_batch_results
from transforms.filter_composer import compose_jq_filters
from transforms.record_transformer import compile_filter, stream_records
from transforms.schema_validation import (
    SchemaValidator,
    to_self_describing,
    validate_self_describing_schema,
)

_LOGGER = get_logger(__name__)


class PipelineClient(PublishingClient, Protocol):
    """Remote calls used by the publish pipeline."""

    async def fetch_schema(self, reference: str) -> Any: ...


class PublishPipelineRunner:
    """Runner for one publish pass over an input stream."""

    def __init__(self, options: PublishOptions, client: PipelineClient) -> None:
        validate_publish_options(options)
        self._options = options
        self._client = client
        self._request_options = PublishRequestOptions(
            namespace=options.namespace, compound=options.compound
        )
        self._statements_published = 0

    async def run(self, input_stream: InputStream) -> RunOutcome:
        """Publish every record of the input stream.

        Args:
            input_stream: Newline-delimited JSON source.

        Returns:
            Outcome after every flushed batch has settled.

        Raises:
            QuillRetrievalError: If the schema cannot be fetched or is malformed.
            QuillDataQualityError: If any record fails transform or validation.
        """
        schema = await self._load_schema()
        dispatcher: BatchDispatcher[BatchResult] = BatchDispatcher(
            self._publish_batch, self._report_batch, self._options.max_in_flight
        )
        accumulator = BatchAccumulator(self._options.batch_size, dispatcher.dispatch)
        try:
            records_read = await self._ingest(input_stream, schema, accumulator, dispatcher)
        except QuillError:
            await dispatcher.abort()
            raise
        failures = await dispatcher.join()
        outcome = _build_outcome(
            records_read=records_read,
            batches_flushed=accumulator.flushed_count,
            statements_published=self._statements_published,
            failures=failures,
            input_error=input_stream.read_error,
        )
        _log_publish_completion(self._options, input_stream.name, outcome)
        return outcome

    async def _load_schema(self) -> SelfDescribingSchema:
        reference = self._options.schema_reference
        try:
            document = await self._client.fetch_schema(reference)
        except QuillRemoteError as error:
            raise QuillRetrievalError(
                f"Failed to retrieve schema with object id {reference}: {error}"
            ) from error
        schema = validate_self_describing_schema(reference, document)
        _LOGGER.info(
            "schema_loaded",
            schema_reference=reference,
            vendor=schema.descriptor.vendor,
            name=schema.descriptor.name,
            version=schema.descriptor.version,
        )
        return schema

    async def _ingest(
        self,
        input_stream: InputStream,
        schema: SelfDescribingSchema,
        accumulator: BatchAccumulator,
        dispatcher: BatchDispatcher[BatchResult],
    ) -> int:
        """Stream records into the accumulator and return the record count."""
        program = compile_filter(compose_jq_filters(self._options.jq_filter, self._options.id_filter))
        validator = None if self._options.skip_schema_validation else SchemaValidator(schema)
        records_read = 0
        async with aclosing(input_stream.read_lines()) as lines:
            async for record in stream_records(lines, program):
                self_describing = to_self_describing(record.obj, schema.reference)
                if validator is not None:
                    validator.check(self_describing.data)
                statement = DraftStatement(object=self_describing, refs=(record.identifier,))
                records_read += 1
                if self._options.dry_run:
                    print(format_dry_run_line(statement.refs, statement.tags))
                    continue
                accumulator.offer(self_describing.data, statement)
                await dispatcher.wait_for_capacity()
        if not self._options.dry_run:
            accumulator.drain()
        return records_read

    async def _publish_batch(self, batch: Batch) -> BatchResult:
        return await publish_batch(self._client, self._request_options, batch)

    def _report_batch(self, result: BatchResult) -> None:
        self._statements_published += len(result.statement_ids)
        print_batch_results(result)


async def publish_records(
    options: PublishOptions,
    client: PipelineClient,
    input_stream: InputStream,
) -> RunOutcome:
    """Publish an input stream through an existing remote client."""
    return await PublishPipelineRunner(options, client).run(input_stream)


async def run_publish(options: PublishOptions, config: QuillConfig) -> RunOutcome:
    """Open the input source and remote client, then publish.

    Args:
        options: Publish options.
        config: Runtime configuration.

    Returns:
        Settled run outcome.

    Raises:
        QuillConfigError: If options are invalid.
        QuillIngestError: If the input source cannot be opened.
        QuillRetrievalError: If the schema cannot be loaded.
        QuillDataQualityError: If any record is rejected.
    """
    validate_publish_options(options)
    input_stream = open_input_stream(options.source_uri, config)
    async with RemoteClient.from_config(config) as client:
        return await publish_records(options, client, input_stream)


def _build_outcome(
    records_read: int,
    batches_flushed: int,
    statements_published: int,
    failures: tuple[BatchFailure, ...],
    input_error: str | None,
) -> RunOutcome:
    """Derive the run status from settled batches and the input stream."""
    if input_error is not None:
        status = RunStatus.INPUT_READ_FAILED
    elif failures:
        status = RunStatus.BATCH_FAILURES
    else:
        status = RunStatus.SUCCESS
    return RunOutcome(
        status=status,
        records_read=records_read,
        batches_flushed=batches_flushed,
        statements_published=statements_published,
        errors=failures,
        input_error=input_error,
    )


def _log_publish_completion(options: PublishOptions, source: str, outcome: RunOutcome) -> None:
    """Log run completion with contextual metadata."""
    _LOGGER.info(
        "publish_completed",
        namespace=options.namespace,
        schema_reference=options.schema_reference,
        source=source,
        dry_run=options.dry_run,
        status=outcome.status.value,
        records_read=outcome.records_read,
        batches_flushed=outcome.batches_flushed,
        statements_published=outcome.statements_published,
        failed_batches=len(outcome.errors),
    )
