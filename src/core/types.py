"""Shared typed models.

This module defines immutable data models used by the transform,
ingest, and store layers to keep stage interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from core.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_COMPOUND_SIZE,
    DEFAULT_JQ_FILTER,
    DEFAULT_MAX_IN_FLIGHT_BATCHES,
    SCHEMA_DATA_FIELD,
    SCHEMA_REF_FIELD,
)


@dataclass(frozen=True)
class PublishOptions:
    """Publish command options.

    Attributes:
        namespace: Target namespace for published statements.
        schema_reference: Object id of the target self-describing schema.
        id_filter: jq filter producing the record identifier.
        jq_filter: jq filter applied to each input record first.
        source_uri: Input file path, ``s3://`` URI, or None for stdin.
        batch_size: Records per store/publish call pair.
        compound: Optional number of records folded into one statement.
        dry_run: Only extract identifiers and print them.
        skip_schema_validation: Skip validating records against the schema.
        max_in_flight: Maximum number of batches published concurrently.
    """

    namespace: str
    schema_reference: str
    id_filter: str
    jq_filter: str = DEFAULT_JQ_FILTER
    source_uri: str | None = None
    batch_size: int = DEFAULT_BATCH_SIZE
    compound: int | None = None
    dry_run: bool = False
    skip_schema_validation: bool = False
    max_in_flight: int = DEFAULT_MAX_IN_FLIGHT_BATCHES


@dataclass(frozen=True)
class PublishRequestOptions:
    """Per-run options shared by every publish call.

    Attributes:
        namespace: Target namespace.
        compound: Optional compound group size.
    """

    namespace: str
    compound: int | None = None

    @property
    def compound_size(self) -> int:
        """Return the effective group size, one when not compounding."""
        return self.compound or DEFAULT_COMPOUND_SIZE


@dataclass(frozen=True)
class SchemaDescriptor:
    """The ``self`` block of a self-describing schema."""

    vendor: str
    name: str
    format: str
    version: str


@dataclass(frozen=True)
class SelfDescribingSchema:
    """A validated self-describing JSON schema.

    Attributes:
        reference: Object id the schema was fetched by.
        descriptor: Vendor, name, format and version of the schema.
        document: Full JSON Schema document.
    """

    reference: str
    descriptor: SchemaDescriptor
    document: Mapping[str, Any]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one payload against a schema.

    Attributes:
        success: Whether the payload conforms to the schema.
        error: Best-match validation message when it does not.
    """

    success: bool
    error: str | None = None


@dataclass(frozen=True)
class IdentifiedRecord:
    """Transformer output pairing an identifier with its object.

    Attributes:
        identifier: Non-empty identifier extracted by the id filter.
        obj: Object produced by the content filter.
    """

    identifier: str
    obj: Any


@dataclass(frozen=True)
class SelfDescribingObject:
    """Payload tagged with the reference of the schema it conforms to."""

    schema_ref: str
    data: Any

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON wire form of the object."""
        return {SCHEMA_REF_FIELD: self.schema_ref, SCHEMA_DATA_FIELD: self.data}


@dataclass(frozen=True)
class StoredStatement:
    """Statement whose object has been replaced by its content address.

    Attributes:
        object: Content address returned by the remote store.
        refs: Identifiers the statement binds to the object.
        tags: Free-form statement tags.
    """

    object: str
    refs: tuple[str, ...]
    tags: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON wire form of the statement."""
        return {"object": self.object, "refs": list(self.refs), "tags": list(self.tags)}


@dataclass(frozen=True)
class DraftStatement:
    """Statement still carrying its full self-describing object.

    Attributes:
        object: Self-describing object the statement refers to.
        refs: Identifiers the statement binds to the object.
        tags: Free-form statement tags.
    """

    object: SelfDescribingObject
    refs: tuple[str, ...]
    tags: tuple[str, ...] = ()

    def stored(self, content_address: str) -> StoredStatement:
        """Return the stored phase of this statement.

        Args:
            content_address: Address of ``object.data`` in the remote store.

        Returns:
            Statement referencing the stored object by address.
        """
        return StoredStatement(object=content_address, refs=self.refs, tags=self.tags)


@dataclass(frozen=True)
class Batch:
    """Index-aligned payloads and draft statements flushed together.

    Attributes:
        payloads: Raw payload objects to store.
        statements: Draft statements, ``statements[i].object.data is payloads[i]``.
        sequence: Zero-based flush order of the batch within its run.
    """

    payloads: tuple[Any, ...]
    statements: tuple[DraftStatement, ...]
    sequence: int = 0

    def __len__(self) -> int:
        return len(self.payloads)


@dataclass(frozen=True)
class BatchResult:
    """Correlated results of one published batch.

    Attributes:
        content_addresses: Stored payload addresses in batch order.
        statement_ids: Published statement ids in compound group order.
        statements: Stored statements in batch order.
        compound_size: Records folded into each statement id.
    """

    content_addresses: tuple[str, ...]
    statement_ids: tuple[str, ...]
    statements: tuple[StoredStatement, ...]
    compound_size: int = DEFAULT_COMPOUND_SIZE


@dataclass(frozen=True)
class ReportMember:
    """One record inside a reported statement."""

    object: str
    refs: tuple[str, ...]
    tags: tuple[str, ...]


@dataclass(frozen=True)
class ReportEntry:
    """Human-readable report unit for one published statement id."""

    statement_id: str
    members: tuple[ReportMember, ...]


@dataclass(frozen=True)
class BatchFailure:
    """Error captured for a batch that failed to publish.

    Attributes:
        sequence: Flush order of the failed batch.
        record_count: Number of records in the batch.
        message: Error message.
    """

    sequence: int
    record_count: int
    message: str


class RunStatus(str, Enum):
    """Enumerated outcome of a publish run."""

    SUCCESS = "success"
    BATCH_FAILURES = "batch_failures"
    INPUT_READ_FAILED = "input_read_failed"


@dataclass(frozen=True)
class RunOutcome:
    """Summary of a settled publish run.

    Attributes:
        status: Overall run status.
        records_read: Records that passed transform and validation.
        batches_flushed: Batches handed to the publisher.
        statements_published: Statement ids returned across batches.
        errors: Failures of individual batches.
        input_error: Read failure that ended the input stream early.
    """

    status: RunStatus
    records_read: int
    batches_flushed: int = 0
    statements_published: int = 0
    errors: tuple[BatchFailure, ...] = field(default_factory=tuple)
    input_error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether every batch published and the input was fully read."""
        return self.status is RunStatus.SUCCESS


@dataclass(frozen=True)
class UploadOutcome:
    """Summary of a raw object upload run.

    Attributes:
        objects_stored: Objects acknowledged with a content address.
        errors: Messages of chunks that failed to store.
        input_error: Read failure that ended the input stream early.
    """

    objects_stored: int
    errors: tuple[str, ...] = ()
    input_error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether every chunk stored and the input was fully read."""
        return not self.errors and self.input_error is None
