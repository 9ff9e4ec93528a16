"""Batch publication.

This module stores one batch's payloads, publishes statements that
reference the returned content addresses, and correlates both
responses back to batch members by position.
"""

from __future__ import annotations

import math
from typing import Any, Protocol

from core.errors import QuillBatchError
from core.types import Batch, BatchResult, PublishRequestOptions, StoredStatement


class PublishingClient(Protocol):
    """Remote calls used by the publisher."""

    async def store_objects(self, *payloads: Any) -> list[str]: ...

    async def publish_statements(
        self, options: PublishRequestOptions, *statements: StoredStatement
    ) -> list[str]: ...


async def publish_batch(
    client: PublishingClient,
    options: PublishRequestOptions,
    batch: Batch,
) -> BatchResult:
    """Store and publish one batch.

    Args:
        client: Remote client.
        options: Namespace and compound size shared by the run.
        batch: Batch to publish.

    Returns:
        Content addresses, statement ids and stored statements of the batch.

    Raises:
        QuillBatchError: If either remote call fails for any reason or returns
            the wrong count.
    """
    record_count = len(batch)
    try:
        content_addresses = await client.store_objects(*batch.payloads)
    except Exception as error:
        raise QuillBatchError(f"Error storing data objects: {error}") from error
    if len(content_addresses) != record_count:
        raise QuillBatchError(
            f"Expected {record_count} results from storing data objects, "
            f"received {len(content_addresses)}"
        )
    stored_statements = tuple(
        draft.stored(address) for draft, address in zip(batch.statements, content_addresses)
    )
    try:
        statement_ids = await client.publish_statements(options, *stored_statements)
    except Exception as error:
        raise QuillBatchError(f"Error publishing statements: {error}") from error
    expected_ids = math.ceil(record_count / options.compound_size)
    if len(statement_ids) != expected_ids:
        raise QuillBatchError(
            f"Expected {expected_ids} statement ids for {record_count} statements "
            f"in groups of {options.compound_size}, received {len(statement_ids)}"
        )
    return BatchResult(
        content_addresses=tuple(content_addresses),
        statement_ids=tuple(statement_ids),
        statements=stored_statements,
        compound_size=options.compound_size,
    )
