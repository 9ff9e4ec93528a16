"""Unit tests for batch publication."""

from __future__ import annotations

import asyncio

import pytest

from core.errors import QuillBatchError
from core.types import Batch, DraftStatement, PublishRequestOptions, SelfDescribingObject
from store.publisher import publish_batch
from tests.remote_fakes import FakeRemoteClient, address_for


def _batch(count: int) -> Batch:
    payloads = tuple({"id": f"r{index}"} for index in range(count))
    statements = tuple(
        DraftStatement(object=SelfDescribingObject("QmSchema", payload), refs=(payload["id"],))
        for payload in payloads
    )
    return Batch(payloads=payloads, statements=statements)


def test_publish_batch_correlates_addresses_and_ids() -> None:
    """Stored statements should carry the address at their own index."""
    client = FakeRemoteClient()
    batch = _batch(3)

    result = asyncio.run(publish_batch(client, PublishRequestOptions("ns"), batch))

    assert result.content_addresses == tuple(address_for(p) for p in batch.payloads)
    assert [s.object for s in result.statements] == list(result.content_addresses)
    assert result.statement_ids == ("stmt:r0", "stmt:r1", "stmt:r2")


def test_publish_batch_returns_one_id_per_compound_group() -> None:
    client = FakeRemoteClient()

    result = asyncio.run(publish_batch(client, PublishRequestOptions("ns", compound=2), _batch(5)))

    assert result.statement_ids == ("stmt:r0", "stmt:r2", "stmt:r4") and result.compound_size == 2


def test_publish_batch_rejects_address_count_mismatch() -> None:
    client = FakeRemoteClient(address_count_delta=-2)

    with pytest.raises(QuillBatchError, match="Expected 3 results .* received 1"):
        asyncio.run(publish_batch(client, PublishRequestOptions("ns"), _batch(3)))

    assert client.published_batches == []


def test_publish_batch_wraps_remote_errors() -> None:
    client = FakeRemoteClient(failing_store_calls=[0])

    with pytest.raises(QuillBatchError, match="node unavailable"):
        asyncio.run(publish_batch(client, PublishRequestOptions("ns"), _batch(1)))


def test_publish_batch_rejects_wrong_statement_id_count() -> None:
    """Ids must cover ceil(N / compound) groups."""

    class _ShortPublishClient(FakeRemoteClient):
        async def publish_statements(self, options, *statements):
            return ["stmt:only"]

    with pytest.raises(QuillBatchError, match="Expected 2 statement ids"):
        asyncio.run(publish_batch(_ShortPublishClient(), PublishRequestOptions("ns"), _batch(2)))


class _BrokenTransportClient(FakeRemoteClient):
    """Client whose publish call fails outside the remote error taxonomy."""

    async def publish_statements(self, options, *statements):
        raise RuntimeError("stream consumed twice")


def test_publish_batch_wraps_unexpected_remote_call_failures() -> None:
    """Any failure from either remote call should become a batch error."""
    client = _BrokenTransportClient()

    with pytest.raises(QuillBatchError, match="Error publishing statements: stream consumed twice"):
        asyncio.run(publish_batch(client, PublishRequestOptions("ns"), _batch(2)))

    assert len(client.stored_batches) == 1
