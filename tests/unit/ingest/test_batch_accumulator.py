"""Unit tests for batch accumulation."""

from __future__ import annotations

import pytest

from core.errors import QuillConfigError
from core.types import Batch, DraftStatement, SelfDescribingObject
from ingest.batch_accumulator import BatchAccumulator


def _statement(payload: dict) -> DraftStatement:
    return DraftStatement(
        object=SelfDescribingObject(schema_ref="QmSchema", data=payload),
        refs=(payload["id"],),
    )


def _fill(accumulator: BatchAccumulator, count: int) -> list[dict]:
    payloads = [{"id": f"r{index}"} for index in range(count)]
    for payload in payloads:
        accumulator.offer(payload, _statement(payload))
    return payloads


def test_offer_flushes_when_capacity_is_reached() -> None:
    """A full batch should be handed off and the buffer reset."""
    flushed: list[Batch] = []
    accumulator = BatchAccumulator(2, flushed.append)

    _fill(accumulator, 3)

    assert [len(batch) for batch in flushed] == [2] and len(accumulator) == 1


def test_drain_flushes_partial_batch_once() -> None:
    """End of input should flush the remainder exactly once."""
    flushed: list[Batch] = []
    accumulator = BatchAccumulator(2, flushed.append)
    _fill(accumulator, 3)

    accumulator.drain()
    accumulator.drain()

    assert [len(batch) for batch in flushed] == [2, 1] and accumulator.flushed_count == 2


def test_drain_on_empty_accumulator_does_not_flush() -> None:
    flushed: list[Batch] = []
    accumulator = BatchAccumulator(5, flushed.append)

    accumulator.drain()

    assert flushed == []


def test_batches_reconstruct_input_order() -> None:
    """Concatenating flushed batches should reproduce the offered order."""
    flushed: list[Batch] = []
    accumulator = BatchAccumulator(3, flushed.append)

    payloads = _fill(accumulator, 7)
    accumulator.drain()

    concatenated = [payload for batch in flushed for payload in batch.payloads]
    assert concatenated == payloads
    assert [batch.sequence for batch in flushed] == [0, 1, 2]


def test_batches_keep_payloads_aligned_with_statements() -> None:
    """Each payload should be the data of the statement at the same index."""
    flushed: list[Batch] = []
    accumulator = BatchAccumulator(4, flushed.append)

    _fill(accumulator, 4)

    batch = flushed[0]
    assert all(
        statement.object.data is payload
        for payload, statement in zip(batch.payloads, batch.statements)
    )


def test_accumulator_rejects_non_positive_capacity() -> None:
    with pytest.raises(QuillConfigError):
        BatchAccumulator(0, lambda batch: None)
