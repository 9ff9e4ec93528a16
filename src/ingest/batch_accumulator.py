"""Bounded batch accumulation.

This module buffers index-aligned payloads and draft statements and
hands each full batch to a flush callback without waiting on it.
"""

from __future__ import annotations

from typing import Any, Callable

from core.errors import QuillConfigError
from core.logging_config import get_logger
from core.types import Batch, DraftStatement

_LOGGER = get_logger(__name__)


class BatchAccumulator:
    """Accumulates records into disjoint batches in input order."""

    def __init__(self, capacity: int, on_flush: Callable[[Batch], None]) -> None:
        """Create an empty accumulator.

        Args:
            capacity: Records per batch.
            on_flush: Callback receiving each completed batch.

        Raises:
            QuillConfigError: If capacity is not positive.
        """
        if capacity < 1:
            raise QuillConfigError(f"Batch size must be at least 1, got {capacity}.")
        self._capacity = capacity
        self._on_flush = on_flush
        self._payloads: list[Any] = []
        self._statements: list[DraftStatement] = []
        self._flushed_count = 0

    def __len__(self) -> int:
        return len(self._payloads)

    @property
    def flushed_count(self) -> int:
        """Number of batches flushed so far."""
        return self._flushed_count

    def offer(self, payload: Any, statement: DraftStatement) -> None:
        """Append one record and flush when the batch is full.

        Args:
            payload: Raw payload to store.
            statement: Draft statement whose object wraps ``payload``.
        """
        self._payloads.append(payload)
        self._statements.append(statement)
        if len(self._payloads) >= self._capacity:
            self._flush()

    def drain(self) -> None:
        """Flush the remaining partial batch at end of input."""
        if self._payloads:
            self._flush()

    def _flush(self) -> None:
        batch = self._swap()
        _LOGGER.info("batch_flushed", sequence=batch.sequence, record_count=len(batch))
        self._on_flush(batch)

    def _swap(self) -> Batch:
        """Take the current sequences as a batch and reset to empty."""
        payloads, statements = self._payloads, self._statements
        self._payloads, self._statements = [], []
        batch = Batch(
            payloads=tuple(payloads),
            statements=tuple(statements),
            sequence=self._flushed_count,
        )
        self._flushed_count += 1
        return batch
