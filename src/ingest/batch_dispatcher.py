"""Concurrent batch dispatch.

This module runs one asyncio task per flushed batch, bounds how many
are in flight, and joins them at end of input. Batch errors are
captured per task, whatever their type, and never cancel sibling
batches.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, TypeVar

from core.errors import QuillConfigError
from core.logging_config import get_logger
from core.types import Batch, BatchFailure

_LOGGER = get_logger(__name__)

ResultT = TypeVar("ResultT")


class BatchDispatcher(Generic[ResultT]):
    """Tracks independently running batch tasks."""

    def __init__(
        self,
        publish: Callable[[Batch], Awaitable[ResultT]],
        on_result: Callable[[ResultT], None],
        max_in_flight: int,
    ) -> None:
        """Create a dispatcher.

        Args:
            publish: Coroutine function processing one batch.
            on_result: Callback receiving each successful batch result.
            max_in_flight: Maximum number of unsettled batch tasks.

        Raises:
            QuillConfigError: If max_in_flight is not positive.
        """
        if max_in_flight < 1:
            raise QuillConfigError(f"max_in_flight must be at least 1, got {max_in_flight}.")
        self._publish = publish
        self._on_result = on_result
        self._max_in_flight = max_in_flight
        self._tasks: list[asyncio.Task[None]] = []
        self._failures: list[BatchFailure] = []
        self._completed_count = 0

    @property
    def dispatched_count(self) -> int:
        """Number of batches dispatched so far."""
        return len(self._tasks)

    @property
    def completed_count(self) -> int:
        """Number of batches that published successfully."""
        return self._completed_count

    def dispatch(self, batch: Batch) -> None:
        """Start publishing a batch without waiting for it.

        Must be called from inside a running event loop.
        """
        task = asyncio.get_running_loop().create_task(
            self._run(batch), name=f"publish-batch-{batch.sequence}"
        )
        self._tasks.append(task)

    async def wait_for_capacity(self) -> None:
        """Yield to running batches and block while the in-flight bound is reached."""
        await asyncio.sleep(0)
        pending = {task for task in self._tasks if not task.done()}
        while len(pending) >= self._max_in_flight:
            _, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)

    async def join(self) -> tuple[BatchFailure, ...]:
        """Wait for every dispatched batch to settle.

        Returns:
            Captured batch failures ordered by flush sequence.
        """
        await asyncio.gather(*self._tasks)
        return tuple(sorted(self._failures, key=lambda failure: failure.sequence))

    async def abort(self) -> None:
        """Cancel unsettled batches after a fatal run error."""
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    async def _run(self, batch: Batch) -> None:
        try:
            result = await self._publish(batch)
        except Exception as error:
            message = str(error) or type(error).__name__
            self._failures.append(
                BatchFailure(sequence=batch.sequence, record_count=len(batch), message=message)
            )
            _LOGGER.error(
                "batch_failed",
                sequence=batch.sequence,
                record_count=len(batch),
                error=message,
            )
            return
        self._completed_count += 1
        _LOGGER.info("batch_published", sequence=batch.sequence, record_count=len(batch))
        self._on_result(result)
