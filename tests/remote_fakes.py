"""In-memory remote node doubles for pipeline tests."""

from __future__ import annotations

import asyncio
import json
import math
from typing import Any, Iterable, Iterator

from core.errors import QuillRemoteError
from core.types import PublishRequestOptions, StoredStatement
from ingest.input_reader import InputStream
from tests.fixture_paths import fixture_path

SCHEMA_REFERENCE = "QmArtworkSchema"


def schema_document() -> dict[str, Any]:
    """Return the artwork self-describing schema fixture."""
    return json.loads(fixture_path("schema.json").read_text(encoding="utf-8"))


def address_for(payload: Any) -> str:
    """Return the deterministic fake content address of a payload."""
    return "addr:" + json.dumps(payload, sort_keys=True)


def input_stream(records: Iterable[Any], name: str = "test-input") -> InputStream:
    """Build an input stream of JSON lines from records."""
    return InputStream(name, [json.dumps(record) + "\n" for record in records])


def failing_input_stream(records: Iterable[Any], error: Exception) -> InputStream:
    """Build an input stream that raises after yielding every record."""

    def _lines() -> Iterator[str]:
        for record in records:
            yield json.dumps(record) + "\n"
        raise error

    return InputStream("failing-input", _lines())


class FakeRemoteClient:
    """Remote node double recording every call."""

    def __init__(
        self,
        schema: Any = None,
        schema_error: str | None = None,
        address_count_delta: int = 0,
        failing_store_calls: Iterable[int] = (),
        failing_publish_calls: Iterable[int] = (),
        store_delays: dict[int, float] | None = None,
    ) -> None:
        self._schema = schema_document() if schema is None else schema
        self._schema_error = schema_error
        self._address_count_delta = address_count_delta
        self._failing_store_calls = set(failing_store_calls)
        self._failing_publish_calls = set(failing_publish_calls)
        self._store_delays = store_delays or {}
        self.schema_fetches: list[str] = []
        self.stored_batches: list[tuple[Any, ...]] = []
        self.published_batches: list[tuple[PublishRequestOptions, tuple[StoredStatement, ...]]] = []
        self.events: list[str] = []

    async def fetch_schema(self, reference: str) -> Any:
        self.schema_fetches.append(reference)
        if self._schema_error is not None:
            raise QuillRemoteError(self._schema_error)
        return self._schema

    async def store_objects(self, *payloads: Any) -> list[str]:
        call_index = len(self.stored_batches)
        self.stored_batches.append(payloads)
        self.events.append(f"store-start-{call_index}")
        await asyncio.sleep(self._store_delays.get(call_index, 0))
        self.events.append(f"store-end-{call_index}")
        if call_index in self._failing_store_calls:
            raise QuillRemoteError("POST /data/put failed: node unavailable")
        addresses = [address_for(payload) for payload in payloads]
        if self._address_count_delta < 0:
            return addresses[: self._address_count_delta]
        return addresses + ["addr:extra"] * self._address_count_delta

    async def publish_statements(
        self,
        options: PublishRequestOptions,
        *statements: StoredStatement,
    ) -> list[str]:
        call_index = len(self.published_batches)
        self.published_batches.append((options, statements))
        if call_index in self._failing_publish_calls:
            raise QuillRemoteError("POST /publish failed: namespace locked")
        size = options.compound_size
        group_count = math.ceil(len(statements) / size)
        return [f"stmt:{statements[group * size].refs[0]}" for group in range(group_count)]

    @property
    def stored_payloads(self) -> list[Any]:
        """Payloads of every store call in call order."""
        return [payload for batch in self.stored_batches for payload in batch]
