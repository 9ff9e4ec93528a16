"""Async HTTP client for the remote node.

This module wraps httpx for schema retrieval, content-addressed
object storage, statement publication, and statement lookup.
Transport and status failures surface as ``QuillRemoteError``.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

import httpx

from core.config import QuillConfig
from core.constants import NDJSON_CONTENT_TYPE
from core.errors import QuillRemoteError
from core.types import PublishRequestOptions, StoredStatement


class RemoteClient:
    """Client for the remote node HTTP API."""

    def __init__(
        self,
        api_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create a client.

        Args:
            api_url: Base URL of the node API.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport override.
        """
        self._http = httpx.AsyncClient(base_url=api_url, timeout=timeout, transport=transport)

    @classmethod
    def from_config(cls, config: QuillConfig) -> "RemoteClient":
        """Build a client from runtime configuration."""
        return cls(api_url=config.api_url, timeout=config.request_timeout)

    async def __aenter__(self) -> "RemoteClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def get_data(self, object_id: str) -> Any:
        """Fetch and decode one stored object.

        Args:
            object_id: Content address of the object.

        Returns:
            Decoded JSON document.

        Raises:
            QuillRemoteError: If the request or decoding fails.
        """
        response = await self._request("GET", f"/data/get/{object_id}")
        return _decode_json(response)

    async def fetch_schema(self, reference: str) -> Any:
        """Fetch a schema document by its object id."""
        return await self.get_data(reference)

    async def store_objects(self, *payloads: Any) -> list[str]:
        """Store payloads and return their content addresses in order.

        Args:
            payloads: JSON-serializable objects.

        Returns:
            One content address per line of the response.

        Raises:
            QuillRemoteError: If the request fails.
        """
        if not payloads:
            return []
        response = await self._request(
            "POST",
            "/data/put",
            content=_encode_ndjson(payloads),
            headers={"Content-Type": NDJSON_CONTENT_TYPE},
        )
        return _response_lines(response)

    async def publish_statements(
        self,
        options: PublishRequestOptions,
        *statements: StoredStatement,
    ) -> list[str]:
        """Publish statements and return their statement ids.

        Args:
            options: Namespace and optional compound size.
            statements: Statements referencing stored objects.

        Returns:
            Statement ids, one per compound group, in group order.

        Raises:
            QuillRemoteError: If the request fails.
        """
        if not statements:
            return []
        path = f"/publish/{options.namespace}"
        if options.compound is not None:
            path = f"{path}/{options.compound}"
        response = await self._request(
            "POST",
            path,
            content=_encode_ndjson(statement.to_payload() for statement in statements),
            headers={"Content-Type": NDJSON_CONTENT_TYPE},
        )
        return _response_lines(response)

    async def get_statement(self, statement_id: str) -> Any:
        """Fetch one published statement by id."""
        response = await self._request("GET", f"/stmt/{statement_id}")
        return _decode_json(response)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as error:
            raise QuillRemoteError(
                f"{method} {path} failed with status {error.response.status_code}: "
                f"{error.response.text.strip()}"
            ) from error
        except httpx.HTTPError as error:
            raise QuillRemoteError(f"{method} {path} failed: {error}") from error
        return response


def _encode_ndjson(items: Iterable[Any]) -> str:
    """Encode objects as newline-delimited JSON."""
    return "".join(json.dumps(item, sort_keys=True) + "\n" for item in items)


def _response_lines(response: httpx.Response) -> list[str]:
    """Split a line-oriented response body into non-empty values."""
    return [line.strip() for line in response.text.splitlines() if line.strip()]


def _decode_json(response: httpx.Response) -> Any:
    """Decode a JSON response body.

    Raises:
        QuillRemoteError: If the body is not valid JSON.
    """
    try:
        return response.json()
    except ValueError as error:
        raise QuillRemoteError(
            f"Invalid JSON response from {response.request.url}: {error}"
        ) from error
