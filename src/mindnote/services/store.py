"""Block persistence: an in-memory store and a JSON-over-HTTP client."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..core.blocks import BlockFormatError, ContentBlock, block_from_dict, block_to_dict

__all__ = ["BlockStore", "BlockStoreError", "InMemoryBlockStore", "RemoteBlockStore"]

LOGGER = logging.getLogger(__name__)


class BlockStoreError(RuntimeError):
    """Raised when the block store cannot complete a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class _RetryableStatus(Exception):
    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


class BlockStore(Protocol):
    """CRUD interface keyed by block id."""

    async def get(self, block_id: str) -> ContentBlock | None: ...

    async def put(self, block: ContentBlock) -> None: ...

    async def delete(self, block_id: str) -> None: ...


class InMemoryBlockStore:
    """Dict-backed store holding serialized payloads, like the remote one does."""

    def __init__(self, blocks: Mapping[str, ContentBlock] | None = None) -> None:
        self._payloads: dict[str, dict[str, Any]] = {}
        self.put_count = 0
        for block in (blocks or {}).values():
            self._payloads[block.id] = block_to_dict(block)

    async def get(self, block_id: str) -> ContentBlock | None:
        payload = self._payloads.get(block_id)
        return block_from_dict(payload) if payload is not None else None

    async def put(self, block: ContentBlock) -> None:
        self._payloads[block.id] = block_to_dict(block)
        self.put_count += 1

    async def delete(self, block_id: str) -> None:
        self._payloads.pop(block_id, None)

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._payloads

    def __len__(self) -> int:
        return len(self._payloads)


class RemoteBlockStore:
    """Stores blocks as JSON documents at ``{base_url}/blocks/{id}``.

    Transport errors and 5xx responses are retried with exponential backoff;
    other failures raise :class:`BlockStoreError` straight away.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        token: str | None = None,
        timeout: float = 15.0,
        max_retries: int = 3,
        retry_min_seconds: float = 0.5,
        retry_max_seconds: float = 4.0,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = headers
        self._max_retries = max(1, max_retries)
        self._retry_min_seconds = retry_min_seconds
        self._retry_max_seconds = retry_max_seconds

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def get(self, block_id: str) -> ContentBlock | None:
        response = await self._request("GET", block_id)
        if response.status_code == 404:
            return None
        try:
            return block_from_dict(response.json())
        except (ValueError, BlockFormatError) as exc:
            raise BlockStoreError(f"Block {block_id} has an invalid payload: {exc}") from exc

    async def put(self, block: ContentBlock) -> None:
        await self._request("PUT", block.id, json=block_to_dict(block))
        LOGGER.debug("Stored block %s", block.id)

    async def delete(self, block_id: str) -> None:
        await self._request("DELETE", block_id)

    async def _request(self, method: str, block_id: str, **kwargs: Any) -> httpx.Response:
        url = f"{self._base_url}/blocks/{block_id}"
        try:
            async for attempt in self._retrying():
                with attempt:
                    response = await self._client.request(method, url, headers=self._headers, **kwargs)
                    if response.status_code >= 500:
                        raise _RetryableStatus(response)
        except _RetryableStatus as exc:
            raise BlockStoreError(
                f"{method} {url} failed with HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.TransportError as exc:
            raise BlockStoreError(f"{method} {url} failed: {exc}") from exc

        if response.status_code == 404 and method in {"GET", "DELETE"}:
            return response
        if response.status_code >= 400:
            raise BlockStoreError(
                f"{method} {url} failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=self._retry_min_seconds, max=self._retry_max_seconds),
            retry=retry_if_exception_type((httpx.TransportError, _RetryableStatus)),
        )
