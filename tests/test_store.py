"""Tests for the in-memory and HTTP block stores."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from mindnote.core.blocks import AttachmentBlock, TextBlock, block_to_dict
from mindnote.core.levels import ImportanceLevel
from mindnote.core.ranges import AnnotationRange
from mindnote.services.store import BlockStoreError, InMemoryBlockStore, RemoteBlockStore

BLOCK = TextBlock(
    id="b1",
    content="Hello World",
    ranges=(AnnotationRange(0, 3, ImportanceLevel.CRITICAL),),
)


def _remote(handler, **kwargs) -> RemoteBlockStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    kwargs.setdefault("retry_min_seconds", 0)
    kwargs.setdefault("retry_max_seconds", 0)
    return RemoteBlockStore("https://notes.example/api/", client=client, **kwargs)


def test_in_memory_store_round_trip() -> None:
    async def _run() -> None:
        store = InMemoryBlockStore({"f1": AttachmentBlock(kind="file", id="f1", payload={"name": "a.txt"})})

        await store.put(BLOCK)
        assert await store.get("b1") == BLOCK
        assert len(store) == 2

        await store.delete("b1")
        assert await store.get("b1") is None
        assert "f1" in store

    asyncio.run(_run())


def test_remote_put_sends_block_payload_with_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    async def _run() -> None:
        store = _remote(handler, token="secret-token")
        await store.put(BLOCK)

    asyncio.run(_run())

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "PUT"
    assert str(request.url) == "https://notes.example/api/blocks/b1"
    assert request.headers["Authorization"] == "Bearer secret-token"
    assert json.loads(request.content)["importanceRanges"] == [{"start": 0, "end": 3, "level": "critical"}]


def test_remote_get_decodes_payload_and_maps_404_to_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/b1"):
            return httpx.Response(200, json=block_to_dict(BLOCK))
        return httpx.Response(404)

    async def _run() -> None:
        store = _remote(handler)
        assert await store.get("b1") == BLOCK
        assert await store.get("missing") is None
        await store.delete("missing")

    asyncio.run(_run())


def test_remote_retries_server_errors() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(204)

    async def _run() -> None:
        await _remote(handler, max_retries=3).put(BLOCK)

    asyncio.run(_run())

    assert len(attempts) == 3


def test_remote_gives_up_after_max_retries() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(500)

    async def _run() -> None:
        await _remote(handler, max_retries=2).put(BLOCK)

    with pytest.raises(BlockStoreError) as excinfo:
        asyncio.run(_run())

    assert excinfo.value.status_code == 500
    assert len(attempts) == 2


def test_remote_retries_transport_errors() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        raise httpx.ConnectError("connection refused", request=request)

    async def _run() -> None:
        await _remote(handler, max_retries=3).get("b1")

    with pytest.raises(BlockStoreError):
        asyncio.run(_run())

    assert len(attempts) == 3


def test_remote_client_errors_are_not_retried() -> None:
    attempts: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(422, json={"error": "bad range"})

    async def _run() -> None:
        await _remote(handler).put(BLOCK)

    with pytest.raises(BlockStoreError) as excinfo:
        asyncio.run(_run())

    assert excinfo.value.status_code == 422
    assert len(attempts) == 1


def test_remote_rejects_malformed_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "b1", "type": "video"})

    async def _run() -> None:
        await _remote(handler).get("b1")

    with pytest.raises(BlockStoreError):
        asyncio.run(_run())
