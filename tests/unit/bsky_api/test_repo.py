"""Tests for the AT Protocol blob, handle and post adapters."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from atproto_client.exceptions import AtProtocolError

from skycompose.bsky_api.repo import AtprotoBlobStore, AtprotoHandleResolver, PostAPI
from skycompose.errors import ErrorCode, SkyComposePublishError
from skycompose.record.assemble import POST_COLLECTION

BLOB = {"$type": "blob", "ref": {"$link": "bafkrei0001"}, "mimeType": "image/png", "size": 3}


def make_client():
    client = MagicMock()
    client.me = SimpleNamespace(did="did:plc:alice")
    client.upload_blob = AsyncMock()
    client.com.atproto.identity.resolve_handle = AsyncMock()
    client.com.atproto.repo.create_record = AsyncMock()
    return client


class TestAtprotoBlobStore:
    @pytest.mark.asyncio
    async def test_returns_blob_dump(self):
        client = make_client()
        blob = MagicMock()
        blob.model_dump.return_value = BLOB
        client.upload_blob.return_value = SimpleNamespace(blob=blob)

        assert await AtprotoBlobStore(client).upload_blob(b"abc") == BLOB
        client.upload_blob.assert_awaited_once_with(b"abc")
        blob.model_dump.assert_called_once_with(by_alias=True, exclude_none=True)


class TestAtprotoHandleResolver:
    @pytest.mark.asyncio
    async def test_resolves_did(self):
        client = make_client()
        client.com.atproto.identity.resolve_handle.return_value = SimpleNamespace(did="did:plc:bob")
        assert await AtprotoHandleResolver(client).resolve_handle("bob.test") == "did:plc:bob"
        client.com.atproto.identity.resolve_handle.assert_awaited_once_with({"handle": "bob.test"})


class TestPostAPI:
    @pytest.mark.asyncio
    async def test_create(self, metrics):
        client = make_client()
        client.com.atproto.repo.create_record.return_value = SimpleNamespace(
            uri="at://did:plc:alice/app.bsky.feed.post/3k", cid="bafyrei",
        )
        record = {"$type": POST_COLLECTION, "text": "hi", "createdAt": "2026-10-19T00:00:00.000Z"}

        result = await PostAPI(client, metrics).create(record)

        assert result.uri == "at://did:plc:alice/app.bsky.feed.post/3k"
        assert result.cid == "bafyrei"
        assert result.record is record
        client.com.atproto.repo.create_record.assert_awaited_once_with(
            {"repo": "did:plc:alice", "collection": POST_COLLECTION, "record": record}
        )
        assert metrics.increments == [
            {"name": "skycompose.posts_published_total", "value": 1, "tags": {"status": "ok"}}
        ]

    @pytest.mark.asyncio
    async def test_rejected(self, metrics):
        client = make_client()
        client.com.atproto.repo.create_record.side_effect = AtProtocolError("InvalidRecord")
        with pytest.raises(SkyComposePublishError) as exc_info:
            await PostAPI(client, metrics).create({"text": "x"})
        assert exc_info.value.code == ErrorCode.PUBLISH_ERROR
        assert exc_info.value.context["repo"] == "did:plc:alice"
        assert metrics.increments[0]["tags"] == {"status": "error"}
