"""AT Protocol adapters for the collaborator protocols.

* :class:`AtprotoBlobStore` -- the remote upload collaborator.
* :class:`AtprotoHandleResolver` -- handle to DID for mention facets.
* :class:`PostAPI` -- creates the ``app.bsky.feed.post`` record.

Each wraps an authenticated :class:`atproto.AsyncClient`.
"""

from __future__ import annotations

from typing import Any

from atproto import AsyncClient
from atproto_client.exceptions import AtProtocolError

from skycompose.errors import SkyComposePublishError
from skycompose.models import BlobRef, PublishResult
from skycompose.observability import MetricsHook, get_logger
from skycompose.observability.metrics import resolve_metrics
from skycompose.record.assemble import POST_COLLECTION

log = get_logger("skycompose.repo")


class AtprotoBlobStore:
    """Upload blobs with ``com.atproto.repo.uploadBlob``."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def upload_blob(self, data: bytes) -> BlobRef:
        response = await self._client.upload_blob(data)
        return response.blob.model_dump(by_alias=True, exclude_none=True)


class AtprotoHandleResolver:
    """Resolve handles with ``com.atproto.identity.resolveHandle``."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def resolve_handle(self, handle: str) -> str:
        response = await self._client.com.atproto.identity.resolve_handle({"handle": handle})
        return response.did


class PostAPI:
    """Create post records in the logged-in account's repository."""

    def __init__(self, client: AsyncClient, metrics: MetricsHook | None = None) -> None:
        self._client = client
        self._metrics = resolve_metrics(metrics)

    async def create(self, record: dict[str, Any]) -> PublishResult:
        """Create *record*.

        Raises
        ------
        SkyComposePublishError
            If the service rejects the record.
        """
        repo = self._client.me.did
        try:
            response = await self._client.com.atproto.repo.create_record(
                {"repo": repo, "collection": POST_COLLECTION, "record": record}
            )
        except AtProtocolError as exc:
            self._metrics.increment("skycompose.posts_published_total", tags={"status": "error"})
            raise SkyComposePublishError(
                message=f"Cannot create post: {exc}",
                context={"repo": repo, "collection": POST_COLLECTION},
                cause=exc,
            ) from exc

        self._metrics.increment("skycompose.posts_published_total", tags={"status": "ok"})
        log.info(
            "Post created",
            extra={"extra_fields": {"op": "create_post", "uri": response.uri}},
        )
        return PublishResult(uri=response.uri, cid=response.cid, record=record)
