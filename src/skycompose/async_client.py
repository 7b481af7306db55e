"""Asynchronous composer client.

:class:`AsyncComposer` wires the composing pipeline together: written
lines become a :class:`ComposedPost`, the embed intent is resolved (images
uploaded, link previews fetched), facets are detected and the post record
is assembled and, with a :class:`PostAPI`, published.

Usage::

    import asyncio
    from skycompose import AsyncComposer, ComposerConfig

    async def main():
        config = ComposerConfig.from_env()
        async with await AsyncComposer.login(config) as composer:
            post = composer.compose(["hello example.com"])
            result = await composer.publish(post)
            print(result.uri)

    asyncio.run(main())
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

import httpx

from skycompose.bsky_api import AtprotoBlobStore, AtprotoHandleResolver, PostAPI, login
from skycompose.compose import SuffixChecker, compose_post
from skycompose.config import ComposerConfig
from skycompose.embed import EmbedResolver, LinkPreviewFetcher, build_http_client
from skycompose.errors import SkyComposePublishError
from skycompose.image import BlobStore, Clipboard
from skycompose.models import ComposedPost, PublishResult, ResolvedEmbed
from skycompose.observability import get_logger
from skycompose.record import FacetDetector, assemble_record

log = get_logger("skycompose.client")


class AsyncComposer:
    """Compose, resolve and publish posts.

    Parameters
    ----------
    config:
        Composer configuration.  Defaults to ``ComposerConfig()``.
    blob_store:
        Remote upload collaborator.  **Required.**
    http:
        HTTP client for link previews.  When omitted one is built from
        *config* and closed by :meth:`close`.
    clipboard:
        Clipboard collaborator; defaults to the Wayland clipboard.
    suffix_checker:
        Public-suffix lookup for bare domains; defaults to the bundled list.
    facet_detector:
        Rich-text facet detector; defaults to links and tags only.
    post_api:
        Record publisher.  Required only for :meth:`publish`.
    """

    def __init__(
        self,
        config: ComposerConfig | None = None,
        *,
        blob_store: BlobStore,
        http: httpx.AsyncClient | None = None,
        clipboard: Clipboard | None = None,
        suffix_checker: SuffixChecker | None = None,
        facet_detector: FacetDetector | None = None,
        post_api: PostAPI | None = None,
    ) -> None:
        self._config = config if config is not None else ComposerConfig()
        self._owns_http = http is None
        self._http = http if http is not None else build_http_client(self._config)
        self._suffix_checker = suffix_checker
        self._facets = facet_detector if facet_detector is not None else FacetDetector()
        self._post_api = post_api
        preview = LinkPreviewFetcher(self._http, blob_store, self._config.metrics)
        self._resolver = EmbedResolver(self._config, blob_store, preview, clipboard)

    @classmethod
    async def login(cls, config: ComposerConfig | None = None, **kwargs: Any) -> AsyncComposer:
        """Log in and return a composer backed by the AT Protocol service.

        Extra keyword arguments are forwarded to the constructor.
        """
        config = config if config is not None else ComposerConfig.from_env()
        client = await login(config)
        return cls(
            config,
            blob_store=AtprotoBlobStore(client),
            facet_detector=FacetDetector(AtprotoHandleResolver(client)),
            post_api=PostAPI(client, config.metrics),
            **kwargs,
        )

    @property
    def config(self) -> ComposerConfig:
        return self._config

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def compose(self, lines: Sequence[str]) -> ComposedPost:
        """Build a post from the lines the user wrote."""
        return compose_post(lines, self._config, self._suffix_checker)

    async def resolve_embed(self, post: ComposedPost) -> ResolvedEmbed | None:
        """Resolve the embed *post* asks for; ``None`` for text-only posts."""
        return await self._resolver.resolve(post.embed_intent)

    async def build_record(
        self,
        post: ComposedPost,
        *,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Resolve the embed, detect facets and assemble the record."""
        embed = await self.resolve_embed(post)
        facets = await self._facets.detect(post.text)
        return assemble_record(post.text, facets, embed, now=now)

    async def publish(self, post: ComposedPost) -> PublishResult:
        """Build the record for *post* and create it on the service.

        Raises
        ------
        SkyComposePublishError
            If no post API is configured or the service refuses the record.
        """
        if self._post_api is None:
            raise SkyComposePublishError(
                message="No post API configured; create the composer with AsyncComposer.login()",
            )
        record = await self.build_record(post)
        result = await self._post_api.create(record)
        log.info(
            "Post published",
            extra={
                "extra_fields": {
                    "op": "publish",
                    "uri": result.uri,
                    "embed": record.get("embed", {}).get("$type"),
                }
            },
        )
        return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP client if this composer created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> AsyncComposer:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
