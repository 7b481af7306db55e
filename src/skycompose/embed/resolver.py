"""Turn an :data:`~skycompose.models.EmbedIntent` into a resolved embed.

Images are resolved concurrently, at most ``config.image_max_concurrent``
at a time, and joined with :func:`asyncio.gather`: the first failure is
raised, the other image tasks are left to finish on their own (they are
not cancelled), and blobs that were already uploaded are not deleted.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

from skycompose.config import ComposerConfig
from skycompose.embed.preview import LinkPreviewFetcher
from skycompose.image.clipboard import Clipboard, WaylandClipboard
from skycompose.image.source import resolve_source
from skycompose.image.upload import BlobStore, measure_image, upload_blob
from skycompose.models import (
    EmbedIntent,
    ExternalLinkIntent,
    ImageGallery,
    ImagesIntent,
    ImageToken,
    ResolvedEmbed,
    ResolvedImage,
)
from skycompose.observability import get_logger
from skycompose.observability.metrics import resolve_metrics

log = get_logger("skycompose.embed")


class EmbedResolver:
    """Resolve embed intents by reading, uploading and fetching content.

    Parameters
    ----------
    config:
        Composer configuration (MIME allow-list, concurrency, gallery cap).
    store:
        Remote upload collaborator.
    preview_fetcher:
        Builds link-preview cards.
    clipboard:
        Clipboard collaborator; a :class:`WaylandClipboard` by default.
    """

    def __init__(
        self,
        config: ComposerConfig,
        store: BlobStore,
        preview_fetcher: LinkPreviewFetcher,
        clipboard: Clipboard | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._preview = preview_fetcher
        self._clipboard = clipboard if clipboard is not None else WaylandClipboard()
        self._metrics = resolve_metrics(config.metrics)

    async def resolve(self, intent: EmbedIntent | None) -> ResolvedEmbed | None:
        """Resolve *intent*; ``None`` stays ``None``."""
        if intent is None:
            return None
        if isinstance(intent, ImagesIntent):
            return await self.resolve_images(intent.tokens)
        if isinstance(intent, ExternalLinkIntent):
            return await self._preview.fetch_preview(intent.uri)
        raise TypeError(f"Unknown embed intent: {intent!r}")

    async def resolve_images(self, tokens: Sequence[ImageToken]) -> ImageGallery:
        """Resolve and upload every token; the gallery keeps token order."""
        tokens = list(tokens)[:self._config.max_images]
        semaphore = asyncio.Semaphore(self._config.image_max_concurrent)
        started = time.monotonic()

        async def _resolve_one(token: ImageToken) -> ResolvedImage:
            async with semaphore:
                return await self.resolve_image(token)

        images = await asyncio.gather(*(_resolve_one(token) for token in tokens))

        self._metrics.timing(
            "skycompose.resolve_duration_ms", (time.monotonic() - started) * 1000.0,
        )
        return ImageGallery(images=list(images))

    async def resolve_image(self, token: ImageToken) -> ResolvedImage:
        """Read, validate, measure and upload a single image."""
        mime_type, data = await resolve_source(
            token, self._config.allowed_mimes, self._clipboard,
        )
        width, height = measure_image(data)
        uploaded = await upload_blob(self._store, data, self._metrics)

        self._metrics.increment("skycompose.images_resolved_total")
        log.info(
            "Image resolved",
            extra={
                "extra_fields": {
                    "op": "resolve_image",
                    "mime_type": mime_type,
                    "size": uploaded.size,
                    "width": width,
                    "height": height,
                }
            },
        )
        return ResolvedImage(
            data=data,
            mime_type=mime_type,
            width=width,
            height=height,
            blob_ref=uploaded.blob_ref,
        )
