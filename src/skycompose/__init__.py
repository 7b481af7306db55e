"""skycompose: compose Bluesky posts in your editor, with images and link cards.

Public re-exports
-----------------

* **Client:** :class:`AsyncComposer`
* **Configuration:** :class:`ComposerConfig`
* **Errors:** Every :class:`SkyComposeError` subclass and :class:`ErrorCode`
* **Models:** Tokens, embed intents, resolved embeds and results

Usage::

    import asyncio
    from skycompose import AsyncComposer, ComposerConfig

    async def main():
        async with await AsyncComposer.login(ComposerConfig.from_env()) as composer:
            post = composer.compose(["Look at this", "---", "[clipboard]"])
            print((await composer.publish(post)).uri)

    asyncio.run(main())
"""

from __future__ import annotations

from skycompose._version import __version__

# ── Client ─────────────────────────────────────────────────────────────
from skycompose.async_client import AsyncComposer

# ── Configuration ───────────────────────────────────────────────────────
from skycompose.config import (
    DEFAULT_IMAGE_MIMES,
    GALLERY_LIMIT,
    ComposerConfig,
)

# ── Errors ──────────────────────────────────────────────────────────────
from skycompose.errors import (
    ErrorCode,
    SkyComposeAuthError,
    SkyComposeClipboardUnavailableError,
    SkyComposeComposeError,
    SkyComposeEmptyClipboardError,
    SkyComposeError,
    SkyComposeImageDecodeError,
    SkyComposeImageError,
    SkyComposeInvalidEmbedTokenError,
    SkyComposeIOError,
    SkyComposeNetworkFetchError,
    SkyComposePayloadError,
    SkyComposePublishError,
    SkyComposeRichTextError,
    SkyComposeUnknownDomainSuffixError,
    SkyComposeUnsupportedMimeTypeError,
    SkyComposeUploadError,
)

# ── Models ──────────────────────────────────────────────────────────────
from skycompose.models import (
    BlobRef,
    ClipboardToken,
    ComposedPost,
    EmbedIntent,
    ExternalCard,
    ExternalLinkIntent,
    FilePathToken,
    ImageGallery,
    ImagesIntent,
    ImageToken,
    PublishResult,
    ResolvedEmbed,
    ResolvedImage,
    UploadedBlob,
)

__all__ = [
    "DEFAULT_IMAGE_MIMES",
    "GALLERY_LIMIT",
    "AsyncComposer",
    "BlobRef",
    "ClipboardToken",
    "ComposedPost",
    "ComposerConfig",
    "EmbedIntent",
    "ErrorCode",
    "ExternalCard",
    "ExternalLinkIntent",
    "FilePathToken",
    "ImageGallery",
    "ImageToken",
    "ImagesIntent",
    "PublishResult",
    "ResolvedEmbed",
    "ResolvedImage",
    "SkyComposeAuthError",
    "SkyComposeClipboardUnavailableError",
    "SkyComposeComposeError",
    "SkyComposeEmptyClipboardError",
    "SkyComposeError",
    "SkyComposeIOError",
    "SkyComposeImageDecodeError",
    "SkyComposeImageError",
    "SkyComposeInvalidEmbedTokenError",
    "SkyComposeNetworkFetchError",
    "SkyComposePayloadError",
    "SkyComposePublishError",
    "SkyComposeRichTextError",
    "SkyComposeUnknownDomainSuffixError",
    "SkyComposeUnsupportedMimeTypeError",
    "SkyComposeUploadError",
    "UploadedBlob",
    "__version__",
]
