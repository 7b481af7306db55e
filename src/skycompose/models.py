"""Public data models for skycompose.

Types flow through the pipeline in this order::

    ComposedPost(text, EmbedIntent)      user input, before any I/O
        -> ResolvedEmbed                 bytes fetched, blobs uploaded
        -> post record (plain dict)      wire shape, see record.assemble

The tagged unions (``ImageToken``, ``EmbedIntent``, ``ResolvedEmbed``) are
closed sets of dataclasses; callers dispatch with ``isinstance`` checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

BlobRef = dict[str, Any]
"""Opaque blob reference returned by the remote upload collaborator.

For the AT Protocol this is ``{"$type": "blob", "ref": {"$link": cid},
"mimeType": ..., "size": ...}``; the pipeline only ever reads ``size``.
"""


# ---------------------------------------------------------------------------
# Image tokens (one per attachment line)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FilePathToken:
    """An attachment line naming an existing regular file."""

    path: Path


@dataclass(frozen=True)
class ClipboardToken:
    """An attachment line asking for the current clipboard image."""


ImageToken = Union[FilePathToken, ClipboardToken]


# ---------------------------------------------------------------------------
# Embed intent (what the user asked for)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ImagesIntent:
    """Attach an image gallery built from *tokens* (1 to 4 entries)."""

    tokens: tuple[ImageToken, ...]


@dataclass(frozen=True)
class ExternalLinkIntent:
    """Attach a link-preview card for *uri*."""

    uri: str


EmbedIntent = Union[ImagesIntent, ExternalLinkIntent]


@dataclass(frozen=True)
class ComposedPost:
    """A post as written by the user, ready to be resolved.

    Attributes
    ----------
    text:
        The post body (attachment section removed).
    embed_intent:
        The embed the post should carry, or ``None`` for a text-only post.
    """

    text: str
    embed_intent: EmbedIntent | None = None


# ---------------------------------------------------------------------------
# Resolved embeds (after fetching and uploading)
# ---------------------------------------------------------------------------

@dataclass
class UploadedBlob:
    """Result of handing bytes to the remote upload collaborator."""

    blob_ref: BlobRef
    size: int


@dataclass
class ResolvedImage:
    """An image that has been read, validated, measured and uploaded.

    Attributes
    ----------
    data:
        The raw image bytes.  Kept only until the record is assembled.
    mime_type:
        Sniffed MIME type (one of the allow-listed image types).
    width, height:
        Pixel dimensions, used for the ``aspectRatio`` of the embed.
    blob_ref:
        Reference returned by the upload collaborator.
    """

    data: bytes = field(repr=False)
    mime_type: str
    width: int
    height: int
    blob_ref: BlobRef


@dataclass
class ImageGallery:
    """Resolved image embed; holds at most four images, in input order."""

    images: list[ResolvedImage] = field(default_factory=list)


@dataclass
class ExternalCard:
    """Resolved link-preview card.

    ``title`` and ``description`` default to the empty string when the
    page has no matching ``og:`` tag; ``thumb`` is ``None`` only when the
    page has no ``og:image``.
    """

    uri: str
    title: str = ""
    description: str = ""
    thumb: BlobRef | None = None


ResolvedEmbed = Union[ImageGallery, ExternalCard]


# ---------------------------------------------------------------------------
# Publishing
# ---------------------------------------------------------------------------

@dataclass
class PublishResult:
    """Outcome of creating a post record on the remote service.

    Attributes
    ----------
    uri:
        ``at://`` URI of the created record.
    cid:
        Content identifier of the created record.
    record:
        The record dict that was sent.
    """

    uri: str
    cid: str
    record: dict = field(default_factory=dict)
