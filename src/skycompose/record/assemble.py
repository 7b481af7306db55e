"""Build ``app.bsky.feed.post`` record payloads.

These helpers produce the dict structures the remote service expects.
They do no validation of their own: by the time a record is assembled
every image has been sniffed, measured and uploaded.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from skycompose.models import ExternalCard, ImageGallery, ResolvedEmbed

POST_COLLECTION = "app.bsky.feed.post"
IMAGES_EMBED_TYPE = "app.bsky.embed.images"
EXTERNAL_EMBED_TYPE = "app.bsky.embed.external"


def format_timestamp(moment: datetime) -> str:
    """Format *moment* as UTC ISO-8601 with milliseconds and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_images_embed(gallery: ImageGallery) -> dict[str, Any]:
    """Build an images embed; every image gets an empty ``alt``."""
    return {
        "$type": IMAGES_EMBED_TYPE,
        "images": [
            {
                "image": image.blob_ref,
                "aspectRatio": {"width": image.width, "height": image.height},
                "alt": "",
            }
            for image in gallery.images
        ],
    }


def build_external_embed(card: ExternalCard) -> dict[str, Any]:
    """Build an external (link card) embed; ``thumb`` only when present."""
    external: dict[str, Any] = {
        "uri": card.uri,
        "title": card.title,
        "description": card.description,
    }
    if card.thumb is not None:
        external["thumb"] = card.thumb
    return {"$type": EXTERNAL_EMBED_TYPE, "external": external}


def build_embed(embed: ResolvedEmbed) -> dict[str, Any]:
    """Dispatch on the resolved embed variant."""
    if isinstance(embed, ImageGallery):
        return build_images_embed(embed)
    if isinstance(embed, ExternalCard):
        return build_external_embed(embed)
    raise TypeError(f"Unknown resolved embed: {embed!r}")


def assemble_record(
    text: str,
    facets: list[dict[str, Any]] | None = None,
    embed: ResolvedEmbed | None = None,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Assemble a post record.

    Parameters
    ----------
    text:
        Post text.
    facets:
        Rich-text facets; omitted from the record when empty.
    embed:
        Resolved embed; the record has no ``embed`` key when ``None``.
    now:
        Creation time.  Defaults to the current time.

    Returns
    -------
    dict
        A record payload ready to be passed to ``createRecord``.
    """
    record: dict[str, Any] = {
        "$type": POST_COLLECTION,
        "text": text,
        "createdAt": format_timestamp(now or datetime.now(timezone.utc)),
    }
    if facets:
        record["facets"] = list(facets)
    if embed is not None:
        record["embed"] = build_embed(embed)
    return record
