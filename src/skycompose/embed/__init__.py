"""Embed resolution: image galleries and link-preview cards."""

from .preview import LinkPreviewFetcher, build_http_client, extract_og_tags
from .resolver import EmbedResolver

__all__ = [
    "EmbedResolver",
    "LinkPreviewFetcher",
    "build_http_client",
    "extract_og_tags",
]
