"""Rich-text facet detection.

Facets annotate byte ranges of the UTF-8 encoded post text.  Three kinds
are detected: links (``https://...``), hashtags (``#tag``) and mentions
(``@handle.example``).  Mentions carry a DID, so they are only emitted
when a :class:`HandleResolver` is available.
"""

from __future__ import annotations

import re
from typing import Any, Protocol

from skycompose.errors import SkyComposeRichTextError
from skycompose.observability import get_logger

log = get_logger("skycompose.facets")

LINK_FEATURE = "app.bsky.richtext.facet#link"
TAG_FEATURE = "app.bsky.richtext.facet#tag"
MENTION_FEATURE = "app.bsky.richtext.facet#mention"

# Patterns run over str so \s covers Unicode whitespace; offsets are
# converted to UTF-8 byte positions with _byte_span.
_LINK_RE = re.compile(r"(?:^|[\s(])(https?://\S+)")
_TAG_RE = re.compile(r"(?:^|\s)(#[^\d\s#][^\s#]*)")
_MENTION_RE = re.compile(
    r"(?:^|[\s(])(@([a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+))"
)
_TRAILING_PUNCT = ".,;:!?"
_MAX_TAG_LENGTH = 64


class HandleResolver(Protocol):
    """Resolves a handle (without the ``@``) to a DID."""

    async def resolve_handle(self, handle: str) -> str:
        ...


def _facet(start: int, end: int, feature: dict[str, Any]) -> dict[str, Any]:
    return {"index": {"byteStart": start, "byteEnd": end}, "features": [feature]}


def _byte_span(text: str, start: int, end: int) -> tuple[int, int]:
    byte_start = len(text[:start].encode("utf-8"))
    return byte_start, byte_start + len(text[start:end].encode("utf-8"))


def _trim_link(raw: str) -> str:
    if raw[-1] in _TRAILING_PUNCT:
        return raw[:-1]
    if raw.endswith(")") and "(" not in raw:
        return raw[:-1]
    return raw


def detect_links(text: str) -> list[dict[str, Any]]:
    """Return link facets for every explicit ``http(s)://`` URL."""
    facets = []
    for match in _LINK_RE.finditer(text):
        uri = _trim_link(match.group(1))
        start = match.start(1)
        facets.append(
            _facet(*_byte_span(text, start, start + len(uri)), {"$type": LINK_FEATURE, "uri": uri})
        )
    return facets


def detect_tags(text: str) -> list[dict[str, Any]]:
    """Return tag facets for ``#hashtags`` (trailing punctuation excluded)."""
    facets = []
    for match in _TAG_RE.finditer(text):
        raw = match.group(1).rstrip(_TRAILING_PUNCT)
        tag = raw[1:]
        if not tag or len(tag) > _MAX_TAG_LENGTH:
            continue
        start = match.start(1)
        facets.append(
            _facet(*_byte_span(text, start, start + len(raw)), {"$type": TAG_FEATURE, "tag": tag})
        )
    return facets


class FacetDetector:
    """Detect links, tags and (with a resolver) mentions in post text.

    Parameters
    ----------
    resolver:
        Handle resolver for mentions.  Without one, mentions are left as
        plain text.
    """

    def __init__(self, resolver: HandleResolver | None = None) -> None:
        self._resolver = resolver

    async def detect(self, text: str) -> list[dict[str, Any]]:
        """Return all facets of *text*, ordered by ``byteStart``.

        Raises
        ------
        SkyComposeRichTextError
            If a mentioned handle cannot be resolved.
        """
        facets = detect_links(text) + detect_tags(text)
        if self._resolver is not None:
            facets += await self._detect_mentions(text)
        facets.sort(key=lambda f: f["index"]["byteStart"])
        return facets

    async def _detect_mentions(self, text: str) -> list[dict[str, Any]]:
        facets = []
        for match in _MENTION_RE.finditer(text):
            handle = match.group(2)
            try:
                did = await self._resolver.resolve_handle(handle)
            except Exception as exc:
                log.warning(
                    "Mention could not be resolved",
                    extra={"extra_fields": {"op": "detect_mentions", "handle": handle}},
                )
                raise SkyComposeRichTextError(
                    message=f"Cannot resolve mention @{handle}: {exc}",
                    context={"handle": handle},
                    cause=exc,
                ) from exc
            facets.append(
                _facet(*_byte_span(text, *match.span(1)), {"$type": MENTION_FEATURE, "did": did})
            )
        return facets
