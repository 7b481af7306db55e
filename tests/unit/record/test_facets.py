"""Tests for rich-text facet detection."""

from unittest.mock import AsyncMock

import pytest

from skycompose.errors import ErrorCode, SkyComposeRichTextError
from skycompose.record.facets import (
    LINK_FEATURE,
    MENTION_FEATURE,
    TAG_FEATURE,
    FacetDetector,
    detect_links,
    detect_tags,
)


def span(text, facet):
    data = text.encode("utf-8")
    return data[facet["index"]["byteStart"]:facet["index"]["byteEnd"]].decode("utf-8")


class TestDetectLinks:
    def test_simple(self):
        text = "see https://example.com/a now"
        (facet,) = detect_links(text)
        assert facet["features"] == [{"$type": LINK_FEATURE, "uri": "https://example.com/a"}]
        assert span(text, facet) == "https://example.com/a"

    def test_byte_offsets_after_multibyte_text(self):
        text = "héllo 🦋 https://example.com"
        (facet,) = detect_links(text)
        assert facet["index"]["byteStart"] == len("héllo 🦋 ".encode("utf-8"))
        assert span(text, facet) == "https://example.com"

    def test_trailing_punctuation_excluded(self):
        text = "go https://example.com."
        (facet,) = detect_links(text)
        assert span(text, facet) == "https://example.com"

    def test_paren_wrapped(self):
        text = "(https://example.com/x)"
        (facet,) = detect_links(text)
        assert facet["features"][0]["uri"] == "https://example.com/x"

    def test_multiple_links(self):
        assert len(detect_links("https://a.com and https://b.com")) == 2

    def test_bare_domain_is_not_a_link_facet(self):
        assert detect_links("example.com") == []

    def test_after_ideographic_space(self):
        text = "見て\u3000https://example.com"
        (facet,) = detect_links(text)
        assert span(text, facet) == "https://example.com"


class TestDetectTags:
    def test_simple(self):
        text = "hello #python world"
        (facet,) = detect_tags(text)
        assert facet["features"] == [{"$type": TAG_FEATURE, "tag": "python"}]
        assert span(text, facet) == "#python"

    def test_trailing_punctuation_excluded(self):
        (facet,) = detect_tags("love #rust!")
        assert facet["features"][0]["tag"] == "rust"

    def test_numeric_tag_ignored(self):
        assert detect_tags("issue #123") == []

    def test_hash_inside_word_ignored(self):
        assert detect_tags("c#sharp") == []

    def test_too_long_tag_ignored(self):
        assert detect_tags("#" + "a" * 65) == []

    def test_unicode_tag(self):
        text = "#café time"
        (facet,) = detect_tags(text)
        assert facet["features"][0]["tag"] == "café"
        assert span(text, facet) == "#café"

    @pytest.mark.parametrize("space", ["\u3000", "\u00a0", "\u2003"])
    def test_after_non_ascii_whitespace(self, space):
        text = f"hi{space}#tag"
        (facet,) = detect_tags(text)
        assert facet["features"][0]["tag"] == "tag"
        assert facet["index"]["byteStart"] == len(f"hi{space}".encode("utf-8"))
        assert span(text, facet) == "#tag"


class TestFacetDetector:
    @pytest.mark.asyncio
    async def test_sorted_by_byte_start(self):
        facets = await FacetDetector().detect("#one https://a.com #two")
        starts = [f["index"]["byteStart"] for f in facets]
        assert starts == sorted(starts)
        assert [f["features"][0]["$type"] for f in facets] == [TAG_FEATURE, LINK_FEATURE, TAG_FEATURE]

    @pytest.mark.asyncio
    async def test_mentions_skipped_without_resolver(self):
        assert await FacetDetector().detect("hi @alice.bsky.social") == []

    @pytest.mark.asyncio
    async def test_mentions_resolved(self):
        resolver = AsyncMock()
        resolver.resolve_handle.return_value = "did:plc:alice"
        text = "hi @alice.bsky.social!"
        (facet,) = await FacetDetector(resolver).detect(text)
        assert facet["features"] == [{"$type": MENTION_FEATURE, "did": "did:plc:alice"}]
        assert span(text, facet) == "@alice.bsky.social"
        resolver.resolve_handle.assert_awaited_once_with("alice.bsky.social")

    @pytest.mark.asyncio
    async def test_resolver_failure(self):
        resolver = AsyncMock()
        resolver.resolve_handle.side_effect = RuntimeError("not found")
        with pytest.raises(SkyComposeRichTextError) as exc_info:
            await FacetDetector(resolver).detect("hi @ghost.example.com")
        assert exc_info.value.code == ErrorCode.RICH_TEXT_ERROR
        assert exc_info.value.context == {"handle": "ghost.example.com"}

    @pytest.mark.asyncio
    async def test_email_is_not_a_mention(self):
        resolver = AsyncMock()
        assert await FacetDetector(resolver).detect("mail bob@example.com") == []
        resolver.resolve_handle.assert_not_awaited()
