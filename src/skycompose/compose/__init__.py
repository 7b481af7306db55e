"""Turning written lines into a :class:`~skycompose.models.ComposedPost`.

Exports
-------
detect_uri
    Find and normalise the first link in post text.
split_sections / resolve_tokens / compose_post
    Split body from attachments and classify attachment lines.
encode_handoff / decode_handoff / read_frame / write_frame
    The composer-to-poster hand-off payload.
"""

from .handoff import decode_handoff, encode_handoff, read_frame, write_frame
from .sections import compose_post, resolve_tokens, split_sections
from .uri import PublicSuffixChecker, SuffixChecker, detect_uri

__all__ = [
    "PublicSuffixChecker",
    "SuffixChecker",
    "compose_post",
    "decode_handoff",
    "detect_uri",
    "encode_handoff",
    "read_frame",
    "resolve_tokens",
    "split_sections",
    "write_frame",
]
