"""Image MIME validation by content sniffing.

The file extension is never consulted: the first bytes decide the type,
and only the allow-listed types (JPEG, PNG, WEBP, BMP by default) pass.
"""

from __future__ import annotations

from collections.abc import Sequence

from skycompose.config import DEFAULT_IMAGE_MIMES
from skycompose.errors import SkyComposeUnsupportedMimeTypeError

_UNKNOWN_MIME = "application/octet-stream"

# Map of magic bytes to MIME types for sniffing.
_MAGIC_BYTES: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"RIFF", "image/webp"),  # RIFF....WEBP (check further)
    (b"BM", "image/bmp"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"<svg", "image/svg+xml"),
    (b"<?xml", "image/svg+xml"),
]


def sniff_mime(data: bytes) -> str | None:
    """Detect the MIME type of *data* from its leading bytes."""
    for magic, mime in _MAGIC_BYTES:
        if data[:len(magic)] == magic:
            if magic == b"RIFF" and data[8:12] != b"WEBP":
                continue
            return mime
    return None


def validate_mime(data: bytes, allowed: Sequence[str] | None = None) -> str:
    """Return the sniffed MIME type of *data* if it is allow-listed.

    Parameters
    ----------
    data:
        Raw image bytes.
    allowed:
        MIME allow-list.  Defaults to :data:`DEFAULT_IMAGE_MIMES`.

    Raises
    ------
    SkyComposeUnsupportedMimeTypeError
        If the sniffed type is not allowed or cannot be determined.
    """
    allowed = list(allowed) if allowed is not None else DEFAULT_IMAGE_MIMES
    mime_type = sniff_mime(data) or _UNKNOWN_MIME
    if mime_type not in allowed:
        raise SkyComposeUnsupportedMimeTypeError(
            message=f"Image MIME type {mime_type!r} is not supported",
            context={
                "detected_mime": mime_type,
                "allowed_mimes": allowed,
                "size_bytes": len(data),
            },
        )
    return mime_type
