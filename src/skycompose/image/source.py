"""Resolve an image token into validated raw bytes.

File reads and clipboard reads are blocking, so both run in the default
executor to keep the event loop free while other gallery images upload.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

from skycompose.errors import (
    SkyComposeEmptyClipboardError,
    SkyComposeIOError,
    SkyComposeUnsupportedMimeTypeError,
)
from skycompose.image.clipboard import Clipboard
from skycompose.image.validate import validate_mime
from skycompose.models import ClipboardToken, FilePathToken, ImageToken


def read_image_file(path: Path, allowed: Sequence[str]) -> tuple[str, bytes]:
    """Read *path* fully and validate its content type.

    Raises
    ------
    SkyComposeIOError
        If the file cannot be read.
    SkyComposeUnsupportedMimeTypeError
        If the content is not an allow-listed image.
    """
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SkyComposeIOError(
            message=f"Cannot read image file {str(path)!r}: {exc.strerror or exc}",
            context={"path": str(path)},
            cause=exc,
        ) from exc
    return validate_mime(data, allowed), data


def read_clipboard_image(clipboard: Clipboard, allowed: Sequence[str]) -> tuple[str, bytes]:
    """Read the clipboard image in the first allow-listed type it offers.

    Raises
    ------
    SkyComposeEmptyClipboardError
        If the clipboard offers nothing, or the chosen type reads empty.
    SkyComposeUnsupportedMimeTypeError
        If none of the offered types is allow-listed.
    SkyComposeClipboardUnavailableError
        Propagated from the clipboard collaborator.
    """
    offered = clipboard.list_mime_types()
    if not offered:
        raise SkyComposeEmptyClipboardError(
            message="Clipboard is empty",
            context={"reason": "no_mime_types"},
        )

    chosen = next((mime for mime in allowed if mime in offered), None)
    if chosen is None:
        raise SkyComposeUnsupportedMimeTypeError(
            message="Clipboard holds no supported image type",
            context={"offered_mimes": sorted(offered), "allowed_mimes": list(allowed)},
        )

    data = clipboard.read_bytes(chosen)
    if not data:
        raise SkyComposeEmptyClipboardError(
            message=f"Clipboard returned no data for {chosen}",
            context={"reason": "empty_read", "mime_type": chosen},
        )
    return validate_mime(data, allowed), data


async def resolve_source(
    token: ImageToken,
    allowed: Sequence[str],
    clipboard: Clipboard,
) -> tuple[str, bytes]:
    """Resolve *token* into ``(mime_type, data)``."""
    loop = asyncio.get_running_loop()
    if isinstance(token, FilePathToken):
        return await loop.run_in_executor(None, read_image_file, token.path, allowed)
    if isinstance(token, ClipboardToken):
        return await loop.run_in_executor(None, read_clipboard_image, clipboard, allowed)
    raise TypeError(f"Unknown image token: {token!r}")
