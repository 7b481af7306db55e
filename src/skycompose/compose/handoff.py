"""Hand-off payload between the composing and the posting process.

The composer writes one JSON object per post, terminated by a NUL byte
(or by the end of the stream)::

    {"text": "hello", "embed": {"images": [{"path": "/tmp/a.png"}, "clipboard"]}}
    {"text": "see https://example.com", "embed": {"uri": "https://example.com"}}
    {"text": "just words", "embed": null}

The poster decodes it once per request.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, BinaryIO

from skycompose.errors import SkyComposePayloadError
from skycompose.models import (
    ClipboardToken,
    ComposedPost,
    EmbedIntent,
    ExternalLinkIntent,
    FilePathToken,
    ImagesIntent,
    ImageToken,
)

FRAME_DELIMITER = b"\0"
_CLIPBOARD = "clipboard"


def encode_handoff(post: ComposedPost) -> str:
    """Serialise *post* to its JSON hand-off form."""
    embed: dict[str, Any] | None = None
    intent = post.embed_intent
    if isinstance(intent, ImagesIntent):
        embed = {"images": [_encode_token(token) for token in intent.tokens]}
    elif isinstance(intent, ExternalLinkIntent):
        embed = {"uri": intent.uri}
    return json.dumps({"text": post.text, "embed": embed}, ensure_ascii=False)


def _encode_token(token: ImageToken) -> Any:
    if isinstance(token, FilePathToken):
        return {"path": str(token.path)}
    return _CLIPBOARD


def decode_handoff(payload: str | bytes) -> ComposedPost:
    """Parse a hand-off payload back into a :class:`ComposedPost`.

    Raises
    ------
    SkyComposePayloadError
        If the payload is not valid UTF-8 / JSON or does not have the
        expected shape.
    """
    if isinstance(payload, bytes):
        try:
            payload = payload.rstrip(FRAME_DELIMITER).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SkyComposePayloadError(
                message="Hand-off payload is not valid UTF-8",
                context={"reason": "utf8_decode_error"},
                cause=exc,
            ) from exc

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise SkyComposePayloadError(
            message=f"Hand-off payload is not valid JSON: {exc.msg}",
            context={"reason": "json_decode_error"},
            cause=exc,
        ) from exc

    if not isinstance(data, dict) or not isinstance(data.get("text"), str):
        raise SkyComposePayloadError(
            message="Hand-off payload must be an object with a string 'text'",
            context={"reason": "missing_text"},
        )

    return ComposedPost(text=data["text"], embed_intent=_decode_embed(data.get("embed")))


def _decode_embed(raw: Any) -> EmbedIntent | None:
    if raw is None:
        return None
    if isinstance(raw, dict) and isinstance(raw.get("uri"), str):
        return ExternalLinkIntent(raw["uri"])
    if isinstance(raw, dict) and isinstance(raw.get("images"), list) and raw["images"]:
        return ImagesIntent(tuple(_decode_token(item) for item in raw["images"]))
    raise SkyComposePayloadError(
        message="Hand-off embed must be null, {'uri': ...} or a non-empty {'images': [...]}",
        context={"reason": "bad_embed"},
    )


def _decode_token(raw: Any) -> ImageToken:
    if raw == _CLIPBOARD:
        return ClipboardToken()
    if isinstance(raw, dict) and isinstance(raw.get("path"), str):
        return FilePathToken(Path(raw["path"]))
    raise SkyComposePayloadError(
        message=f"Unrecognised image entry in hand-off payload: {raw!r}",
        context={"reason": "bad_image"},
    )


# ---------------------------------------------------------------------------
# Framing
# ---------------------------------------------------------------------------

def write_frame(stream: BinaryIO, post: ComposedPost) -> None:
    """Write *post* to *stream* as one NUL-terminated frame."""
    stream.write(encode_handoff(post).encode("utf-8") + FRAME_DELIMITER)
    stream.flush()


def read_frame(stream: BinaryIO) -> bytes | None:
    """Read one frame from *stream*.

    Bytes are consumed up to the next NUL or the end of the stream.
    Returns ``None`` once the stream is exhausted and no bytes were read.
    """
    buf = bytearray()
    while True:
        byte = stream.read(1)
        if not byte:
            return bytes(buf) if buf.strip() else None
        if byte == FRAME_DELIMITER:
            return bytes(buf)
        buf += byte
