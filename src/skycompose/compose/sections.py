"""Split a written post into its body and attachment list.

A post is written as plain lines.  An optional attachment section follows
a separator line (``---`` by default); each attachment line is either the
clipboard marker or the path of an image file::

    Look at these!
    ---
    /home/me/pictures/cat.png
    [clipboard]
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from skycompose.compose.uri import SuffixChecker, detect_uri
from skycompose.config import ComposerConfig
from skycompose.errors import SkyComposeInvalidEmbedTokenError
from skycompose.models import (
    ClipboardToken,
    ComposedPost,
    EmbedIntent,
    ExternalLinkIntent,
    FilePathToken,
    ImagesIntent,
    ImageToken,
)
from skycompose.observability import get_logger

log = get_logger("skycompose.compose")


def split_sections(
    lines: Sequence[str],
    separator: str = "---",
) -> tuple[list[str], list[str]]:
    """Split *lines* at the first line equal to *separator*.

    Returns
    -------
    tuple[list[str], list[str]]
        ``(body_lines, attachment_lines)``.  The separator itself is
        dropped; without a separator every line is body.
    """
    lines = list(lines)
    try:
        pos = lines.index(separator)
    except ValueError:
        return lines, []
    return lines[:pos], lines[pos + 1:]


def resolve_tokens(
    attachment_lines: Sequence[str],
    config: ComposerConfig,
) -> list[ImageToken]:
    """Turn attachment lines into image tokens.

    Every line is checked before anything is kept: one bad line rejects
    the whole list.  After that only the first ``config.max_images``
    tokens survive; the rest are dropped without error.

    Raises
    ------
    SkyComposeInvalidEmbedTokenError
        If a line is neither the clipboard marker nor an existing file.
    """
    tokens: list[ImageToken] = []
    for index, line in enumerate(attachment_lines):
        if line == config.clipboard_marker:
            tokens.append(ClipboardToken())
        elif line and Path(line).is_file():
            tokens.append(FilePathToken(Path(line)))
        else:
            raise SkyComposeInvalidEmbedTokenError(
                message=f"Invalid embed: {line!r} is not {config.clipboard_marker} or an existing file",
                context={"line": line, "index": index},
            )

    if len(tokens) > config.max_images:
        log.warning(
            "Dropping extra attachments",
            extra={
                "extra_fields": {
                    "op": "resolve_tokens",
                    "given": len(tokens),
                    "kept": config.max_images,
                }
            },
        )
    return tokens[:config.max_images]


def compose_post(
    lines: Sequence[str],
    config: ComposerConfig,
    suffix_checker: SuffixChecker | None = None,
) -> ComposedPost:
    """Build a :class:`ComposedPost` from the lines the user wrote.

    Images win over a link in the text; a link is only attached when no
    image line is present.  Link detection runs regardless, so a bare
    domain with an unknown suffix rejects the post even if it has images.
    """
    body, attachments = split_sections(lines, config.section_separator)
    text = "\n".join(body)

    tokens = resolve_tokens(attachments, config)
    uri = detect_uri(text, suffix_checker)

    intent: EmbedIntent | None
    if tokens:
        intent = ImagesIntent(tuple(tokens))
    elif uri is not None:
        intent = ExternalLinkIntent(uri)
    else:
        intent = None

    return ComposedPost(text=text, embed_intent=intent)
