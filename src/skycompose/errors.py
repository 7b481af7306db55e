"""Full error hierarchy for skycompose.

Every public error class inherits from SkyComposeError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Every error is fatal to the post being composed: there is no degraded
post with a partial embed.  Callers branch on :attr:`SkyComposeError.code`
(or the class) and show :attr:`SkyComposeError.message` to the user.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error skycompose can raise."""

    COMPOSE_ERROR = "COMPOSE_ERROR"
    INVALID_EMBED_TOKEN = "INVALID_EMBED_TOKEN"
    UNKNOWN_DOMAIN_SUFFIX = "UNKNOWN_DOMAIN_SUFFIX"
    PAYLOAD_ERROR = "PAYLOAD_ERROR"
    IMAGE_ERROR = "IMAGE_ERROR"
    UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
    EMPTY_CLIPBOARD = "EMPTY_CLIPBOARD"
    CLIPBOARD_UNAVAILABLE = "CLIPBOARD_UNAVAILABLE"
    IO_ERROR = "IO_ERROR"
    IMAGE_DECODE_ERROR = "IMAGE_DECODE_ERROR"
    NETWORK_FETCH_ERROR = "NETWORK_FETCH_ERROR"
    UPLOAD_ERROR = "UPLOAD_ERROR"
    RICH_TEXT_ERROR = "RICH_TEXT_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PUBLISH_ERROR = "PUBLISH_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class SkyComposeError(Exception):
    """Base exception for all skycompose errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A user-facing description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Composition errors (raised before any network I/O)
# ---------------------------------------------------------------------------

class SkyComposeComposeError(SkyComposeError):
    """Base class for errors found while turning user input into a post.

    Context varies by subclass.
    """

    def __init__(
        self,
        code: str = ErrorCode.COMPOSE_ERROR,
        message: str = "Compose error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposeInvalidEmbedTokenError(SkyComposeComposeError):
    """An attachment line is neither the clipboard marker nor an existing file.

    Context keys: ``line``, ``index``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EMBED_TOKEN,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposeUnknownDomainSuffixError(SkyComposeComposeError):
    """A bare domain in the post text does not end in a known public suffix.

    Context keys: ``domain``, ``match``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_DOMAIN_SUFFIX,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposePayloadError(SkyComposeComposeError):
    """A hand-off payload between the composer and the poster is malformed.

    Context keys: ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PAYLOAD_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Image errors
# ---------------------------------------------------------------------------

class SkyComposeImageError(SkyComposeError):
    """Base class for errors while obtaining or inspecting image bytes.

    Context varies by subclass.
    """

    def __init__(
        self,
        code: str = ErrorCode.IMAGE_ERROR,
        message: str = "Image error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposeUnsupportedMimeTypeError(SkyComposeImageError):
    """The sniffed (or offered) MIME type is not in the allow-list.

    Context keys: ``detected_mime`` or ``offered_mimes``, ``allowed_mimes``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_MIME_TYPE,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposeEmptyClipboardError(SkyComposeImageError):
    """The clipboard holds no content.

    Context keys: ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.EMPTY_CLIPBOARD,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposeClipboardUnavailableError(SkyComposeImageError):
    """The clipboard cannot be reached (no seat, no tool, no display).

    Context keys: ``reason``, ``command``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CLIPBOARD_UNAVAILABLE,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposeIOError(SkyComposeImageError):
    """A local image file could not be read.

    Context keys: ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.IO_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposeImageDecodeError(SkyComposeImageError):
    """Image bytes passed the MIME sniff but Pillow could not decode them.

    Context keys: ``mime_type``, ``size_bytes``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.IMAGE_DECODE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Network / remote errors
# ---------------------------------------------------------------------------

class SkyComposeNetworkFetchError(SkyComposeError):
    """A page or thumbnail fetch failed (transport error, non-2xx, decoding).

    Context keys: ``url``, ``status_code`` (when a response was received).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_FETCH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposeUploadError(SkyComposeError):
    """The remote storage collaborator rejected or mangled a blob.

    Context keys: ``size_bytes``, ``reported_size``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UPLOAD_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposeRichTextError(SkyComposeError):
    """Facet detection failed (for example a mention could not be resolved).

    Context keys: ``handle``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RICH_TEXT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposeAuthError(SkyComposeError):
    """Login failed or no usable credentials / session were available.

    Context keys: ``handle``, ``session_file``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.AUTH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class SkyComposePublishError(SkyComposeError):
    """The remote service refused to create the post record.

    Context keys: ``repo``, ``collection``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PUBLISH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
