"""Configuration for skycompose.

:class:`ComposerConfig` is a plain dataclass that captures every tuneable
knob of the composing and posting pipeline.  Nothing in the package reads
process-wide paths or credentials on its own: the session file, the
credentials and the HTTP settings all arrive through an instance of this
class.

:data:`DEFAULT_IMAGE_MIMES` is the MIME allow-list for gallery images.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from dotenv import find_dotenv, load_dotenv

from skycompose._version import __version__

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_IMAGE_MIMES: list[str] = [
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/bmp",
]
"""MIME types accepted for gallery images, whatever their source."""

GALLERY_LIMIT = 4
"""Hard cap on images per post imposed by the remote service."""

DEFAULT_SERVICE_URL = "https://bsky.social"


def default_session_file() -> Path:
    """Return ``~/.local/share/skycompose/session.json``."""
    return Path.home() / ".local" / "share" / "skycompose" / "session.json"


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class ComposerConfig:
    """Complete configuration for a composer.

    Parameters
    ----------
    handle:
        Account handle used when no saved session is available.
    password:
        App password for *handle*.  Never logged.
    service_url:
        Base URL of the personal data server.
    session_file:
        Where the exported session string is persisted.  ``None`` disables
        session persistence.
    section_separator:
        Line that separates the post body from the attachment list.
    clipboard_marker:
        Attachment line meaning "use the image currently on the clipboard".
    max_images:
        Number of attachment lines kept; the rest are dropped silently.
    image_max_concurrent:
        Maximum number of images resolved in parallel.
    allowed_mimes:
        Image MIME allow-list, checked against sniffed content.
    fetch_timeout_seconds:
        Timeout for link-preview HTTP requests.  ``None`` means no timeout.
    user_agent:
        ``User-Agent`` header for link-preview requests.
    http_proxy:
        Optional HTTP/HTTPS proxy URL for link-preview requests.
    editor:
        Editor command the CLI opens to write a post.
    metrics:
        Optional :class:`~skycompose.observability.MetricsHook`.
    """

    # ── Account ─────────────────────────────────────────────────────────
    handle: str = ""

    password: str = ""

    service_url: str = DEFAULT_SERVICE_URL

    session_file: str | None = None

    # ── Composition ─────────────────────────────────────────────────────
    section_separator: str = "---"

    clipboard_marker: str = "[clipboard]"

    max_images: int = GALLERY_LIMIT

    # ── Images ──────────────────────────────────────────────────────────
    image_max_concurrent: int = GALLERY_LIMIT

    allowed_mimes: list[str] = field(
        default_factory=lambda: list(DEFAULT_IMAGE_MIMES),
    )

    # ── HTTP ────────────────────────────────────────────────────────────
    fetch_timeout_seconds: float | None = None

    user_agent: str = f"skycompose/{__version__}"

    http_proxy: str | None = None

    # ── CLI ─────────────────────────────────────────────────────────────
    editor: str = "nvim"

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        parsed = urlparse(self.service_url)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"service_url must be an http(s) URL, got {self.service_url!r}")
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"service_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your credentials, or target localhost for testing."
            )

        if not self.section_separator:
            raise ValueError("section_separator must not be empty")
        if not self.clipboard_marker:
            raise ValueError("clipboard_marker must not be empty")
        if not 1 <= self.max_images <= GALLERY_LIMIT:
            raise ValueError(
                f"max_images must be between 1 and {GALLERY_LIMIT}, got {self.max_images}"
            )
        if self.image_max_concurrent < 1:
            raise ValueError(f"image_max_concurrent must be >= 1, got {self.image_max_concurrent}")
        if not self.allowed_mimes:
            raise ValueError("allowed_mimes must not be empty")
        if self.fetch_timeout_seconds is not None and self.fetch_timeout_seconds <= 0:
            raise ValueError(
                f"fetch_timeout_seconds must be > 0 or None, got {self.fetch_timeout_seconds}"
            )

    @classmethod
    def from_env(cls, **overrides: Any) -> ComposerConfig:
        """Build a config from the environment and a ``.env`` file, if any.

        Reads ``SKYCOMPOSE_HANDLE``, ``SKYCOMPOSE_PASSWORD``,
        ``SKYCOMPOSE_SERVICE_URL``, ``SKYCOMPOSE_SESSION_FILE`` and
        ``EDITOR``.  The ``.env`` file is searched from the current
        directory upwards and never overrides variables already set.
        Keyword arguments win over environment values.
        """
        load_dotenv(find_dotenv(usecwd=True))
        values: dict[str, Any] = {
            "handle": os.environ.get("SKYCOMPOSE_HANDLE", ""),
            "password": os.environ.get("SKYCOMPOSE_PASSWORD", ""),
            "service_url": os.environ.get("SKYCOMPOSE_SERVICE_URL", DEFAULT_SERVICE_URL),
            "session_file": os.environ.get(
                "SKYCOMPOSE_SESSION_FILE", str(default_session_file())
            ),
        }
        editor = os.environ.get("EDITOR")
        if editor:
            values["editor"] = editor
        values.update(overrides)
        return cls(**values)

    def __repr__(self) -> str:
        """Mask the password to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "password":
                parts.append("password='****'" if val else "password=''")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"ComposerConfig({', '.join(parts)})"
