"""Shared test fixtures for the skycompose test suite."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from skycompose.config import ComposerConfig


def make_image_bytes(width: int = 4, height: int = 3, fmt: str = "PNG") -> bytes:
    """Encode a solid-colour image with Pillow."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buf, format=fmt)
    return buf.getvalue()


class FakeBlobStore:
    """In-memory upload collaborator that records every upload."""

    def __init__(self, fail_on: int | None = None, size_delta: int = 0) -> None:
        self.uploads: list[bytes] = []
        self._fail_on = fail_on
        self._size_delta = size_delta

    async def upload_blob(self, data: bytes) -> dict[str, Any]:
        self.uploads.append(data)
        if self._fail_on is not None and len(self.uploads) == self._fail_on:
            raise RuntimeError("storage unavailable")
        return {
            "$type": "blob",
            "ref": {"$link": f"bafkrei{len(self.uploads):04d}"},
            "mimeType": "application/octet-stream",
            "size": len(data) + self._size_delta,
        }


class FakeClipboard:
    """Clipboard collaborator holding a fixed set of typed payloads."""

    def __init__(self, contents: dict[str, bytes] | None = None) -> None:
        self.contents = dict(contents or {})
        self.reads: list[str] = []

    def list_mime_types(self) -> set[str]:
        return set(self.contents)

    def read_bytes(self, mime_type: str) -> bytes:
        self.reads.append(mime_type)
        return self.contents[mime_type]


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(self, name: str, ms: float, tags: dict[str, str] | None = None) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def names(self) -> list[str]:
        return [entry["name"] for entry in self.increments]


class StaticSuffixChecker:
    """Suffix checker that knows a fixed set of top-level suffixes."""

    def __init__(self, known: tuple[str, ...] = ("com", "org", "net", "social")) -> None:
        self._known = known

    def is_known_suffix(self, domain: str) -> bool:
        return domain.rsplit(".", 1)[-1] in self._known


@pytest.fixture
def config(tmp_path: Path) -> ComposerConfig:
    """Test configuration with dummy credentials and a temp session file."""
    return ComposerConfig(
        handle="alice.test",
        password="app-password",
        session_file=str(tmp_path / "session.json"),
    )


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes(4, 3, "PNG")


@pytest.fixture
def png_file(tmp_path: Path, png_bytes: bytes) -> Path:
    path = tmp_path / "photo.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def suffix_checker() -> StaticSuffixChecker:
    return StaticSuffixChecker()


@pytest.fixture
def metrics() -> RecordingMetricsHook:
    return RecordingMetricsHook()
