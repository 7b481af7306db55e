"""Upload raw bytes to the remote blob store.

:func:`upload_blob` wraps the remote upload collaborator: whatever it
raises is surfaced as :class:`SkyComposeUploadError` with the
collaborator's message attached, and the size it reports back must match
the bytes that were sent.  :func:`measure_image` supplies the width and
height that the gallery embed needs for its aspect ratio.
"""

from __future__ import annotations

import io
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from skycompose.errors import SkyComposeImageDecodeError, SkyComposeUploadError
from skycompose.models import BlobRef, UploadedBlob
from skycompose.observability import MetricsHook, get_logger
from skycompose.observability.metrics import resolve_metrics

log = get_logger("skycompose.upload")


class BlobStore(Protocol):
    """Remote upload collaborator.

    ``upload_blob`` stores *data* and returns an opaque blob reference
    that includes the stored ``size``.  It must be safe to call from
    several tasks at once.
    """

    async def upload_blob(self, data: bytes) -> BlobRef:
        ...


def measure_image(data: bytes) -> tuple[int, int]:
    """Return ``(width, height)`` of the image in *data*.

    Only the header is parsed; pixel data is not decoded.

    Raises
    ------
    SkyComposeImageDecodeError
        If Pillow cannot identify the image.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise SkyComposeImageDecodeError(
            message=f"Cannot read image dimensions: {exc}",
            context={"size_bytes": len(data)},
            cause=exc,
        ) from exc
    return width, height


async def upload_blob(
    store: BlobStore,
    data: bytes,
    metrics: MetricsHook | None = None,
) -> UploadedBlob:
    """Upload *data* through *store*.

    Raises
    ------
    SkyComposeUploadError
        If the collaborator fails, or reports a size different from
        ``len(data)``.
    """
    metrics = resolve_metrics(metrics)
    try:
        blob_ref = await store.upload_blob(data)
    except Exception as exc:
        metrics.increment("skycompose.upload_failure_total")
        log.warning(
            "Blob upload failed",
            extra={"extra_fields": {"op": "upload_blob", "size": len(data), "error": str(exc)}},
        )
        raise SkyComposeUploadError(
            message=f"Upload failed: {exc}",
            context={"size_bytes": len(data)},
            cause=exc,
        ) from exc

    reported = blob_ref.get("size", len(data))
    if reported != len(data):
        metrics.increment("skycompose.upload_failure_total")
        raise SkyComposeUploadError(
            message=f"Upload size mismatch: sent {len(data)} bytes, store reported {reported}",
            context={"size_bytes": len(data), "reported_size": reported},
        )

    metrics.increment("skycompose.upload_success_total")
    log.debug(
        "Blob uploaded",
        extra={"extra_fields": {"op": "upload_blob", "size": len(data)}},
    )
    return UploadedBlob(blob_ref=blob_ref, size=len(data))
