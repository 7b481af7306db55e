"""Image pipeline: sniff, read, measure and upload gallery images.

Exports
-------
validate_mime / sniff_mime
    Content-based MIME detection against the allow-list.
resolve_source
    Read a file or clipboard token into validated bytes.
measure_image / upload_blob
    Pixel dimensions and the remote upload step.
Clipboard / WaylandClipboard / BlobStore
    Collaborator protocols and the default clipboard.
"""

from .clipboard import Clipboard, WaylandClipboard
from .source import read_clipboard_image, read_image_file, resolve_source
from .upload import BlobStore, measure_image, upload_blob
from .validate import sniff_mime, validate_mime

__all__ = [
    "BlobStore",
    "Clipboard",
    "WaylandClipboard",
    "measure_image",
    "read_clipboard_image",
    "read_image_file",
    "resolve_source",
    "sniff_mime",
    "upload_blob",
    "validate_mime",
]
